"""FilmBox: ticket storefront API (auth, orders, movie catalog proxy)."""

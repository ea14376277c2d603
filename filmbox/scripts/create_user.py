"""
Create a storefront user from the shell (e.g. a staff or test account). Run from project root:
  python -m filmbox.scripts.create_user NAME EMAIL PASSWORD
Example:
  python -m filmbox.scripts.create_user "Box Office" boxoffice@example.com 'Secret123!'
"""
import argparse
import logging
import sys

from filmbox.api.auth import normalize_email
from filmbox.core.config import get_settings
from filmbox.core.database import DuplicateEmailError, PersistenceError, PersistenceGateway
from filmbox.core.security import hash_password, password_problem

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, gateway: PersistenceGateway | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a FilmBox user.")
    parser.add_argument("name", help="Display name (1-100 chars)")
    parser.add_argument("email", help="Email address (stored lower-cased)")
    parser.add_argument("password", help="Password (8+ chars, digit, uppercase, symbol)")
    args = parser.parse_args(argv)

    name = args.name.strip()
    if not name or len(name) > 100:
        print("Invalid name length.", file=sys.stderr)
        return 1
    email = normalize_email(args.email)
    if not email:
        print("Email is required.", file=sys.stderr)
        return 1
    problem = password_problem(args.password)
    if problem:
        print(problem, file=sys.stderr)
        return 1

    owns_gateway = gateway is None
    if gateway is None:
        gateway = PersistenceGateway.from_settings(get_settings())
    try:
        if not gateway.check_connection():
            print("Database unreachable; check DATABASE_URL.", file=sys.stderr)
            return 1
        gateway.initialize()
        user = gateway.insert_user(name=name, email=email, password_hash=hash_password(args.password))
    except DuplicateEmailError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    except PersistenceError as e:
        logger.error("Create user failed: %s", e.message, exc_info=e.cause)
        return 1
    finally:
        if owns_gateway:
            gateway.dispose()
    print(f"Created user '{user.email}' with id {user.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

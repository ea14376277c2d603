"""Core app configuration and database."""

from filmbox.core.config import get_settings, settings
from filmbox.core.database import PersistenceGateway, get_gateway

__all__ = ["get_settings", "settings", "PersistenceGateway", "get_gateway"]

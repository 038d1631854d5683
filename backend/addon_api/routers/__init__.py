"""Router exports for the addon API."""
from . import addon, health, refresh

__all__ = ["addon", "health", "refresh"]

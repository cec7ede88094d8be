"""Core app configuration, storage, and security."""

from app.core.config import get_settings, settings
from app.core.database import CredentialStore, create_store, get_store

__all__ = ["CredentialStore", "create_store", "get_settings", "get_store", "settings"]

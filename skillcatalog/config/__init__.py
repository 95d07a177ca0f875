"""Catalog settings."""

from skillcatalog.config.settings import (
    CatalogSettings,
    SETTINGS_FILENAME,
    load_settings,
)

__all__ = ["CatalogSettings", "SETTINGS_FILENAME", "load_settings"]

"""Shared building blocks: result accumulation and the error hierarchy."""

from skillcatalog.core.errors import (
    CatalogError,
    ConfigError,
    GroupConfigError,
    SkillMetadataError,
)
from skillcatalog.core.results import ValidationResult

__all__ = [
    "CatalogError",
    "ConfigError",
    "GroupConfigError",
    "SkillMetadataError",
    "ValidationResult",
]

"""Exception hierarchy for catalog maintenance."""

from __future__ import annotations

from typing import List, Optional


class CatalogError(Exception):
    """Base exception for catalog operations."""

    pass


class SkillMetadataError(CatalogError):
    """A skill directory has missing or unusable SKILL.md metadata."""

    def __init__(self, folder_name: str, reason: str):
        self.folder_name = folder_name
        self.reason = reason
        super().__init__(f'Skill "{folder_name}": {reason}')


class GroupConfigError(CatalogError):
    """The plugin grouping document failed validation.

    Carries every problem found, so callers can report all of them at once.
    """

    def __init__(self, errors: List[str], path: Optional[str] = None):
        self.errors = list(errors)
        self.path = path
        count = len(self.errors)
        where = f" in {path}" if path else ""
        super().__init__(f"{count} plugin group error(s){where}")


class ConfigError(CatalogError):
    """Settings file could not be loaded."""

    pass

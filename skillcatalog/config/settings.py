"""Catalog Settings: file locations and fixed conventions for one repository.

Settings come from three layers, later ones winning:
1. Dataclass defaults
2. Optional ``skillcatalog.json`` in the repository root
3. Explicit overrides (CLI options)
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from skillcatalog.core.errors import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "skillcatalog.json"


def _default_owner() -> Dict[str, str]:
    return {"name": "Community", "email": ""}


def _default_metadata() -> Dict[str, str]:
    return {
        "description": "Community-shared AI agent skills for Claude Code",
        "version": "1.0.0",
    }


@dataclass
class CatalogSettings:
    """Catalog Settings: where things live and how they are named"""

    root: Path = field(default_factory=Path.cwd)

    # Inputs
    skills_dir: str = "skills"
    metadata_file: str = "SKILL.md"
    groups_file: str = "plugin-groups.yaml"

    # Generated artifacts
    manifest_file: str = ".claude-plugin/marketplace.json"
    readme_file: str = "README.md"

    # Naming rules
    plugin_suffix: str = "-skills"
    plugin_source: str = "./"
    author_placeholder: str = "-"

    # Manifest defaults, used only when the existing manifest lacks them
    default_name: str = "awesome-ai-agent-skills"
    default_owner: Dict[str, str] = field(default_factory=_default_owner)
    default_metadata: Dict[str, str] = field(default_factory=_default_metadata)

    @property
    def skills_path(self) -> Path:
        return self.resolve(self.skills_dir)

    @property
    def groups_path(self) -> Path:
        return self.resolve(self.groups_file)

    @property
    def manifest_path(self) -> Path:
        return self.resolve(self.manifest_file)

    @property
    def readme_path(self) -> Path:
        return self.resolve(self.readme_file)

    @property
    def lock_path(self) -> Path:
        return self.manifest_path.parent / ".sync.lock"

    def resolve(self, value: str) -> Path:
        """Resolve a configured path against the repository root"""
        path = Path(value)
        if path.is_absolute():
            return path
        return self.root / path

    def skill_locator(self, folder_name: str) -> str:
        """Manifest locator for a skill folder, e.g. ``./skills/foo``"""
        prefix = Path(self.skills_dir).as_posix().strip("/")
        return f"./{prefix}/{folder_name}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["root"] = str(self.root)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], root: Optional[Path] = None) -> "CatalogSettings":
        """Create from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)} - {"root"}
        unknown = sorted(set(data) - known - {"root"})
        if unknown:
            logger.warning(f"Ignoring unknown settings: {', '.join(unknown)}")

        values = {k: v for k, v in data.items() if k in known}
        for key in ("default_owner", "default_metadata"):
            if key in values and not isinstance(values[key], dict):
                raise ConfigError(f'Setting "{key}" must be an object')
        for key, value in values.items():
            if key not in ("default_owner", "default_metadata") and not isinstance(value, str):
                raise ConfigError(f'Setting "{key}" must be a string')

        return cls(root=root or Path.cwd(), **values)


def load_settings(
    root: Optional[Path] = None,
    config_path: Optional[Path] = None,
    **overrides: Any,
) -> CatalogSettings:
    """Load settings for a repository.

    Args:
        root: Repository root (defaults to the current directory)
        config_path: Explicit settings file. When omitted, ``skillcatalog.json``
            in the root is used if it exists.
        **overrides: Field values that take precedence over the file;
            ``None`` values are ignored.

    Returns:
        CatalogSettings instance

    Raises:
        ConfigError: If the settings file is unreadable or malformed
    """
    root = Path(root) if root is not None else Path.cwd()

    if config_path is None:
        candidate = root / SETTINGS_FILENAME
        config_path = candidate if candidate.exists() else None
    elif not Path(config_path).exists():
        raise ConfigError(f"Settings file not found: {config_path}")

    data: Dict[str, Any] = {}
    if config_path is not None:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load settings from {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {config_path} must contain a JSON object")
        logger.info(f"Loaded settings from {config_path}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return CatalogSettings.from_dict(data, root=root)

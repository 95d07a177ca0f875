"""Marketplace Manifest Reconciler.

This module owns the ``plugins`` list of ``.claude-plugin/marketplace.json``.
Everything else in the file (``name``, ``owner``, ``metadata`` and any other
top-level key) belongs to the maintainers and is carried over verbatim.

``plugins`` is rebuilt from the validated groups on every run; the previous
value is only read to compute which plugins were added or removed.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from skillcatalog.config.settings import CatalogSettings
from skillcatalog.core.results import ValidationResult
from skillcatalog.marketplace.groups import PluginGroup

logger = logging.getLogger(__name__)

OWNED_KEYS = ("name", "owner", "metadata")


@dataclass
class ManifestDiff:
    """Plugin names added and removed by a regeneration."""

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)

    @property
    def count(self) -> int:
        return len(self.added) + len(self.removed)


def read_manifest(path: Path) -> Tuple[Optional[Dict[str, Any]], ValidationResult]:
    """Read the existing manifest.

    Returns:
        Tuple of (manifest or None, result). An absent file is not a problem;
        an unreadable or malformed one is reported as a warning and treated
        as absent.
    """
    result = ValidationResult()
    path = Path(path)
    if not path.exists():
        return None, result

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        result.warn(f"Could not read existing {path.name}: {e}")
        return None, result

    if not isinstance(data, dict):
        result.warn(f"Existing {path.name} is not a JSON object, starting from defaults")
        return None, result

    return data, result


def previous_plugin_names(previous: Optional[Dict[str, Any]]) -> List[str]:
    """Plugin names in a previous manifest, in file order."""
    if not previous or not isinstance(previous.get("plugins"), list):
        return []
    names = []
    for plugin in previous["plugins"]:
        if isinstance(plugin, dict) and isinstance(plugin.get("name"), str):
            if plugin["name"] not in names:
                names.append(plugin["name"])
    return names


def plugin_entry(group: PluginGroup, settings: CatalogSettings) -> Dict[str, Any]:
    return {
        "name": group.name,
        "description": group.description,
        "source": settings.plugin_source,
        "strict": False,
        "skills": [settings.skill_locator(ref) for ref in group.skills],
    }


def build_manifest(
    groups: Sequence[PluginGroup],
    previous: Optional[Dict[str, Any]],
    settings: CatalogSettings,
) -> Dict[str, Any]:
    """Build the next manifest content.

    Args:
        groups: Validated plugin groups
        previous: Existing manifest, or None
        settings: Catalog settings (defaults, locators)

    Returns:
        Manifest dictionary ready for serialization
    """
    previous = previous or {}
    defaults = {
        "name": settings.default_name,
        "owner": settings.default_owner,
        "metadata": settings.default_metadata,
    }

    manifest: Dict[str, Any] = {}
    for key in OWNED_KEYS:
        value = previous.get(key)
        manifest[key] = copy.deepcopy(value if value else defaults[key])

    # Keys the engine does not know about stay where the maintainers put them
    for key, value in previous.items():
        if key not in OWNED_KEYS and key != "plugins":
            manifest[key] = copy.deepcopy(value)

    manifest["plugins"] = [plugin_entry(group, settings) for group in groups]
    return manifest


def diff_plugins(
    previous: Optional[Dict[str, Any]],
    groups: Sequence[PluginGroup],
) -> ManifestDiff:
    """Compare plugin name sets.

    ``added`` follows group order, ``removed`` follows the previous file.
    """
    before = previous_plugin_names(previous)
    after = [group.name for group in groups]
    before_set, after_set = set(before), set(after)
    return ManifestDiff(
        added=[name for name in after if name not in before_set],
        removed=[name for name in before if name not in after_set],
    )


def render_manifest(manifest: Dict[str, Any]) -> str:
    """Serialize a manifest: 2-space indent, UTF-8 kept as-is, trailing newline"""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def reconcile_manifest(
    groups: Sequence[PluginGroup],
    path: Path,
    settings: CatalogSettings,
) -> Tuple[ManifestDiff, ValidationResult]:
    """Regenerate the manifest file from validated groups.

    The file is always rewritten so its formatting stays canonical.

    Returns:
        Tuple of (diff, result); result carries warnings about an unreadable
        previous manifest.
    """
    path = Path(path)
    previous, result = read_manifest(path)

    manifest = build_manifest(groups, previous, settings)
    diff = diff_plugins(previous, groups)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(render_manifest(manifest))

    logger.info(
        f"Wrote {path} ({len(groups)} plugin(s), "
        f"+{len(diff.added)} -{len(diff.removed)})"
    )
    return diff, result


__all__ = [
    "ManifestDiff",
    "read_manifest",
    "previous_plugin_names",
    "plugin_entry",
    "build_manifest",
    "diff_plugins",
    "render_manifest",
    "reconcile_manifest",
]

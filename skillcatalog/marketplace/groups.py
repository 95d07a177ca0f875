"""Plugin Group Loader and Validator.

The grouping document assigns every skill to exactly one distributable
plugin bundle:

    plugins:
      - name: demo-skills
        description: Demo bundle
        skills:
          - foo
          - bar

Validation Layers:
1. Structural: document parses, has a ``plugins`` list, each entry has
   name/description/skills
2. Naming: plugin names are unique and end with the reserved suffix
3. Referential: every referenced skill exists, none is listed twice,
   none is left out

All problems are collected before anything is reported, so one run shows
the whole list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import yaml

from skillcatalog.core.errors import GroupConfigError
from skillcatalog.core.results import ValidationResult
from skillcatalog.skills.manifest import Skill

logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_SUFFIX = "-skills"


@dataclass
class PluginGroup:
    """A validated plugin bundle."""

    name: str
    description: str
    skills: List[str] = field(default_factory=list)  # skill folder names, in document order


def read_groups_document(path: Path) -> Any:
    """Read and parse the grouping document.

    Raises:
        GroupConfigError: If the file is missing or is not valid YAML
    """
    path = Path(path)
    if not path.is_file():
        raise GroupConfigError([f"Plugin groups file not found: {path}"], path=str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise GroupConfigError([f"Cannot read {path}: {e}"], path=str(path)) from e
    except yaml.YAMLError as e:
        raise GroupConfigError([f"{path}: Invalid YAML - {e}"], path=str(path)) from e


def _label(entry: Dict[str, Any], index: int) -> str:
    name = entry.get("name")
    if isinstance(name, str) and name.strip():
        return f'Plugin "{name.strip()}"'
    return f"Plugin #{index + 1}"


def validate_groups(
    data: Any,
    skills: Sequence[Skill],
    suffix: str = DEFAULT_PLUGIN_SUFFIX,
) -> Tuple[List[PluginGroup], ValidationResult]:
    """Validate a parsed grouping document against the discovered skills.

    Args:
        data: Parsed grouping document
        skills: Valid skills from the extractor
        suffix: Reserved suffix every plugin name must end with

    Returns:
        Tuple of (groups, result). ``groups`` holds every entry that was
        well-formed enough to build; it is only meaningful when
        ``result.ok`` is True.
    """
    result = ValidationResult()
    groups: List[PluginGroup] = []

    if not isinstance(data, dict) or not isinstance(data.get("plugins"), list):
        result.error('Missing or invalid "plugins" list')
        return groups, result

    known = {s.folder_name for s in skills}
    owners: Dict[str, List[str]] = {}
    seen_names: Dict[str, int] = {}

    for index, entry in enumerate(data["plugins"]):
        if not isinstance(entry, dict):
            result.error(f"Plugin #{index + 1}: Entry must be a mapping")
            continue

        label = _label(entry, index)

        # ==================== STRUCTURAL ====================
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            result.error(f'{label}: Missing "name"')
            name = None
        else:
            name = name.strip()

        description = entry.get("description")
        if not isinstance(description, str) or not description.strip():
            result.error(f'{label}: Missing "description"')
            description = ""
        else:
            description = description.strip()

        refs = entry.get("skills")
        if not isinstance(refs, list) or not refs:
            result.error(f'{label}: "skills" must be a non-empty list')
            refs = []

        # ==================== NAMING ====================
        if name is not None:
            if not name.endswith(suffix):
                result.error(f'{label}: Name must end with "{suffix}"')
            if name in seen_names:
                result.error(f"{label}: Duplicate plugin name")
            seen_names[name] = index

        # ==================== REFERENTIAL ====================
        members: List[str] = []
        for ref in refs:
            if not isinstance(ref, str) or not ref.strip():
                result.error(f"{label}: Invalid skill reference {ref!r}")
                continue
            ref = ref.strip()
            if ref in members:
                result.error(f'{label}: Skill "{ref}" is listed more than once')
                continue
            members.append(ref)
            if ref not in known:
                result.error(f'{label}: Unknown skill "{ref}" (no valid skill folder with that name)')
            owners.setdefault(ref, []).append(name or label)

        if name is not None:
            groups.append(PluginGroup(name=name, description=description, skills=members))

    for ref, plugin_names in owners.items():
        if len(plugin_names) > 1:
            result.error(f'Skill "{ref}" is listed in multiple plugins: {", ".join(plugin_names)}')

    for skill in skills:
        if skill.folder_name not in owners:
            result.error(f'Skill "{skill.folder_name}" is not assigned to any plugin')

    logger.debug(f"Validated {len(groups)} plugin group(s), {len(result.errors)} error(s)")
    return groups, result


def load_groups(
    path: Path,
    skills: Sequence[Skill],
    suffix: str = DEFAULT_PLUGIN_SUFFIX,
) -> List[PluginGroup]:
    """Load and validate the grouping document.

    Returns:
        Validated plugin groups, in document order

    Raises:
        GroupConfigError: With every accumulated error if any check fails
    """
    data = read_groups_document(path)
    groups, result = validate_groups(data, skills, suffix=suffix)
    if not result.ok:
        raise GroupConfigError(result.errors, path=str(path))

    logger.info(f"Loaded {len(groups)} plugin group(s) from {path}")
    return groups


__all__ = [
    "DEFAULT_PLUGIN_SUFFIX",
    "PluginGroup",
    "read_groups_document",
    "validate_groups",
    "load_groups",
]

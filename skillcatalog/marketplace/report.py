"""Repository Validation Reporter.

Read-only counterpart of ``sync``: re-derives the skill set and checks that
the committed marketplace manifest still matches the skills folder and the
grouping document. Nothing is written.

Checks:
1. Skills: every folder has usable SKILL.md metadata (error); declared
   name matches the folder name (warning)
2. Manifest: present, valid JSON, conforms to marketplace.schema.json
3. Skill drift: folder-only and manifest-only skills, reported separately
4. Plugin drift: manifest plugins versus the grouping document
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from jsonschema import Draft7Validator, ValidationError as JsonSchemaValidationError

from skillcatalog.config.settings import CatalogSettings
from skillcatalog.core.errors import GroupConfigError, SkillMetadataError
from skillcatalog.core.results import ValidationResult
from skillcatalog.marketplace.groups import (
    PluginGroup,
    read_groups_document,
    validate_groups,
)
from skillcatalog.marketplace.manifest import plugin_entry
from skillcatalog.skills.manifest import Skill, list_skill_dirs, load_skill

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "marketplace.schema.json"


@dataclass
class ValidationReport:
    """Everything one validation pass found."""

    skill_dirs: List[str] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    result: ValidationResult = field(default_factory=ValidationResult)

    @property
    def exit_code(self) -> int:
        return 0 if self.result.ok else 1


def load_manifest_schema() -> Dict[str, Any]:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def _format_schema_error(error: JsonSchemaValidationError) -> str:
    path = ".".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
    return f"{path}: {error.message}"


def check_skills(settings: CatalogSettings, report: ValidationReport) -> None:
    """Validate every skill folder's metadata."""
    skills_path = settings.skills_path
    if not skills_path.is_dir():
        report.result.error(f"Skills directory not found: {skills_path}")
        return

    report.skill_dirs = list_skill_dirs(skills_path)
    for folder_name in report.skill_dirs:
        try:
            skill = load_skill(skills_path / folder_name, settings.metadata_file)
        except SkillMetadataError as e:
            report.result.error(str(e))
            continue

        if skill.name != folder_name:
            report.result.warn(
                f'Skill "{folder_name}": Frontmatter name "{skill.name}" '
                f"doesn't match folder name"
            )
        report.skills.append(skill)


def check_manifest(settings: CatalogSettings, result: ValidationResult) -> Optional[Dict[str, Any]]:
    """Load the manifest and validate its shape.

    Returns:
        The manifest dictionary when it parsed as a JSON object, else None
    """
    path = settings.manifest_path
    label = settings.manifest_file

    if not path.is_file():
        result.error(f"Missing {label}")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            manifest = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        result.error(f"{label}: Invalid JSON - {e}")
        return None

    validator = Draft7Validator(load_manifest_schema())
    schema_errors = sorted(validator.iter_errors(manifest), key=lambda e: [str(p) for p in e.absolute_path])
    for error in schema_errors:
        result.error(f"{label}: {_format_schema_error(error)}")

    if not isinstance(manifest, dict):
        return None
    return manifest


def manifest_skill_names(manifest: Dict[str, Any], settings: CatalogSettings) -> List[str]:
    """Skill folder names referenced by a manifest.

    Locators are read from ``plugins[].skills`` and, for per-skill manifests,
    from ``plugins[].source``.
    """
    prefix = settings.skill_locator("")
    names: List[str] = []

    plugins = manifest.get("plugins")
    if not isinstance(plugins, list):
        return names

    for plugin in plugins:
        if not isinstance(plugin, dict):
            continue
        skills = plugin.get("skills")
        locators = list(skills) if isinstance(skills, list) else []
        locators.append(plugin.get("source"))
        for locator in locators:
            if not isinstance(locator, str) or not locator.startswith(prefix):
                continue
            name = locator[len(prefix):].strip("/")
            if name and name not in names:
                names.append(name)
    return names


def check_skill_drift(
    skill_dirs: List[str],
    manifest: Dict[str, Any],
    settings: CatalogSettings,
    result: ValidationResult,
) -> None:
    label = Path(settings.manifest_file).name
    in_manifest = manifest_skill_names(manifest, settings)
    in_folder: Set[str] = set(skill_dirs)

    for name in skill_dirs:
        if name not in in_manifest:
            result.error(f'Skill "{name}" exists in folder but not in {label}')

    for name in in_manifest:
        if name not in in_folder:
            result.error(f'Skill "{name}" in {label} but not found in skills folder')


def check_plugin_drift(
    groups: List[PluginGroup],
    manifest: Dict[str, Any],
    settings: CatalogSettings,
    result: ValidationResult,
) -> None:
    manifest_label = Path(settings.manifest_file).name
    groups_label = Path(settings.groups_file).name

    plugins = manifest.get("plugins")
    if not isinstance(plugins, list):
        return

    actual: Dict[str, Dict[str, Any]] = {}
    for plugin in plugins:
        if isinstance(plugin, dict) and isinstance(plugin.get("name"), str):
            actual.setdefault(plugin["name"], plugin)

    expected = {group.name: plugin_entry(group, settings) for group in groups}

    for name, entry in expected.items():
        plugin = actual.get(name)
        if plugin is None:
            result.error(f'Plugin "{name}" defined in {groups_label} but missing from {manifest_label}')
            continue
        if plugin.get("skills") != entry["skills"]:
            result.error(f'Plugin "{name}": skills in {manifest_label} differ from {groups_label}')
        if plugin.get("description") != entry["description"]:
            result.error(f'Plugin "{name}": description in {manifest_label} differs from {groups_label}')

    for name in actual:
        if name not in expected:
            result.error(f'Plugin "{name}" in {manifest_label} but not defined in {groups_label}')


def check_groups(settings: CatalogSettings, report: ValidationReport) -> Optional[List[PluginGroup]]:
    """Validate the grouping document without aborting.

    Returns:
        The groups when the document is valid, else None
    """
    path = settings.groups_path
    label = settings.groups_file

    if not path.is_file():
        report.result.warn(f"{label} not found, skipping plugin drift check")
        return None

    try:
        data = read_groups_document(path)
    except GroupConfigError as e:
        report.result.errors.extend(e.errors)
        return None

    groups, group_result = validate_groups(data, report.skills, suffix=settings.plugin_suffix)
    for message in group_result.errors:
        report.result.error(f"{label}: {message}")
    return groups if group_result.ok else None


def validate_repository(settings: CatalogSettings) -> ValidationReport:
    """Run every read-only check against a repository."""
    report = ValidationReport()

    check_skills(settings, report)
    logger.info(f"Checked {len(report.skill_dirs)} skill folder(s)")

    manifest = check_manifest(settings, report.result)
    if manifest is not None:
        check_skill_drift(report.skill_dirs, manifest, settings, report.result)

    groups = check_groups(settings, report)
    if groups is not None and manifest is not None:
        check_plugin_drift(groups, manifest, settings, report.result)

    logger.info(
        f"Validation finished: {len(report.result.errors)} error(s), "
        f"{len(report.result.warnings)} warning(s)"
    )
    return report


__all__ = [
    "ValidationReport",
    "load_manifest_schema",
    "check_skills",
    "check_manifest",
    "manifest_skill_names",
    "check_skill_drift",
    "check_plugin_drift",
    "check_groups",
    "validate_repository",
]

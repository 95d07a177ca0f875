"""Skill Metadata Extractor.

This module provides:
- Skill dataclass for the metadata declared in a skill's SKILL.md
- parse_frontmatter() for reading the fenced YAML header
- load_skill() for loading one skill directory
- discover_skills() for scanning a skills root without aborting on bad entries

SKILL.md layout:

    ---
    name: foo
    description: Does foo
    author: someone        # optional
    ---
    (free-form markdown body, not inspected)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from skillcatalog.core.errors import SkillMetadataError
from skillcatalog.core.results import ValidationResult

logger = logging.getLogger(__name__)

# Leading fenced block; the body after the closing fence is ignored
FRONTMATTER_PATTERN = re.compile(r"^---\n([\s\S]*?)\n---")

REQUIRED_FIELDS = ("name", "description")


@dataclass
class Skill:
    """One skill directory with valid metadata.

    ``folder_name`` is the identity; ``name`` is what the author declared
    and normally matches it.
    """

    folder_name: str
    name: str
    description: str
    author: Optional[str] = None
    path: Optional[Path] = None


@dataclass
class SkillScan:
    """Result of scanning a skills root."""

    skills: List[Skill] = field(default_factory=list)
    result: ValidationResult = field(default_factory=ValidationResult)

    @property
    def folder_names(self) -> List[str]:
        return [s.folder_name for s in self.skills]

    def by_folder(self) -> Dict[str, Skill]:
        return {s.folder_name: s for s in self.skills}


def parse_frontmatter(content: str) -> Optional[Dict[str, Any]]:
    """Parse the YAML front matter at the top of a markdown document.

    Returns:
        The parsed mapping, or None if the fence is missing, the YAML is
        invalid, or it does not describe a mapping.
    """
    content = content.replace("\r\n", "\n")
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.debug(f"Front matter is not valid YAML: {e}")
        return None

    if not isinstance(data, dict):
        return None
    return data


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def load_skill(skill_dir: Path, metadata_file: str = "SKILL.md") -> Skill:
    """Load one skill directory.

    Args:
        skill_dir: Directory holding the skill
        metadata_file: Name of the metadata file inside it

    Returns:
        Skill instance

    Raises:
        SkillMetadataError: If the metadata file is missing, has no parsable
            front matter, or lacks a required field
    """
    skill_dir = Path(skill_dir)
    folder_name = skill_dir.name
    metadata_path = skill_dir / metadata_file

    if not metadata_path.is_file():
        raise SkillMetadataError(folder_name, f"Missing {metadata_file} file")

    try:
        content = metadata_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SkillMetadataError(folder_name, f"Cannot read {metadata_file}: {e}") from e

    data = parse_frontmatter(content)
    if data is None:
        raise SkillMetadataError(folder_name, f"{metadata_file} has no valid YAML frontmatter")

    missing = [key for key in REQUIRED_FIELDS if _text(data.get(key)) is None]
    if missing:
        fields_text = ", ".join(f'"{key}"' for key in missing)
        raise SkillMetadataError(folder_name, f"Missing {fields_text} in frontmatter")

    return Skill(
        folder_name=folder_name,
        name=_text(data["name"]),
        description=_text(data["description"]),
        author=_text(data.get("author")),
        path=skill_dir,
    )


def list_skill_dirs(skills_dir: Path) -> List[str]:
    """Names of every immediate, non-hidden sub-directory, sorted."""
    skills_dir = Path(skills_dir)
    if not skills_dir.is_dir():
        return []
    return sorted(
        entry.name
        for entry in skills_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def discover_skills(skills_dir: Path, metadata_file: str = "SKILL.md") -> SkillScan:
    """Scan a skills root for valid skills.

    Invalid directories are skipped and recorded as warnings on the returned
    scan; they never stop the scan.

    Args:
        skills_dir: Root directory containing one sub-directory per skill
        metadata_file: Metadata file name expected in each skill directory

    Returns:
        SkillScan with valid skills in directory-name order
    """
    skills_dir = Path(skills_dir)
    scan = SkillScan()

    if not skills_dir.is_dir():
        scan.result.warn(f"Skills directory not found: {skills_dir}")
        return scan

    for folder_name in list_skill_dirs(skills_dir):
        try:
            skill = load_skill(skills_dir / folder_name, metadata_file)
        except SkillMetadataError as e:
            logger.info(f"Skipping {folder_name}: {e.reason}")
            scan.result.warn(f'Skipping "{folder_name}": {e.reason}')
            continue
        scan.skills.append(skill)

    logger.debug(f"Discovered {len(scan.skills)} valid skill(s) in {skills_dir}")
    return scan


__all__ = [
    "Skill",
    "SkillScan",
    "parse_frontmatter",
    "load_skill",
    "list_skill_dirs",
    "discover_skills",
]

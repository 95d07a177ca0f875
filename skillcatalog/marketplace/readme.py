"""README Table Renderer.

Maintains two tables in the documentation file:

- Skills table: one row per skill (name link, author, description)
- Plugins table: one row per plugin (name, description, member skill links)

Each table is located in priority order:
1. Between its ``<!-- ..._START -->`` / ``<!-- ..._END -->`` markers
   (markers kept, everything between them replaced)
2. As the first markdown table directly under its section heading
   (only the table is replaced; no markers are added)
3. Not found: the region is left alone and a warning is reported
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from skillcatalog.config.settings import CatalogSettings
from skillcatalog.core.results import ValidationResult
from skillcatalog.marketplace.groups import PluginGroup
from skillcatalog.skills.manifest import Skill

logger = logging.getLogger(__name__)

SKILL_LINK_SEPARATOR = ", "


class RegionOutcome(Enum):
    """How a table region was located."""
    MARKERS = "markers"
    HEADING = "heading"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class TableRegion:
    """A managed table in the documentation file."""
    key: str
    start_marker: str
    end_marker: str
    heading: str
    header: Tuple[str, ...]

    @property
    def header_lines(self) -> str:
        titles = "| " + " | ".join(self.header) + " |"
        rule = "|" + "|".join("-" * (len(title) + 2) for title in self.header) + "|"
        return f"{titles}\n{rule}"


SKILLS_REGION = TableRegion(
    key="skills",
    start_marker="<!-- SKILLS_TABLE_START -->",
    end_marker="<!-- SKILLS_TABLE_END -->",
    heading="## Available Skills",
    header=("Skill", "Author", "Description"),
)

PLUGINS_REGION = TableRegion(
    key="plugins",
    start_marker="<!-- PLUGINS_TABLE_START -->",
    end_marker="<!-- PLUGINS_TABLE_END -->",
    heading="## Available Plugins",
    header=("Plugin", "Description", "Skills"),
)


@dataclass
class ReadmeUpdate:
    """Outcome of a README refresh."""
    path: Path
    outcomes: Dict[str, RegionOutcome] = field(default_factory=dict)
    written: bool = False
    result: ValidationResult = field(default_factory=ValidationResult)


def escape_cell(text: str) -> str:
    """Make free text safe for a single markdown table cell"""
    text = " ".join(str(text).split())
    return text.replace("|", "\\|")


def skill_link(folder_name: str, label: str, settings: CatalogSettings) -> str:
    return f"[{escape_cell(label)}]({settings.skill_locator(folder_name)})"


def skill_row(skill: Skill, settings: CatalogSettings) -> str:
    author = escape_cell(skill.author) if skill.author else settings.author_placeholder
    return (
        f"| {skill_link(skill.folder_name, skill.name, settings)} "
        f"| {author} | {escape_cell(skill.description)} |"
    )


def plugin_row(group: PluginGroup, settings: CatalogSettings) -> str:
    links = SKILL_LINK_SEPARATOR.join(
        skill_link(ref, ref, settings) for ref in group.skills
    )
    return f"| {escape_cell(group.name)} | {escape_cell(group.description)} | {links} |"


def _table(region: TableRegion, rows: List[str]) -> str:
    return "\n".join([region.header_lines] + rows)


def render_skills_table(skills: Sequence[Skill], settings: CatalogSettings) -> str:
    return _table(SKILLS_REGION, [skill_row(s, settings) for s in skills])


def render_plugins_table(groups: Sequence[PluginGroup], settings: CatalogSettings) -> str:
    return _table(PLUGINS_REGION, [plugin_row(g, settings) for g in groups])


def _heading_table_pattern(region: TableRegion) -> "re.Pattern[str]":
    # heading, blank lines, header row, separator row, body rows
    return re.compile(
        r"(^" + re.escape(region.heading) + r"[ \t]*\r?\n(?:[ \t]*\r?\n)*)"
        r"\|[^\r\n]*\|[ \t]*\r?\n"
        r"\|[-:| \t]+\|[ \t]*(?:\r?\n|$)"
        r"(?:\|[^\r\n]*\|[ \t]*(?:\r?\n|$))*",
        re.MULTILINE,
    )


def replace_region(content: str, region: TableRegion, table: str) -> Tuple[str, RegionOutcome]:
    """Replace one managed table.

    Returns:
        Tuple of (new content, how the region was located)
    """
    start = content.find(region.start_marker)
    end = content.find(region.end_marker, start + len(region.start_marker)) if start != -1 else -1
    if start != -1 and end != -1:
        block = f"{region.start_marker}\n{table}\n{region.end_marker}"
        updated = content[:start] + block + content[end + len(region.end_marker):]
        return updated, RegionOutcome.MARKERS

    pattern = _heading_table_pattern(region)
    match = pattern.search(content)
    if match:
        newline = "\r\n" if "\r\n" in match.group(1) else "\n"
        table = table.replace("\n", newline) + newline
        updated = content[:match.start()] + match.group(1) + table + content[match.end():]
        return updated, RegionOutcome.HEADING

    return content, RegionOutcome.SKIPPED


def render_readme(
    content: str,
    skills: Sequence[Skill],
    groups: Sequence[PluginGroup],
    settings: CatalogSettings,
) -> Tuple[str, Dict[str, RegionOutcome]]:
    """Render both managed tables into ``content``."""
    outcomes: Dict[str, RegionOutcome] = {}
    tables = (
        (SKILLS_REGION, render_skills_table(skills, settings)),
        (PLUGINS_REGION, render_plugins_table(groups, settings)),
    )
    for region, table in tables:
        content, outcomes[region.key] = replace_region(content, region, table)
    return content, outcomes


def update_readme(
    path: Path,
    skills: Sequence[Skill],
    groups: Sequence[PluginGroup],
    settings: CatalogSettings,
) -> ReadmeUpdate:
    """Refresh the managed tables of the documentation file in place.

    The file is only written when its content actually changes.
    """
    path = Path(path)
    update = ReadmeUpdate(path=path)

    if not path.is_file():
        update.result.warn(f"{path.name} not found, skipping table update")
        return update

    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            original = f.read()
    except (OSError, UnicodeDecodeError) as e:
        update.result.warn(f"Could not read {path.name}, skipping table update: {e}")
        return update

    content, update.outcomes = render_readme(original, skills, groups, settings)

    for region in (SKILLS_REGION, PLUGINS_REGION):
        if update.outcomes[region.key] is RegionOutcome.SKIPPED:
            update.result.warn(
                f"Could not find {region.key} table in {path.name}. "
                f"Add {region.start_marker} / {region.end_marker} markers manually."
            )
        elif update.outcomes[region.key] is RegionOutcome.HEADING:
            logger.info(f"Located {region.key} table under '{region.heading}' (no markers)")

    if content != original:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            update.result.warn(f"Could not write {path.name}: {e}")
            return update
        update.written = True
        logger.info(f"Updated tables in {path}")

    return update


__all__ = [
    "RegionOutcome",
    "TableRegion",
    "SKILLS_REGION",
    "PLUGINS_REGION",
    "ReadmeUpdate",
    "escape_cell",
    "skill_row",
    "plugin_row",
    "render_skills_table",
    "render_plugins_table",
    "replace_region",
    "render_readme",
    "update_readme",
]

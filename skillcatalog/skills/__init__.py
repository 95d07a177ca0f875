"""Skill discovery: SKILL.md front matter extraction."""

from skillcatalog.skills.manifest import (
    Skill,
    SkillScan,
    discover_skills,
    list_skill_dirs,
    load_skill,
    parse_frontmatter,
)

__all__ = [
    "Skill",
    "SkillScan",
    "discover_skills",
    "list_skill_dirs",
    "load_skill",
    "parse_frontmatter",
]

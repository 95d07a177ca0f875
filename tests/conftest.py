"""Shared fixtures: throwaway skill repositories built under tmp_path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

import pytest
import yaml

from skillcatalog.config.settings import CatalogSettings

README_TEMPLATE = """# Demo Skills

Intro text.

## Available Skills

<!-- SKILLS_TABLE_START -->
<!-- SKILLS_TABLE_END -->

## Available Plugins

<!-- PLUGINS_TABLE_START -->
<!-- PLUGINS_TABLE_END -->

## License

MIT
"""


@pytest.fixture
def make_skill(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing skills/<folder>/SKILL.md."""

    def _make(
        folder: str,
        name: Optional[str] = None,
        description: Optional[str] = "Does something",
        author: Optional[str] = None,
        frontmatter: Optional[str] = None,
    ) -> Path:
        skill_dir = tmp_path / "skills" / folder
        skill_dir.mkdir(parents=True, exist_ok=True)
        if frontmatter is None:
            data = {"name": name if name is not None else folder}
            if description is not None:
                data["description"] = description
            if author is not None:
                data["author"] = author
            frontmatter = yaml.safe_dump(data, sort_keys=False).strip()
        (skill_dir / "SKILL.md").write_text(
            f"---\n{frontmatter}\n---\n\n# {folder}\n\nBody text.\n",
            encoding="utf-8",
        )
        return skill_dir

    return _make


@pytest.fixture
def write_groups(tmp_path: Path) -> Callable[[list], Path]:
    """Factory writing plugin-groups.yaml from a list of plugin dicts."""

    def _write(plugins: list) -> Path:
        path = tmp_path / "plugin-groups.yaml"
        path.write_text(yaml.safe_dump({"plugins": plugins}, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[dict], Path]:
    def _write(data: dict) -> Path:
        path = tmp_path / ".claude-plugin" / "marketplace.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def readme(tmp_path: Path) -> Path:
    path = tmp_path / "README.md"
    path.write_text(README_TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path) -> CatalogSettings:
    return CatalogSettings(root=tmp_path)


@pytest.fixture
def demo_repo(make_skill, write_groups, readme, tmp_path: Path) -> Path:
    """Scenario A layout: foo and bar grouped into demo-skills."""
    make_skill("foo", description="Does foo")
    make_skill("bar", description="Does bar")
    write_groups([
        {"name": "demo-skills", "description": "Demo bundle", "skills": ["foo", "bar"]},
    ])
    return tmp_path

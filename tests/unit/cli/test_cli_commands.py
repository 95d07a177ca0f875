"""End-to-end CLI tests for sync, validate and list."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from skillcatalog.cli.main import cli
from skillcatalog.core.utils.filelock import catalog_lock


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _run(runner: CliRunner, root: Path, *args: str):
    return runner.invoke(cli, ["--root", str(root), *args])


def _manifest(root: Path) -> dict:
    return json.loads((root / ".claude-plugin" / "marketplace.json").read_text(encoding="utf-8"))


class TestSync:
    def test_scenario_a_first_run_then_rerun(self, runner, demo_repo: Path):
        first = _run(runner, demo_repo, "sync")

        assert first.exit_code == 0, first.output
        assert "✅ Added: demo-skills" in first.output
        plugins = _manifest(demo_repo)["plugins"]
        assert [p["name"] for p in plugins] == ["demo-skills"]
        assert plugins[0]["skills"] == ["./skills/foo", "./skills/bar"]

        manifest_bytes = (demo_repo / ".claude-plugin" / "marketplace.json").read_bytes()
        readme_text = (demo_repo / "README.md").read_text(encoding="utf-8")

        second = _run(runner, demo_repo, "sync")

        assert second.exit_code == 0, second.output
        assert "Added:" not in second.output
        assert "Removed:" not in second.output
        assert "No changes to marketplace.json" in second.output
        assert "README.md already up to date" in second.output
        assert "0 change(s)" in second.output
        assert (demo_repo / ".claude-plugin" / "marketplace.json").read_bytes() == manifest_bytes
        assert (demo_repo / "README.md").read_text(encoding="utf-8") == readme_text

    def test_scenario_b_unassigned_skill(self, runner, demo_repo: Path, write_groups):
        write_groups([{"name": "demo-skills", "description": "Demo", "skills": ["foo"]}])

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 1
        assert '❌ Skill "bar" is not assigned to any plugin' in result.output
        assert not (demo_repo / ".claude-plugin" / "marketplace.json").exists()

    def test_scenario_c_skill_in_two_plugins(self, runner, demo_repo: Path, write_groups):
        write_groups([
            {"name": "demo-skills", "description": "Demo", "skills": ["foo", "bar"]},
            {"name": "extra-skills", "description": "Extra", "skills": ["foo"]},
        ])

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 1
        assert 'Skill "foo" is listed in multiple plugins' in result.output

    def test_scenario_d_removed_plugin(self, runner, demo_repo: Path, write_manifest):
        write_manifest({
            "name": "team-catalog",
            "owner": {"name": "Team", "email": "team@example.com"},
            "metadata": {"description": "Ours", "version": "2.0.0"},
            "plugins": [{"name": "old-skills", "source": "./", "skills": ["./skills/foo"]}],
        })

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 0, result.output
        assert "✅ Added: demo-skills" in result.output
        assert "🗑️  Removed: old-skills" in result.output
        data = _manifest(demo_repo)
        assert data["name"] == "team-catalog"
        assert data["owner"] == {"name": "Team", "email": "team@example.com"}
        assert data["metadata"] == {"description": "Ours", "version": "2.0.0"}

    @pytest.mark.parametrize(
        "plugins, fragment",
        [
            ([{"name": "demo-skills", "description": "D", "skills": ["foo", "bar", "nope"]}], '"nope"'),
            ([{"name": "demo", "description": "D", "skills": ["foo", "bar"]}], 'Plugin "demo"'),
        ],
    )
    def test_invalid_groups_exit_1_naming_the_entity(self, runner, demo_repo, write_groups, plugins, fragment):
        write_groups(plugins)
        result = _run(runner, demo_repo, "sync")
        assert result.exit_code == 1
        assert fragment in result.output

    def test_all_group_errors_reported_in_one_run(self, runner, demo_repo: Path, write_groups):
        write_groups([{"name": "demo", "description": "D", "skills": ["foo", "ghost"]}])

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 1
        assert result.output.count("❌ ") == 4  # three problems plus the closing count
        assert "3 error(s)" in result.output

    def test_skipped_skill_is_a_warning(self, runner, demo_repo: Path):
        (demo_repo / "skills" / "draft").mkdir()

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 0, result.output
        assert '⚠️  Skipping "draft": Missing SKILL.md file' in result.output
        assert "Summary: 2 skill(s) processed" in result.output
        assert "1 warning(s)" in result.output

    def test_readme_tables_are_rendered(self, runner, demo_repo: Path):
        _run(runner, demo_repo, "sync")
        text = (demo_repo / "README.md").read_text(encoding="utf-8")
        assert "| [bar](./skills/bar) | - | Does bar |" in text
        assert "| demo-skills | Demo bundle | [foo](./skills/foo), [bar](./skills/bar) |" in text

    def test_missing_readme_does_not_fail(self, runner, demo_repo: Path):
        (demo_repo / "README.md").unlink()
        result = _run(runner, demo_repo, "sync")
        assert result.exit_code == 0
        assert "README.md not found" in result.output

    def test_undecodable_readme_is_a_warning(self, runner, demo_repo: Path):
        (demo_repo / "README.md").write_bytes(b"# x\n\xff\xfe\n")

        result = _run(runner, demo_repo, "sync")

        assert result.exit_code == 0, result.output
        assert "⚠️  Could not read README.md" in result.output
        assert "Summary: 2 skill(s) processed" in result.output
        assert _manifest(demo_repo)["plugins"][0]["name"] == "demo-skills"
        assert (demo_repo / "README.md").read_bytes() == b"# x\n\xff\xfe\n"

    def test_lock_flag(self, runner, demo_repo: Path):
        result = _run(runner, demo_repo, "sync", "--lock")
        assert result.exit_code == 0, result.output
        assert (demo_repo / ".claude-plugin" / ".sync.lock").exists()

    def test_lock_contention_aborts_without_writing(self, runner, demo_repo: Path):
        with catalog_lock(demo_repo / ".claude-plugin" / ".sync.lock"):
            result = _run(runner, demo_repo, "sync", "--lock")
        assert result.exit_code == 1
        assert "Lock is held by another process" in result.output
        assert not (demo_repo / ".claude-plugin" / "marketplace.json").exists()
        assert "Summary: 0 skill(s) processed, 0 change(s), 1 error(s), 0 warning(s)" in result.output

    def test_bad_settings_file(self, runner, demo_repo: Path):
        (demo_repo / "skillcatalog.json").write_text("{", encoding="utf-8")
        result = _run(runner, demo_repo, "sync")
        assert result.exit_code == 1
        assert "❌ Failed to load settings" in result.output
        assert "Summary: 0 skill(s) processed, 0 change(s), 1 error(s), 0 warning(s)" in result.output


class TestValidate:
    def test_passes_after_sync(self, runner, demo_repo: Path):
        _run(runner, demo_repo, "sync")
        result = _run(runner, demo_repo, "validate")
        assert result.exit_code == 0, result.output
        assert "✅ All validations passed! (2 valid skills)" in result.output
        assert "0 error(s)" in result.output

    def test_drift_fails(self, runner, demo_repo: Path, make_skill):
        _run(runner, demo_repo, "sync")
        make_skill("baz")

        result = _run(runner, demo_repo, "validate")

        assert result.exit_code == 1
        assert '❌ Skill "baz" exists in folder but not in marketplace.json' in result.output

    def test_warnings_do_not_fail(self, runner, demo_repo: Path, make_skill):
        make_skill("foo", name="Foo", description="Does foo")
        _run(runner, demo_repo, "sync")

        result = _run(runner, demo_repo, "validate")

        assert result.exit_code == 0, result.output
        assert "⚠️  Skill \"foo\": Frontmatter name \"Foo\" doesn't match folder name" in result.output
        assert "1 warning(s)" in result.output


class TestList:
    def test_lists_skills_with_plugin(self, runner, demo_repo: Path):
        result = _run(runner, demo_repo, "list")
        assert result.exit_code == 0, result.output
        assert "demo-skills" in result.output
        assert "Total: 2 skills" in result.output

    def test_empty_repository(self, runner, tmp_path: Path):
        result = _run(runner, tmp_path, "list")
        assert result.exit_code == 0
        assert "No skills found." in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "skillcatalog" in result.output

"""CLI sync command: regenerate marketplace.json and README tables"""

import logging

import click

from skillcatalog.cli.common import settings_from_context
from skillcatalog.cli.output import Diagnostics
from skillcatalog.config.settings import CatalogSettings
from skillcatalog.core.errors import GroupConfigError
from skillcatalog.core.results import ValidationResult
from skillcatalog.core.utils.filelock import FileLockError, catalog_lock
from skillcatalog.marketplace.groups import load_groups
from skillcatalog.marketplace.manifest import reconcile_manifest
from skillcatalog.marketplace.readme import update_readme
from skillcatalog.skills.manifest import discover_skills

logger = logging.getLogger(__name__)


def run_sync(settings: CatalogSettings, out: Diagnostics) -> int:
    """One full sync pass. Returns the process exit code."""
    run = ValidationResult()
    logger.debug(f"Sync settings: {settings.to_dict()}")

    scan = discover_skills(settings.skills_path, settings.metadata_file)
    out.warnings(scan.result.warnings)
    run.extend(scan.result)
    out.log(f"Found {len(scan.skills)} valid skill(s)")
    out.log()

    out.log(f"📋 Loading {settings.groups_file}...")
    try:
        groups = load_groups(settings.groups_path, scan.skills, suffix=settings.plugin_suffix)
    except GroupConfigError as e:
        out.errors(e.errors)
        run.errors.extend(e.errors)
        out.log()
        out.error(f"Found {len(run.errors)} error(s), nothing was written")
        out.summary(len(scan.skills), 0, len(run.errors), len(run.warnings))
        return 1
    out.log(f"   {len(groups)} plugin(s) validated")
    out.log()

    manifest_label = settings.manifest_path.name
    out.log(f"📦 Updating {manifest_label}...")
    diff, manifest_result = reconcile_manifest(groups, settings.manifest_path, settings)
    out.warnings(manifest_result.warnings)
    run.extend(manifest_result)
    if diff.added:
        out.success(f"Added: {', '.join(diff.added)}")
    if diff.removed:
        out.removed(f"Removed: {', '.join(diff.removed)}")
    if not diff.changed:
        out.log(f"   No changes to {manifest_label}")
    out.log()

    readme_label = settings.readme_path.name
    out.log(f"📝 Updating {readme_label}...")
    readme = update_readme(settings.readme_path, scan.skills, groups, settings)
    out.warnings(readme.result.warnings)
    run.extend(readme.result)
    if readme.written:
        out.success(f"{readme_label} tables updated")
    elif readme.outcomes:
        out.log(f"   {readme_label} already up to date")
    out.log()

    out.success("Sync complete!")
    out.log()
    out.log("Current plugins:")
    for group in groups:
        out.log(f"  • {group.name} ({len(group.skills)} skill(s))")
    out.log()

    changes = diff.count + (1 if readme.written else 0)
    out.summary(len(scan.skills), changes, len(run.errors), len(run.warnings))
    return 0


@click.command()
@click.option("--groups", "groups_file", default=None, help="Plugin grouping document")
@click.option("--manifest", "manifest_file", default=None, help="Marketplace manifest to regenerate")
@click.option("--readme", "readme_file", default=None, help="Documentation file with managed tables")
@click.option("--lock", is_flag=True, help="Hold an advisory lock for the whole run")
@click.pass_context
def sync_cmd(ctx, groups_file, manifest_file, readme_file, lock):
    """Regenerate the marketplace manifest and README tables from plugin groups"""
    out = Diagnostics()
    settings = settings_from_context(
        ctx,
        out,
        groups_file=groups_file,
        manifest_file=manifest_file,
        readme_file=readme_file,
    )
    if settings is None:
        ctx.exit(1)

    out.banner("🔄 Syncing AI Agent Skills Marketplace")

    if not lock:
        ctx.exit(run_sync(settings, out))

    try:
        with catalog_lock(settings.lock_path):
            code = run_sync(settings, out)
    except FileLockError as e:
        out.error(str(e))
        out.summary(0, 0, 1, 0)
        code = 1
    ctx.exit(code)

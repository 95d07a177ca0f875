"""CLI validate command: read-only drift check"""

import click

from skillcatalog.cli.common import settings_from_context
from skillcatalog.cli.output import Diagnostics
from skillcatalog.marketplace.report import validate_repository


@click.command()
@click.option("--groups", "groups_file", default=None, help="Plugin grouping document")
@click.option("--manifest", "manifest_file", default=None, help="Marketplace manifest to check")
@click.pass_context
def validate_cmd(ctx, groups_file, manifest_file):
    """Check skills, plugin groups and marketplace.json for drift (writes nothing)"""
    out = Diagnostics()
    settings = settings_from_context(ctx, out, groups_file=groups_file, manifest_file=manifest_file)
    if settings is None:
        ctx.exit(1)

    out.banner("🔍 Validating AI Agent Skills Repository")

    report = validate_repository(settings)
    out.log(f"Found {len(report.skill_dirs)} skill folder(s) in {settings.skills_dir}/")
    out.log()

    out.errors(report.result.errors)
    out.warnings(report.result.warnings)
    if report.result.errors or report.result.warnings:
        out.log()

    if report.result.ok:
        out.success(f"All validations passed! ({len(report.skills)} valid skills)")
    else:
        out.error(f"Found {len(report.result.errors)} error(s)")
    out.log()

    out.summary(
        len(report.skill_dirs),
        0,
        len(report.result.errors),
        len(report.result.warnings),
    )
    ctx.exit(report.exit_code)

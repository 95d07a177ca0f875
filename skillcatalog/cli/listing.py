"""CLI list command"""

import click
from rich.markup import escape
from rich.table import Table

from skillcatalog.cli.common import settings_from_context
from skillcatalog.cli.output import Diagnostics
from skillcatalog.core.errors import GroupConfigError
from skillcatalog.marketplace.groups import load_groups
from skillcatalog.skills.manifest import discover_skills


@click.command()
@click.pass_context
def list_cmd(ctx):
    """List valid skills and the plugin each one belongs to"""
    out = Diagnostics()
    settings = settings_from_context(ctx, out)
    if settings is None:
        ctx.exit(1)

    scan = discover_skills(settings.skills_path, settings.metadata_file)
    out.warnings(scan.result.warnings)

    membership = {}
    if settings.groups_path.is_file():
        try:
            groups = load_groups(settings.groups_path, scan.skills, suffix=settings.plugin_suffix)
        except GroupConfigError as e:
            out.warn(f"{settings.groups_file} has {len(e.errors)} error(s); run 'skillcatalog validate'")
        else:
            membership = {ref: group.name for group in groups for ref in group.skills}

    if not scan.skills:
        out.log("No skills found.")
        return

    table = Table(title=f"Skills in {settings.skills_dir}/")
    table.add_column("Folder", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Author")
    table.add_column("Plugin", style="green")

    for skill in scan.skills:
        table.add_row(
            escape(skill.folder_name),
            escape(skill.name),
            escape(skill.author or settings.author_placeholder),
            escape(membership.get(skill.folder_name, settings.author_placeholder)),
        )

    out.console.print(table)
    out.log(f"Total: {len(scan.skills)} skills")

"""CLI main entry point"""

from pathlib import Path

import click

from skillcatalog import __version__
from skillcatalog.cli.output import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="skillcatalog")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Repository root containing the skills folder",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (defaults to skillcatalog.json in the root, if present)",
)
@click.option("-v", "--verbose", count=True, help="Show library logs (-vv for debug)")
@click.pass_context
def cli(ctx, root, config_path, verbose):
    """skillcatalog - keep skills, plugin groups and the marketplace catalog in sync"""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["root"] = root.resolve()
    ctx.obj["config_path"] = config_path


from skillcatalog.cli.listing import list_cmd
from skillcatalog.cli.sync import sync_cmd
from skillcatalog.cli.validate import validate_cmd

cli.add_command(sync_cmd, name="sync")
cli.add_command(validate_cmd, name="validate")
cli.add_command(list_cmd, name="list")


if __name__ == "__main__":
    cli()

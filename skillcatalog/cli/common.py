"""Helpers shared by CLI commands."""

from typing import Optional

import click

from skillcatalog.cli.output import Diagnostics
from skillcatalog.config.settings import CatalogSettings, load_settings
from skillcatalog.core.errors import ConfigError


def settings_from_context(ctx: click.Context, out: Diagnostics, **overrides) -> Optional[CatalogSettings]:
    """Load settings for the invoked command, reporting a bad settings file.

    Returns None when settings could not be loaded; the caller should exit 1.
    """
    obj = ctx.obj or {}
    try:
        return load_settings(
            root=obj.get("root"),
            config_path=obj.get("config_path"),
            **overrides,
        )
    except ConfigError as e:
        out.error(str(e))
        out.summary(0, 0, 1, 0)
        return None

"""Skill Marketplace - plugin grouping, catalog manifest and README tables.

Key Components:
- groups: load and validate the plugin grouping document
- manifest: regenerate ``marketplace.json`` and report added/removed plugins
- readme: keep the README skill and plugin tables current
- report: read-only drift validation
"""

from skillcatalog.marketplace.groups import (
    PluginGroup,
    load_groups,
    validate_groups,
)
from skillcatalog.marketplace.manifest import (
    ManifestDiff,
    build_manifest,
    diff_plugins,
    reconcile_manifest,
)
from skillcatalog.marketplace.readme import (
    ReadmeUpdate,
    RegionOutcome,
    update_readme,
)
from skillcatalog.marketplace.report import (
    ValidationReport,
    validate_repository,
)

__all__ = [
    "PluginGroup",
    "load_groups",
    "validate_groups",
    "ManifestDiff",
    "build_manifest",
    "diff_plugins",
    "reconcile_manifest",
    "ReadmeUpdate",
    "RegionOutcome",
    "update_readme",
    "ValidationReport",
    "validate_repository",
]

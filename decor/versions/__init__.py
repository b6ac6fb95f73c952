"""Version definitions module."""

from decor.versions.registry import VersionRegistry, find_registry, registered_types, registry_for
from decor.versions.schemas import (
    RESERVED_NAMES,
    VIEW_INTERNALS,
    VIEW_MEMBERS,
    CapabilityModule,
    VersionSummary,
    capability,
)

__all__ = [
    "CapabilityModule",
    "RESERVED_NAMES",
    "VIEW_INTERNALS",
    "VIEW_MEMBERS",
    "capability",
    "VersionRegistry",
    "VersionSummary",
    "find_registry",
    "registered_types",
    "registry_for",
]

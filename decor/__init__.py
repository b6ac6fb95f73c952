"""Decor - multiple versioned representations of one object.

Register versions (capability modules) against a type, then present an
instance as any of them:
- Version registry per type (define, set, alias)
- Views resolving operations through module, context, then target
- Explicit base() calls from version operations into the original behaviour
"""

from decor.errors import (
    AliasTargetMissingError,
    BaseCallError,
    DecorError,
    ReservedOperationError,
    UnknownOperationError,
    UnknownVersionError,
)
from decor.versioned import Versioned
from decor.versions import CapabilityModule, VersionRegistry, capability, registry_for
from decor.views import Context, Deferred, View, present

__version__ = "0.1.0"

__all__ = [
    "AliasTargetMissingError",
    "BaseCallError",
    "CapabilityModule",
    "Context",
    "DecorError",
    "Deferred",
    "ReservedOperationError",
    "UnknownOperationError",
    "UnknownVersionError",
    "VersionRegistry",
    "Versioned",
    "View",
    "capability",
    "present",
    "registry_for",
]

"""Capability module and registry summary schemas.

A CapabilityModule is one version of an entity's behaviour: a named,
read-only table of operations (functions, properties, static/class methods)
plus the constants those operations share. Modules are compared by identity,
so aliases of one version resolve to the very same object.
"""

from dataclasses import dataclass, field
from types import FunctionType, MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from decor.errors import ReservedOperationError

# Members every view answers itself; a module may not shadow them.
VIEW_MEMBERS = frozenset({
    "target",
    "version",
    "context",
    "module",
    "present",
    "base",
    "base_for",
    "supports",
    "implements",
})

# Attributes a view keeps for its own bookkeeping.
VIEW_INTERNALS = frozenset({
    "_target",
    "_version",
    "_context",
    "_module",
    "_registry",
    "_bind",
    "_resolve_below_module",
})

RESERVED_NAMES = VIEW_MEMBERS | VIEW_INTERNALS

OPERATION_TYPES = (FunctionType, property, staticmethod, classmethod)


@dataclass(frozen=True, eq=False)
class CapabilityModule:
    """A named, immutable bundle of operations representing one version."""

    name: str
    operations: Mapping[str, Any] = field(default_factory=dict)
    constants: Mapping[str, Any] = field(default_factory=dict)
    doc: Optional[str] = None

    def __post_init__(self):
        reserved = sorted(RESERVED_NAMES.intersection(self.operations))
        if reserved:
            raise ReservedOperationError(self.name, reserved)
        object.__setattr__(self, "operations", MappingProxyType(dict(self.operations)))
        object.__setattr__(self, "constants", MappingProxyType(dict(self.constants)))

    @classmethod
    def from_class(cls, body: type, name: Optional[str] = None) -> "CapabilityModule":
        """Build a module from a class body.

        Functions, properties, static and class methods become operations;
        any other public attribute becomes a constant. Base classes of
        ``body`` (other than ``object``) contribute first, so a body can
        extend another version by inheriting from its class.
        """
        operations: dict[str, Any] = {}
        constants: dict[str, Any] = {}
        for klass in reversed(body.__mro__[:-1]):
            for key, value in vars(klass).items():
                if key.startswith("__") and key.endswith("__"):
                    continue
                if isinstance(value, OPERATION_TYPES):
                    operations[key] = value
                    constants.pop(key, None)
                else:
                    constants[key] = value
                    operations.pop(key, None)
        return cls(
            name=name or body.__qualname__,
            operations=operations,
            constants=constants,
            doc=body.__doc__,
        )

    def defines(self, operation: str) -> bool:
        """Whether this module provides ``operation``."""
        return operation in self.operations

    @property
    def operation_names(self) -> list[str]:
        return sorted(self.operations)

    def __getattr__(self, name: str) -> Any:
        constants = self.__dict__.get("constants", {})
        if name in constants:
            return constants[name]
        raise AttributeError(f"Module {self.__dict__.get('name')!r} has no constant {name!r}")

    def __repr__(self) -> str:
        return f"<CapabilityModule {self.name} ops={self.operation_names}>"


def capability(body: Optional[type] = None, *, name: Optional[str] = None):
    """Turn a class body into a CapabilityModule without registering it.

    Usable bare (``@capability``) or with a name (``@capability(name="v2")``).
    """
    def decorator(klass: type) -> CapabilityModule:
        return CapabilityModule.from_class(klass, name=name)

    if body is not None:
        return decorator(body)
    return decorator


class VersionSummary(BaseModel):
    """Lightweight description of one registry entry."""

    version: str = Field(..., description="String form of the version key")
    module_name: str = Field(..., description="Name of the capability module")
    operations: list[str] = Field(
        default_factory=list, description="Operations the version provides"
    )
    constants: list[str] = Field(
        default_factory=list, description="Constants defined by the version"
    )
    alias_of: Optional[str] = Field(
        default=None,
        description="Key this entry was aliased from, if it was registered as an alias",
    )

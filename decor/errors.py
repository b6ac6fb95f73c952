"""Errors raised while resolving versions and dispatching view operations.

Every error is local to a single present/dispatch call and propagates
synchronously. The lookup errors also subclass the builtin exception Python
code expects for the same situation, so ``hasattr`` and ``getattr(default)``
keep working on views.
"""

from typing import Any, Optional


class DecorError(Exception):
    """Base class for all decor errors."""


class UnknownVersionError(DecorError, LookupError):
    """No capability module could be resolved for a version key."""

    def __init__(self, version: Any, owner: Optional[type] = None):
        self.version = version
        self.owner = owner
        where = f" for {owner.__name__}" if owner is not None else ""
        super().__init__(f"Unknown version{where}: {version!r}")


class UnknownOperationError(DecorError, AttributeError):
    """No dispatch layer of a view could answer an operation."""

    def __init__(self, operation: str, version: Any = None):
        self.operation = operation
        self.version = version
        super().__init__(
            f"View (version {version!r}) has no operation {operation!r}"
        )


class AliasTargetMissingError(DecorError, LookupError):
    """A strict alias pointed at a key that is not registered yet."""

    def __init__(self, alias: Any, target: Any):
        self.alias = alias
        self.target = target
        super().__init__(
            f"Cannot alias {alias!r} to unregistered version {target!r}"
        )


class BaseCallError(DecorError, RuntimeError):
    """base() was called outside of a module operation."""


class ReservedOperationError(DecorError, ValueError):
    """A capability module tried to define a view identity member."""

    def __init__(self, module_name: str, names: list[str]):
        self.module_name = module_name
        self.names = names
        super().__init__(
            f"Module {module_name!r} defines reserved view members: {', '.join(names)}"
        )

"""Version registry - maps version keys to capability modules per type.

Follows the same shape as the other keyed registries:
- In-memory dict keyed by version key
- get/require/list_keys/list_summaries/count accessors
- Global per-type instances via registry_for()

Registration is expected to happen once, while the owning type is being
defined. The registry has no locking; populate it before sharing it
between threads.
"""

import logging
import weakref
from typing import Any, Callable, Hashable, Mapping, Optional, Union

from decor.config import get_settings
from decor.errors import AliasTargetMissingError, UnknownVersionError
from decor.versions.schemas import CapabilityModule, VersionSummary

logger = logging.getLogger(__name__)

Builder = Union[type, Callable[[], CapabilityModule]]


class VersionRegistry:
    """Registry of capability modules keyed by version.

    A registry owned by a type falls back to the registries of that type's
    base classes when a key is not registered locally.
    """

    def __init__(
        self,
        owner: Optional[type] = None,
        strict_aliases: Optional[bool] = None,
    ):
        self.owner = owner
        self._strict_aliases = strict_aliases
        self._modules: dict[Hashable, CapabilityModule] = {}
        self._aliases: dict[Hashable, Hashable] = {}  # alias key -> aliased key

    @property
    def strict_aliases(self) -> bool:
        if self._strict_aliases is None:
            return get_settings().strict_aliases
        return self._strict_aliases

    def _owner_name(self) -> str:
        return self.owner.__name__ if self.owner is not None else "<unowned>"

    def _parents(self):
        if self.owner is None:
            return
        for base in self.owner.__mro__[1:]:
            registry = _registries.get(base)
            if registry is not None:
                yield registry

    def define(self, key: Hashable, builder: Builder) -> CapabilityModule:
        """Define a version from a builder, unless the key already exists.

        ``builder`` is either a class body (converted with
        CapabilityModule.from_class) or a zero-argument callable returning a
        CapabilityModule. An existing key is never overwritten: the module
        already registered is returned and ``builder`` is not evaluated.
        """
        existing = self._modules.get(key)
        if existing is not None:
            logger.warning(
                f"Version {key!r} already defined on {self._owner_name()}, "
                f"keeping {existing.name}"
            )
            return existing

        if isinstance(builder, type):
            module = CapabilityModule.from_class(builder)
        else:
            module = builder()
        if not isinstance(module, CapabilityModule):
            raise TypeError(
                f"Builder for version {key!r} returned {type(module).__name__}, "
                f"expected CapabilityModule"
            )

        self._modules[key] = module
        logger.debug(f"Defined version {key!r} on {self._owner_name()}: {module.name}")
        return module

    def version(self, key: Hashable) -> Callable[[type], CapabilityModule]:
        """Decorator form of define() for class bodies.

        The decorated name is rebound to the resulting CapabilityModule, so
        operations can reach shared constants through it.
        """
        def decorator(body: type) -> CapabilityModule:
            return self.define(key, body)

        return decorator

    def set(self, key: Hashable, module: CapabilityModule) -> None:
        """Store ``module`` under ``key``, replacing any existing entry."""
        if not isinstance(module, CapabilityModule):
            raise TypeError(f"Expected CapabilityModule for {key!r}, got {type(module).__name__}")
        self._modules[key] = module
        self._aliases.pop(key, None)
        logger.debug(f"Set version {key!r} on {self._owner_name()}: {module.name}")

    def alias(self, pairs: Mapping[Hashable, Union[CapabilityModule, Hashable]]) -> None:
        """Register several versions at once.

        Each value is either a CapabilityModule, stored directly, or another
        version key, whose module is looked up now and stored under the new
        key. Later registrations under the aliased key are not picked up.
        Aliasing to an unregistered key leaves the new key absent, dropping
        any module it held before (strict mode raises instead).
        """
        for key, module_or_key in pairs.items():
            if isinstance(module_or_key, CapabilityModule):
                self.set(key, module_or_key)
                continue

            module = self.resolve(module_or_key)
            if module is None:
                if self.strict_aliases:
                    raise AliasTargetMissingError(key, module_or_key)
                self._modules.pop(key, None)
                self._aliases.pop(key, None)
                logger.warning(
                    f"Alias {key!r} -> {module_or_key!r} on {self._owner_name()} "
                    f"points at an unregistered version; {key!r} is now absent"
                )
                continue

            self._modules[key] = module
            self._aliases[key] = module_or_key
            logger.debug(f"Aliased version {key!r} -> {module_or_key!r} on {self._owner_name()}")

    def resolve(self, key: Hashable) -> Optional[CapabilityModule]:
        """Get the module for ``key``, or None when no registry has it."""
        module = self._modules.get(key)
        if module is not None:
            return module
        for parent in self._parents():
            module = parent._modules.get(key)
            if module is not None:
                return module
        return None

    get = resolve

    def require(self, key: Hashable) -> CapabilityModule:
        """Get the module for ``key``, raising if it is not registered."""
        module = self.resolve(key)
        if module is None:
            raise UnknownVersionError(key, self.owner)
        return module

    def __contains__(self, key: Any) -> bool:
        return self.resolve(key) is not None

    def list_keys(self) -> list[Hashable]:
        """List version keys, local ones first then inherited ones."""
        keys = list(self._modules)
        for parent in self._parents():
            keys.extend(k for k in parent._modules if k not in keys)
        return keys

    def list_summaries(self) -> list[VersionSummary]:
        """List lightweight summaries of every resolvable version."""
        summaries = []
        for key in self.list_keys():
            module = self.resolve(key)
            alias_of = self._aliases.get(key)
            summaries.append(
                VersionSummary(
                    version=str(key),
                    module_name=module.name,
                    operations=module.operation_names,
                    constants=sorted(module.constants),
                    alias_of=str(alias_of) if alias_of is not None else None,
                )
            )
        return summaries

    def count(self) -> int:
        """Get total number of resolvable versions."""
        return len(self.list_keys())

    def __repr__(self) -> str:
        return f"<VersionRegistry {self._owner_name()} keys={self.list_keys()!r}>"


# One registry per type, released with the type
_registries: "weakref.WeakKeyDictionary[type, VersionRegistry]" = weakref.WeakKeyDictionary()


def registry_for(owner: type) -> VersionRegistry:
    """Get the version registry owned by ``owner``, creating it on first use."""
    registry = _registries.get(owner)
    if registry is None:
        registry = VersionRegistry(owner=owner)
        _registries[owner] = registry
        logger.debug(f"Created version registry for {owner.__name__}")
    return registry


def find_registry(owner: type) -> Optional[VersionRegistry]:
    """Get the nearest registry along ``owner``'s MRO without creating one."""
    for klass in owner.__mro__:
        registry = _registries.get(klass)
        if registry is not None:
            return registry
    return None


def registered_types() -> list[type]:
    """List the types that currently own a registry."""
    return list(_registries.keys())

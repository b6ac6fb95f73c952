"""Versioned mixin - lets a class declare versions and present its instances.

Example:

    @capability
    class V1:
        @property
        def computed(self):
            return self.value * self.multi

    class Resource(Versioned, versions={"v1": V1}):
        def __init__(self, name, value, multi):
            ...

    @Resource.version("v2")
    class V2:
        @property
        def name(self):
            return self.base().upper()

    Resource("foo", 2, 2).present("v2").name  # "FOO"
"""

from typing import Any, Callable, Hashable, Mapping, Optional, Union

from decor.versions.registry import Builder, VersionRegistry, registry_for
from decor.versions.schemas import CapabilityModule
from decor.views.view import View, present


class _RegistryDescriptor:
    """Resolves to the registry of the class it is accessed through."""

    def __get__(self, instance: Any, owner: type) -> VersionRegistry:
        return registry_for(owner)


class Versioned:
    """Mixin giving a class a version registry and a ``present`` method."""

    __slots__ = ()

    versions = _RegistryDescriptor()

    def __init_subclass__(
        cls,
        versions: Optional[Mapping[Hashable, Union[CapabilityModule, Hashable]]] = None,
        **kwargs: Any,
    ):
        super().__init_subclass__(**kwargs)
        if versions:
            registry_for(cls).alias(versions)

    @classmethod
    def version(cls, key: Hashable) -> Callable[[type], CapabilityModule]:
        """Decorator defining version ``key`` from a class body."""
        return registry_for(cls).version(key)

    @classmethod
    def define_version(cls, key: Hashable, builder: Builder) -> CapabilityModule:
        return registry_for(cls).define(key, builder)

    @classmethod
    def set_version(cls, key: Hashable, module: CapabilityModule) -> None:
        registry_for(cls).set(key, module)

    @classmethod
    def alias_versions(cls, pairs: Mapping[Hashable, Union[CapabilityModule, Hashable]]) -> None:
        registry_for(cls).alias(pairs)

    @classmethod
    def version_module(cls, key: Hashable) -> CapabilityModule:
        """Look up the module registered for ``key``."""
        return registry_for(cls).require(key)

    def present(self, version: Hashable, context: Optional[Mapping[str, Any]] = None, /, **overrides: Any) -> View:
        """Present this object as ``version`` with optional context overrides."""
        return present(self, version, context, **overrides)

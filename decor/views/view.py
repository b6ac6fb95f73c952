"""Views - an entity presented as one of its versions.

A View wraps a target entity together with a version key, a Context and the
resolved CapabilityModule. Attribute access on a view is resolved in layers:

1. the view's own members (target, version, context, module, present, ...)
2. an operation of the capability module, run with the view as receiver
3. a context entry with the same name (Deferred entries are materialized)
4. the same attribute on the target

Inside a module operation ``self.base(...)`` continues at layer 3 for the
operation currently running, which is how a version wraps the entity's own
behaviour (e.g. upper-casing the target's name).

Views never mutate their target and never nest: presenting a view again
re-presents its original target.
"""

import functools
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Hashable, Mapping, Optional

from decor.errors import BaseCallError, UnknownOperationError, UnknownVersionError
from decor.versions.registry import VersionRegistry, find_registry
from decor.versions.schemas import VIEW_MEMBERS, CapabilityModule
from decor.views.context import Context

logger = logging.getLogger(__name__)

_MISSING = object()

# (view, operation name) of the module operation currently executing
_current_operation: ContextVar[Optional[tuple["View", str]]] = ContextVar(
    "decor_current_operation", default=None
)


@contextmanager
def _running(view: "View", name: str):
    token = _current_operation.set((view, name))
    try:
        yield
    finally:
        _current_operation.reset(token)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


class View:
    """An entity presented as a specific version."""

    __slots__ = ("_target", "_version", "_context", "_module", "_registry", "__weakref__")

    def __init__(
        self,
        target: Any,
        version: Hashable,
        context: Context,
        module: CapabilityModule,
        registry: Optional[VersionRegistry] = None,
    ):
        self._target = target
        self._version = version
        self._context = context
        self._module = module
        self._registry = registry

    @property
    def target(self) -> Any:
        return self._target

    @property
    def version(self) -> Hashable:
        return self._version

    @property
    def context(self) -> Context:
        return self._context

    @property
    def module(self) -> CapabilityModule:
        return self._module

    def present(self, version: Hashable, context: Optional[Mapping[str, Any]] = None, /, **overrides: Any) -> "View":
        """Present the original target as another version.

        The current module and context are discarded; the new view wraps the
        same target object rather than this view.
        """
        return present(self._target, version, context, registry=self._registry, **overrides)

    def implements(self, module: CapabilityModule) -> bool:
        """Whether this view was built with ``module``."""
        return self._module is module

    def base(self, *args: Any, **kwargs: Any) -> Any:
        """Continue the running module operation past the module layer.

        Resolves the same operation name against the context, then the
        target. A callable target attribute is called with the given
        arguments; any other attribute value is returned as-is.
        """
        current = _current_operation.get()
        if current is None or current[0] is not self:
            raise BaseCallError(
                f"base() called outside of a module operation on version {self._version!r}"
            )
        return self._resolve_below_module(current[1], args, kwargs)

    def base_for(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Explicit form of base() for a named operation."""
        return self._resolve_below_module(name, args, kwargs)

    def supports(self, name: str) -> bool:
        """Whether dispatching ``name`` on this view would succeed."""
        if hasattr(type(self), name):
            return True
        if _is_dunder(name):
            return False
        return (
            self._module.defines(name)
            or name in self._context
            or getattr(self._target, name, _MISSING) is not _MISSING
        )

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, so view members always win.
        if _is_dunder(name) or name in View.__slots__:
            raise AttributeError(name)

        impl = self._module.operations.get(name, _MISSING)
        if impl is not _MISSING:
            return self._bind(name, impl)

        if name in self._context:
            return self._context[name]

        value = getattr(self._target, name, _MISSING)
        if value is _MISSING:
            raise UnknownOperationError(name, self._version)
        return value

    def _bind(self, name: str, impl: Any) -> Any:
        if isinstance(impl, property):
            with _running(self, name):
                return impl.__get__(self, type(self))

        bound = impl.__get__(self, type(self)) if hasattr(impl, "__get__") else impl
        if not callable(bound):
            return bound

        @functools.wraps(bound)
        def operation(*args, **kwargs):
            with _running(self, name):
                return bound(*args, **kwargs)

        return operation

    def _resolve_below_module(self, name: str, args: tuple, kwargs: dict) -> Any:
        if name in self._context:
            return self._context[name]

        value = getattr(self._target, name, _MISSING)
        if value is _MISSING:
            raise UnknownOperationError(name, self._version)
        if callable(value):
            return value(*args, **kwargs)
        if args or kwargs:
            raise TypeError(
                f"{type(self._target).__name__}.{name} is not callable; "
                f"base() got arguments"
            )
        return value

    def __dir__(self) -> list[str]:
        names = set(VIEW_MEMBERS)
        names.update(self._module.operations)
        names.update(k for k in self._context if isinstance(k, str))
        names.update(n for n in dir(self._target) if not n.startswith("_"))
        return sorted(names)

    def __repr__(self) -> str:
        return f"<View {self._module.name} version={self._version!r} target={self._target!r}>"


def present(
    target: Any,
    version: Hashable,
    context: Optional[Mapping[str, Any]] = None,
    /,
    *,
    module: Optional[CapabilityModule] = None,
    registry: Optional[VersionRegistry] = None,
    **overrides: Any,
) -> View:
    """Present ``target`` as ``version``.

    The module is taken from the ``module`` keyword, else from a ``"module"``
    context entry holding a CapabilityModule, else from ``registry`` or the
    nearest registry along the target type's MRO. Remaining context entries
    and keyword overrides form the view's Context.

    ``module`` and ``registry`` are keyword parameters of this function, so
    context overrides with those names must go through the ``context``
    mapping.

    Raises:
        UnknownVersionError: If no module can be resolved for ``version``
        TypeError: If ``module`` or ``registry`` has the wrong type
    """
    if isinstance(target, View):
        target = target.target

    if registry is not None and not isinstance(registry, VersionRegistry):
        raise TypeError(
            f"registry must be a VersionRegistry, got {type(registry).__name__}; "
            f"pass a 'registry' context value through the context mapping"
        )

    entries = dict(context or {})
    entries.update(overrides)
    if isinstance(entries.get("module"), CapabilityModule):
        context_module = entries.pop("module")
        if module is None:
            module = context_module

    if registry is None:
        registry = find_registry(type(target))

    if module is None:
        if registry is None:
            raise UnknownVersionError(version, type(target))
        module = registry.require(version)
    elif not isinstance(module, CapabilityModule):
        raise TypeError(f"Override module must be a CapabilityModule, got {type(module).__name__}")

    view = View(target, version, Context(entries), module, registry)
    logger.debug(f"Presented {type(target).__name__} as {version!r} using {module.name}")
    return view

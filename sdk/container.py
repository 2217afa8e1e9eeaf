"""Minimal dependency-injection container used to build command handlers.

Handlers registered by class are normally constructed with no arguments.
When a :class:`Container` is attached to the :class:`~sdk.client.Api`, the
command buses delegate construction to :meth:`Container.make`, which
autowires ``__init__`` parameters from their type annotations.

Usage::

    container = Container()
    container.singleton(Database, lambda c: Database("sqlite://"))

    class StatsCommand(Command):
        name = "stats"

        def __init__(self, db: Database) -> None:
            self.db = db

    telegram.container = container
    telegram.add_command(StatsCommand)   # StatsCommand(db=<Database>)
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Callable, Dict, Set, Tuple

from core.logger import SDKLogger
from sdk.exceptions import ResolutionError, TelegramSDKException

logger = SDKLogger.get_logger()

Factory = Callable[["Container"], Any]


class Container:
    """Type-keyed registry of factories with constructor autowiring."""

    def __init__(self) -> None:
        self._bindings: Dict[Any, Tuple[Factory, bool]] = {}
        self._instances: Dict[Any, Any] = {}
        self._building: Set[type] = set()

    # ── registration ─────────────────────────────────────────────────────

    def bind(self, abstract: Any, factory: Factory) -> "Container":
        """Build *abstract* with *factory* every time it is requested."""
        self._bindings[abstract] = (factory, False)
        self._instances.pop(abstract, None)
        return self

    def singleton(self, abstract: Any, factory: Factory) -> "Container":
        """Build *abstract* with *factory* once and reuse the result."""
        self._bindings[abstract] = (factory, True)
        self._instances.pop(abstract, None)
        return self

    def instance(self, abstract: Any, obj: Any) -> "Container":
        """Register an already-built object for *abstract*."""
        self._instances[abstract] = obj
        return self

    def has(self, abstract: Any) -> bool:
        return abstract in self._instances or abstract in self._bindings

    # ── resolution ───────────────────────────────────────────────────────

    def make(self, abstract: Any) -> Any:
        """Return a fully-constructed instance of *abstract*.

        Raises:
            ResolutionError: If *abstract* is neither bound nor an
                autowirable class, a dependency cannot be resolved, or
                the constructor fails.
        """
        if abstract in self._instances:
            return self._instances[abstract]

        binding = self._bindings.get(abstract)
        if binding is not None:
            factory, shared = binding
            obj = self._invoke(abstract, factory, self)
            if shared:
                self._instances[abstract] = obj
            return obj

        if not isinstance(abstract, type):
            raise ResolutionError(f"Cannot resolve [{abstract!r}]: not bound and not a class.")
        if abstract.__module__ == "builtins":
            raise ResolutionError(f"Cannot autowire builtin type [{abstract.__qualname__}]; bind it explicitly.")
        return self._build(abstract)

    def _build(self, cls: type) -> Any:
        """Autowire *cls* from the type hints of its ``__init__``."""
        if cls in self._building:
            raise ResolutionError(f"Circular dependency while building [{cls.__qualname__}].")

        self._building.add(cls)
        try:
            kwargs = {
                name: self.make(dependency)
                for name, dependency in self._dependencies(cls).items()
            }
            logger.debug("Autowiring class", extra={"class": cls.__qualname__, "dependencies": list(kwargs)})
            return self._invoke(cls, cls, **kwargs)
        finally:
            self._building.discard(cls)

    @staticmethod
    def _dependencies(cls: type) -> Dict[str, type]:
        """Map each required ``__init__`` parameter of *cls* to its annotated class."""
        try:
            signature = inspect.signature(cls)
        except (TypeError, ValueError):
            return {}

        try:
            hints = typing.get_type_hints(cls.__init__)
        except TypeError:
            hints = {}
        except NameError as exc:
            raise ResolutionError(f"Cannot read annotations of [{cls.__qualname__}]: {exc}") from exc

        required: Dict[str, type] = {}
        for name, param in signature.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.default is not param.empty:
                continue
            hint = hints.get(name)
            if not isinstance(hint, type):
                raise ResolutionError(
                    f"Unresolvable dependency [{name}] in class [{cls.__qualname__}]: "
                    "parameter has no class annotation and no default."
                )
            required[name] = hint
        return required

    @staticmethod
    def _invoke(abstract: Any, factory: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return factory(*args, **kwargs)
        except TelegramSDKException:
            raise
        except Exception as exc:
            name = getattr(abstract, "__qualname__", repr(abstract))
            raise ResolutionError(f"Failed to build [{name}]: {exc}") from exc

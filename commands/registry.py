"""Handler registry — the name → handler mapping owned by one bus.

A registry accepts three kinds of reference in :meth:`HandlerRegistry.add`:

- a handler **instance** satisfying the bus contract, stored as-is;
- a handler **class**, built through the attached
  :class:`~sdk.container.Container` or with no arguments;
- a **string key**, resolved through the registry's explicit factory table
  (filled with :meth:`HandlerRegistry.provide`), never by importing a name.

Every stored handler is keyed by its ``name``; re-registering a name replaces
the previous handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, Optional, Type

from core.logger import SDKLogger
from sdk.exceptions import ConfigurationError, ContractViolationError

if TYPE_CHECKING:
    from sdk.container import Container

logger = SDKLogger.get_logger()

HandlerFactory = Callable[[], Any]


class HandlerRegistry:
    """Mapping of handler name to a long-lived handler instance.

    Usage::

        registry = HandlerRegistry(CommandInterface)
        registry.add(StartCommand).add(HelpCommand())
        registry.get("start")
    """

    def __init__(
        self,
        contract: Type[Any],
        container: Optional["Container"] = None,
        factories: Optional[Dict[str, HandlerFactory]] = None,
    ) -> None:
        self.contract = contract
        self.container = container
        self._factories: Dict[str, HandlerFactory] = dict(factories or {})
        self._handlers: Dict[str, Any] = {}

    # ── factory table ────────────────────────────────────────────────────

    def provide(self, key: str, factory: HandlerFactory) -> "HandlerRegistry":
        """Make *key* resolvable by :meth:`add`.

        *factory* is a handler class or a zero-argument callable returning
        a handler.
        """
        self._factories[key] = factory
        return self

    # ── mutation ─────────────────────────────────────────────────────────

    def add(self, handler: Any) -> "HandlerRegistry":
        """Register *handler* (instance, class or factory key) under its name.

        Raises:
            ConfigurationError: *handler* is a string with no factory.
            ContractViolationError: The resulting object does not satisfy
                the registry's contract.
            ResolutionError: The container failed to build the handler.
        """
        instance = self._resolve(handler)

        if isinstance(instance, type) or not isinstance(instance, self.contract):
            raise ContractViolationError(
                f'Command class "{_describe(instance)}" should be an instance of '
                f'"{self.contract.__qualname__}".'
            )

        name = instance.name
        if name in self._handlers:
            logger.debug("Replacing registered handler", extra={"command": name, "handler": _describe(instance)})
        self._handlers[name] = instance
        logger.debug("Registered handler", extra={"command": name, "handler": _describe(instance)})
        return self

    def add_all(self, handlers: Iterable[Any]) -> "HandlerRegistry":
        """Apply :meth:`add` to each element in order."""
        for handler in handlers:
            self.add(handler)
        return self

    def remove(self, name: str) -> "HandlerRegistry":
        """Remove the handler registered as *name*; unknown names are ignored."""
        self._handlers.pop(name, None)
        return self

    def remove_all(self, names: Iterable[str]) -> "HandlerRegistry":
        for name in names:
            self.remove(name)
        return self

    # ── lookup ───────────────────────────────────────────────────────────

    def get(self, name: str) -> Optional[Any]:
        return self._handlers.get(name)

    def all(self) -> Dict[str, Any]:
        """Return the live name → handler mapping."""
        return self._handlers

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    # ── internals ────────────────────────────────────────────────────────

    def _resolve(self, handler: Any) -> Any:
        """Turn a string key or class reference into a handler instance."""
        if isinstance(handler, str):
            factory = self._factories.get(handler)
            if factory is None:
                raise ConfigurationError(
                    f'Command class "{handler}" not found! Please make sure the class exists.'
                )
            if isinstance(factory, type):
                return self._construct(factory)
            if isinstance(factory, self.contract):
                return factory
            return factory()

        if isinstance(handler, type):
            return self._construct(handler)

        # Anything else is taken as-is and left to the contract check.
        return handler

    def _construct(self, cls: type) -> Any:
        if self.container is not None:
            logger.debug("Building handler through container", extra={"handler": cls.__qualname__})
            return self.container.make(cls)
        return cls()


def _describe(obj: Any) -> str:
    cls = obj if isinstance(obj, type) else type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"

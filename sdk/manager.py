"""BotsManager — builds and caches one :class:`~sdk.client.Api` per configured bot.

Configuration is a plain dictionary::

    {
        "default": "main",
        "api_url": "https://api.telegram.org",
        "timeout": 10,
        "resolve_command_dependencies": False,
        "bots": {
            "main": {
                "token": "123:ABC",
                "commands": ["basic", "admin_stats"],
                "callbacks": ["help"],
            },
        },
        "commands": [StartCommand],                 # global, every bot
        "command_groups": {"basic": [StartCommand, HelpCommand]},
        "shared_commands": {"admin_stats": StatsCommand},
        "callback_groups": {},
        "shared_callbacks": {"help": HelpCallback},
    }

Group names and shared aliases are expanded by :func:`expand_commands`
before the resulting list is handed to the bus registries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.logger import SDKLogger
from sdk.client import DEFAULT_API_URL, Api
from sdk.container import Container
from sdk.exceptions import ConfigurationError

logger = SDKLogger.get_logger()

_MISSING = object()


def expand_commands(
    commands: Sequence[Any],
    groups: Optional[Mapping[str, Sequence[Any]]] = None,
    shared: Optional[Mapping[str, Any]] = None,
) -> List[Any]:
    """Flatten group names and substitute shared aliases in *commands*.

    Nested groups are expanded recursively; the result keeps the first
    occurrence of every reference::

        >>> expand_commands(["basic", "B", "C"], groups={"basic": ["A", "B"]})
        ['A', 'B', 'C']

    Raises:
        ConfigurationError: If a group contains itself, directly or through
            another group.
    """
    groups = groups or {}
    shared = shared or {}
    results: List[Any] = []

    def visit(items: Sequence[Any], trail: List[str]) -> None:
        for item in items:
            if isinstance(item, str) and item in groups:
                if item in trail:
                    cycle = " -> ".join([*trail, item])
                    raise ConfigurationError(f"Command group [{item}] references itself ({cycle}).")
                visit(groups[item], [*trail, item])
                continue

            if isinstance(item, str) and item in shared:
                item = shared[item]

            if item not in results:
                results.append(item)

    visit(list(commands), [])
    return results


class BotsManager:
    """Factory and cache of :class:`Api` instances keyed by bot name."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config
        self._container: Optional[Container] = None
        self._bots: Dict[str, Api] = {}

    def set_container(self, container: Container) -> "BotsManager":
        """Set the container used when ``resolve_command_dependencies`` is on."""
        self._container = container
        return self

    # ── bot lifecycle ────────────────────────────────────────────────────

    def bot(self, name: Optional[str] = None) -> Api:
        """Return the (cached) Api for *name*, defaulting to the default bot."""
        name = name or self.get_default_bot()
        if name not in self._bots:
            self._bots[name] = self.make_bot(name)
        return self._bots[name]

    def reconnect(self, name: Optional[str] = None) -> Api:
        """Drop the cached Api for *name* and build a fresh one."""
        name = name or self.get_default_bot()
        self.disconnect(name)
        return self.bot(name)

    def disconnect(self, name: Optional[str] = None) -> None:
        name = name or self.get_default_bot()
        self._bots.pop(name, None)

    @property
    def bots(self) -> Dict[str, Api]:
        """All bots built so far."""
        return dict(self._bots)

    def make_bot(self, name: str) -> Api:
        """Build an Api for *name* and register its commands and callbacks.

        Raises:
            ConfigurationError: Unknown bot, missing token, or an
                unresolvable command reference.
            ContractViolationError: A command does not satisfy its contract.
            ResolutionError: The container failed to build a command.
        """
        config = self.get_bot_config(name)
        token = config.get("token")
        if not token:
            raise ConfigurationError(f"Bot [{name}] has no token configured.")

        telegram = Api(
            token,
            base_url=self.get_config("api_url", DEFAULT_API_URL),
            timeout=self.get_config("timeout", Api._DEFAULT_TIMEOUT),
        )

        if self.get_config("resolve_command_dependencies", False) and self._container is not None:
            telegram.container = self._container

        shared_commands = self.get_config("shared_commands", {}) or {}
        shared_callbacks = self.get_config("shared_callbacks", {}) or {}
        for key, factory in shared_commands.items():
            telegram.command_bus.provide(key, factory)
        for key, factory in shared_callbacks.items():
            telegram.callback_bus.provide(key, factory)

        commands = self.parse_bot_commands(config.get("commands", []))
        callbacks = expand_commands(
            config.get("callbacks", []),
            self.get_config("callback_groups", {}),
            shared_callbacks,
        )

        telegram.add_commands(commands)
        telegram.add_callback_commands(callbacks)

        logger.info("Bot ready", extra={"bot": name, "commands": sorted(telegram.get_commands()), "callbacks": sorted(telegram.callback_bus.get_commands())})
        return telegram

    def parse_bot_commands(self, commands: Sequence[Any]) -> List[Any]:
        """Merge global commands with *commands* and expand groups/aliases."""
        global_commands = list(self.get_config("commands", []) or [])
        return expand_commands(
            [*global_commands, *commands],
            self.get_config("command_groups", {}),
            self.get_config("shared_commands", {}),
        )

    # ── configuration ────────────────────────────────────────────────────

    def get_bot_config(self, name: Optional[str] = None) -> Dict[str, Any]:
        """Return the config block for *name* with a ``bot`` key added.

        Raises:
            ConfigurationError: If the bot is not configured.
        """
        name = name or self.get_default_bot()
        config = (self.get_config("bots", {}) or {}).get(name) if name else None
        if not isinstance(config, dict):
            raise ConfigurationError(f"Bot [{name}] not configured.")
        return {**config, "bot": name}

    def get_default_bot(self) -> Optional[str]:
        return self.get_config("default")

    def set_default_bot(self, name: str) -> "BotsManager":
        self._config["default"] = name
        return self

    def get_config(self, key: str, default: Any = None) -> Any:
        """Read a config value; dotted keys (``"bots.main.token"``) walk nested dicts."""
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(part, _MISSING)
            if value is _MISSING:
                return default
        return value

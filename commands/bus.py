"""Command buses — route inbound text and callback data to registered handlers.

:class:`CommandBus` handles ``/command`` text found in messages;
:class:`CallbackCommandBus` handles the ``data`` string of callback queries
sent by inline keyboard buttons.  Both are invoked once per update by
:class:`sdk.client.Api` and always hand the update back unchanged.

An inbound text or callback that matches no handler is not an error: the
executor returns :data:`NO_MATCH` and nothing else happens.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from core.logger import SDKLogger
from commands.base import CallbackCommandInterface, CommandInterface
from commands.parser import CommandMatch, parse_callback_data, parse_command, split_arguments
from commands.registry import HandlerFactory, HandlerRegistry
from sdk.models import BotCommand, CallbackQuery, Update

if TYPE_CHECKING:
    from sdk.client import Api

logger = SDKLogger.get_logger()


class NoMatch(enum.Enum):
    """Marker returned by ``execute`` when no handler is registered for a name.

    The member is falsy and keeps the SDK's historical ``"ok"`` value.
    """

    NO_MATCH = "ok"

    def __bool__(self) -> bool:
        return False


NO_MATCH = NoMatch.NO_MATCH


class AnswerBus:
    """Registry plumbing shared by both buses."""

    contract: type = CommandInterface
    kind: str = "command"

    def __init__(self, telegram: Optional["Api"] = None, factories: Optional[Dict[str, HandlerFactory]] = None) -> None:
        self.telegram = telegram
        container = telegram.container if telegram is not None else None
        self.registry = HandlerRegistry(self.contract, container=container, factories=factories)

    def get_commands(self) -> Dict[str, Any]:
        """Return the live name → handler mapping."""
        return self.registry.all()

    def provide(self, key: str, factory: HandlerFactory) -> "AnswerBus":
        """Register a string key that :meth:`add_command` can resolve."""
        self.registry.provide(key, factory)
        return self

    def remove_command(self, name: str) -> "AnswerBus":
        self.registry.remove(name)
        return self

    def remove_commands(self, names: Iterable[str]) -> "AnswerBus":
        self.registry.remove_all(names)
        return self

    def _log_no_match(self, name: str, update: Update) -> None:
        logger.debug("No handler registered", extra={"bus": self.kind, "command": name, "update_id": update.update_id})


class CommandBus(AnswerBus):
    """Dispatch engine for ``/command`` messages."""

    contract = CommandInterface
    kind = "command"

    def add_command(self, command: Any) -> "CommandBus":
        """Register a handler instance, class or factory key."""
        self.registry.add(command)
        return self

    def add_commands(self, commands: Iterable[Any]) -> "CommandBus":
        self.registry.add_all(commands)
        return self

    def parse_command(self, text: str) -> Optional[CommandMatch]:
        return parse_command(text)

    def handler(self, message: str, update: Update) -> Update:
        """Parse *message* and execute the matching command, if any.

        Text that does not begin with ``/command`` is ignored.  Returns
        *update* unchanged in every case; exceptions raised by the handler
        propagate to the caller.
        """
        match = self.parse_command(message)
        if match is None:
            return update

        name = match.command.lower()
        self.execute(name, split_arguments(match.arguments), update)
        return update

    def execute(self, name: str, arguments: List[str], update: Update) -> Any:
        """Invoke the handler registered as *name*, or return :data:`NO_MATCH`."""
        command = self.registry.get(name)
        if command is None:
            self._log_no_match(name, update)
            return NO_MATCH

        logger.info("Dispatching command", extra={"bus": self.kind, "command": name, "update_id": update.update_id, "argument_count": len(arguments)})
        return command.make(self.telegram, arguments, update)

    def to_bot_commands(self) -> List[BotCommand]:
        """Describe the registered commands for ``setMyCommands``."""
        return [
            command.to_bot_command()
            for command in self.registry.all().values()
            if hasattr(command, "to_bot_command")
        ]


class CallbackCommandBus(AnswerBus):
    """Dispatch engine for callback-query ``data`` strings."""

    contract = CallbackCommandInterface
    kind = "callback"

    def add_callback_command(self, command: Any) -> "CallbackCommandBus":
        """Register a handler instance, class or factory key."""
        self.registry.add(command)
        return self

    def add_callback_commands(self, commands: Iterable[Any]) -> "CallbackCommandBus":
        self.registry.add_all(commands)
        return self

    def handler(self, data: str, update: Update) -> Update:
        """Split *data* into command and arguments and execute the handler.

        Returns *update* unchanged; exceptions raised by the handler
        propagate to the caller.
        """
        name, arguments = parse_callback_data(data)
        self.execute(name, arguments, update, update.callback_query)
        return update

    def execute(
        self,
        name: str,
        arguments: List[str],
        update: Update,
        callback_query: Optional[CallbackQuery],
    ) -> Any:
        """Invoke the callback handler registered as *name*, or return :data:`NO_MATCH`."""
        command = self.registry.get(name)
        if command is None:
            self._log_no_match(name, update)
            return NO_MATCH

        logger.info("Dispatching callback", extra={"bus": self.kind, "command": name, "update_id": update.update_id, "argument_count": len(arguments)})
        return command.make(self.telegram, arguments, update, callback_query)

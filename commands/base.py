"""Handler contract and base classes for text commands and callback commands.

Two shapes of handler exist, one per bus:

- :class:`CommandInterface` — invoked by :class:`~commands.bus.CommandBus`
  with ``make(telegram, arguments, update)``.
- :class:`CallbackCommandInterface` — invoked by
  :class:`~commands.bus.CallbackCommandBus` with
  ``make(telegram, arguments, update, callback_query)``.

Both protocols are :func:`~typing.runtime_checkable` so the registry can
verify the contract with ``isinstance``.  Concrete handlers normally subclass
:class:`Command` or :class:`CallbackCommand`, which store the invocation
context on the instance and forward to :meth:`handle`.

Handler instances are long-lived: one instance serves every matching update,
and ``arguments`` / ``callback_query_id`` describe the most recent call only.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, List, Optional, Protocol, Sequence, runtime_checkable

from sdk.exceptions import TelegramSDKException
from sdk.models import BotCommand, CallbackQuery, Update

if TYPE_CHECKING:
    from sdk.client import Api


# ── Handler protocols ────────────────────────────────────────────────────────

@runtime_checkable
class CommandInterface(Protocol):
    """Contract every text-command handler satisfies."""

    name: str

    def handle(self, arguments: List[str]) -> Any: ...  # noqa: E704

    def make(self, telegram: "Api", arguments: List[str], update: Update) -> Any: ...  # noqa: E704


@runtime_checkable
class CallbackCommandInterface(Protocol):
    """Contract every callback-query handler satisfies."""

    name: str
    callback_query_id: Optional[str]

    def handle(self, arguments: List[str]) -> Any: ...  # noqa: E704

    def make(
        self,
        telegram: "Api",
        arguments: List[str],
        update: Update,
        callback_query: CallbackQuery,
    ) -> Any: ...  # noqa: E704


# ── Base classes ─────────────────────────────────────────────────────────────

class Answerable:
    """Reply helpers shared by both handler kinds.

    Expects ``telegram`` and ``update`` to have been set by ``make``.
    """

    telegram: Optional["Api"] = None
    update: Optional[Update] = None

    def reply_with_message(self, text: str, **params: Any) -> Any:
        """Send *text* to the chat the current update came from.

        Extra keyword arguments (``parse_mode``, ``reply_markup``, …) are
        passed straight to :meth:`sdk.client.Api.send_message`.

        Raises:
            TelegramSDKException: If called outside an invocation or the
                update carries no chat.
        """
        if self.telegram is None or self.update is None:
            raise TelegramSDKException("reply_with_message() called before the handler was invoked.")
        chat = self.update.get_chat()
        if chat is None:
            raise TelegramSDKException(f"Update {self.update.update_id} has no chat to reply to.")
        return self.telegram.send_message(chat_id=chat.id, text=text, **params)


class Command(Answerable, abc.ABC):
    """Base class for slash-command handlers.

    Subclasses set :attr:`name` (the command without the leading slash,
    lowercase) and implement :meth:`handle`::

        class StartCommand(Command):
            name = "start"
            description = "Start the bot"

            def handle(self, arguments):
                return self.reply_with_message("Hello!")
    """

    name: str = ""
    description: str = ""

    def __init__(self) -> None:
        self.arguments: List[str] = []

    def make(self, telegram: "Api", arguments: List[str], update: Update) -> Any:
        """Store the invocation context and run :meth:`handle`."""
        self.telegram = telegram
        self.arguments = list(arguments)
        self.update = update
        return self.handle(self.arguments)

    @abc.abstractmethod
    def handle(self, arguments: List[str]) -> Any:
        """Process the command; *arguments* are the whitespace-split tokens."""

    def trigger_command(self, name: str, arguments: Optional[Sequence[str]] = None) -> Any:
        """Run another registered command with the current update."""
        if self.telegram is None or self.update is None:
            raise TelegramSDKException("trigger_command() called before the handler was invoked.")
        return self.telegram.command_bus.execute(
            name.lower(),
            list(arguments) if arguments is not None else self.arguments,
            self.update,
        )

    def to_bot_command(self) -> BotCommand:
        return BotCommand(command=self.name, description=self.description or self.name)


class CallbackCommand(Answerable, abc.ABC):
    """Base class for callback-query handlers.

    The callback data ``"vote 3 yes"`` reaches the handler named ``vote``
    with ``arguments == ["3", "yes"]``.
    """

    name: str = ""
    callback_query: Optional[CallbackQuery] = None
    callback_query_id: Optional[str] = None

    def __init__(self) -> None:
        self.arguments: List[str] = []

    def make(
        self,
        telegram: "Api",
        arguments: List[str],
        update: Update,
        callback_query: Optional[CallbackQuery],
    ) -> Any:
        """Store the invocation context and run :meth:`handle`."""
        self.telegram = telegram
        self.arguments = list(arguments)
        self.update = update
        self.callback_query = callback_query
        self.callback_query_id = callback_query.id if callback_query is not None else None
        return self.handle(self.arguments)

    @abc.abstractmethod
    def handle(self, arguments: List[str]) -> Any:
        """Process the callback; *arguments* are the tokens after the command."""

    def answer(self, text: Optional[str] = None, show_alert: bool = False, **params: Any) -> Any:
        """Acknowledge the callback query so the client stops its spinner."""
        if self.telegram is None or self.callback_query_id is None:
            raise TelegramSDKException("answer() called before the handler was invoked.")
        return self.telegram.answer_callback_query(
            self.callback_query_id, text=text, show_alert=show_alert, **params
        )

"""Built-in slash commands.

Each class handles a single Telegram slash-command and is registered on the
:class:`~commands.bus.CommandBus` through the ``basic`` command group in
:func:`bot.dispatcher.build_config`.
"""

from typing import Any, List

from commands.base import Command
from core.logger import SDKLogger
from sdk.models import InlineKeyboardButton, InlineKeyboardMarkup

logger = SDKLogger.get_logger()


class StartCommand(Command):
    """Handle /start — greet the user and point at /help."""

    name = "start"
    description = "Start using the bot"

    def handle(self, arguments: List[str]) -> Any:
        chat = self.update.get_chat() if self.update else None
        logger.info("User invoked /start", extra={"command": "/start", "chat_id": chat.id if chat else None, "arguments": arguments})
        return self.reply_with_message("👋 Welcome! Type /help to see what I can do.")


class HelpCommand(Command):
    """Handle /help — list registered commands as inline buttons.

    Each button carries the callback data ``help <command>``, answered by
    :class:`bot.callbacks.HelpCallback`.
    """

    name = "help"
    description = "Show available commands"

    def handle(self, arguments: List[str]) -> Any:
        commands = self.telegram.get_commands()
        logger.info("User invoked /help", extra={"command": "/help", "command_count": len(commands)})

        lines: List[str] = []
        buttons: List[List[InlineKeyboardButton]] = []
        for name, command in sorted(commands.items()):
            description = getattr(command, "description", "") or ""
            lines.append(f"/{name} — {description}" if description else f"/{name}")
            buttons.append([InlineKeyboardButton(text=f"/{name}", callback_data=f"help {name}")])

        if not lines:
            return self.reply_with_message("⛔ No commands are registered.")

        return self.reply_with_message(
            "📖 Available commands:\n" + "\n".join(lines),
            reply_markup=InlineKeyboardMarkup(inline_keyboard=buttons),
        )

"""Callback-query handlers for inline keyboard interactions.

Processes button presses from the /help command menu.
"""

from typing import Any, List

from commands.base import CallbackCommand
from core.logger import SDKLogger

logger = SDKLogger.get_logger()


class HelpCallback(CallbackCommand):
    """Answer ``help <command>`` button presses with the command's description."""

    name = "help"

    def handle(self, arguments: List[str]) -> Any:
        if not arguments:
            return self.answer()

        target = arguments[0].lower()
        command = self.telegram.get_commands().get(target)
        logger.info("Help button pressed", extra={"callback_query_id": self.callback_query_id, "command": target, "known": command is not None})

        if command is None:
            return self.answer(f"⚠️ Unknown command: /{target}")
        description = getattr(command, "description", "") or "No description."
        return self.answer(f"/{target} — {description}")

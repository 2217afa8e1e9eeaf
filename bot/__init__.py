"""Telegram bot application layer — polling loop, built-in commands and callbacks.

This package may import from ``core/``, ``commands/``, ``sdk/`` and ``config``.
"""

from bot.callbacks import HelpCallback
from bot.dispatcher import build_config, poll_once, process_update, publish_commands, retry_delay, run
from bot.handlers import HelpCommand, StartCommand

__all__ = [
    # Dispatcher
    "run",
    "build_config",
    "process_update",
    "publish_commands",
    "poll_once",
    "retry_delay",
    # Command handlers
    "StartCommand",
    "HelpCommand",
    # Callback handlers
    "HelpCallback",
]

"""Update dispatcher and main polling loop.

Builds the :class:`~sdk.manager.BotsManager` configuration from
:mod:`config`, then long-polls Telegram and feeds every update, in delivery
order, through the command and callback buses.
"""

import time
from typing import Any, Dict, Optional

import requests

from config import API_URL, BOT_NAME, BOT_TOKEN, POLL_TIMEOUT, REQUEST_TIMEOUT, RESOLVE_COMMAND_DEPENDENCIES
from core.logger import SDKLogger
from sdk.client import Api
from sdk.exceptions import APIException
from sdk.manager import BotsManager
from sdk.models import Update
from bot.callbacks import HelpCallback
from bot.handlers import HelpCommand, StartCommand

logger = SDKLogger.get_logger()

_RETRY_DELAY: int = 5


def build_config() -> Dict[str, Any]:
    """Return the BotsManager configuration for the bot described by the environment."""
    return {
        "default": BOT_NAME,
        "api_url": API_URL,
        "timeout": REQUEST_TIMEOUT,
        "resolve_command_dependencies": RESOLVE_COMMAND_DEPENDENCIES,
        "bots": {
            BOT_NAME: {
                "token": BOT_TOKEN,
                "commands": ["basic"],
                "callbacks": ["help"],
            },
        },
        "command_groups": {
            "basic": [StartCommand, HelpCommand],
        },
        "shared_callbacks": {
            "help": HelpCallback,
        },
    }


def process_update(telegram: Api, update: Update) -> None:
    """Dispatch a single update; a failing handler is logged, not re-raised."""
    try:
        telegram.process_update(update)
    except Exception:
        logger.exception("Handler raised while processing update", extra={"update_id": update.update_id})


def publish_commands(telegram: Api) -> None:
    """Push the registered command list to the client's command menu."""
    bot_commands = telegram.command_bus.to_bot_commands()
    try:
        telegram.set_my_commands(bot_commands)
        logger.info("Published command menu", extra={"api_method": "setMyCommands", "count": len(bot_commands)})
    except (APIException, requests.RequestException) as exc:
        logger.warning("Could not publish command menu", extra={"api_method": "setMyCommands", "error": str(exc)})


def retry_delay(exc: Exception) -> int:
    """Seconds to back off after a failed poll; honours flood-control ``retry_after``."""
    if isinstance(exc, APIException) and exc.retry_after:
        return exc.retry_after
    return _RETRY_DELAY


def poll_once(telegram: Api, offset: Optional[int]) -> Optional[int]:
    """Fetch and dispatch one batch of updates; return the offset for the next poll.

    The offset moves past the highest ``update_id`` Telegram sent, including
    updates that were skipped as malformed, so they are not redelivered.
    """
    try:
        updates = telegram.get_updates(offset=offset, timeout=POLL_TIMEOUT)
    except (APIException, requests.RequestException) as exc:
        delay = retry_delay(exc)
        logger.warning("getUpdates failed, retrying", extra={"api_method": "getUpdates", "error": str(exc), "retry_in": delay})
        time.sleep(delay)
        return offset

    highest_id = telegram.last_update_id
    if updates:
        logger.debug("Received updates", extra={"count": len(updates)})
    for update in updates:
        process_update(telegram, update)
        if highest_id is None or update.update_id > highest_id:
            highest_id = update.update_id

    return highest_id + 1 if highest_id is not None else offset


def run() -> None:
    """Start the synchronous long-polling loop.

    Raises:
        EnvironmentError: If ``BOT_TOKEN`` is not set.
    """
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    manager = BotsManager(build_config())
    telegram = manager.bot()
    publish_commands(telegram)

    offset: int | None = None
    logger.info("Bot is running. Polling for updates...", extra={"bot": BOT_NAME})
    while True:
        offset = poll_once(telegram, offset)

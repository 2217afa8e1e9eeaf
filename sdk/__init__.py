"""Telegram Bot API SDK — client, Pydantic models, DI container, bots manager.

Usage::

    from sdk.client import Api
    from sdk.manager import BotsManager
    from sdk.models import Update, Message
    from sdk import APIException, ConfigurationError

Only the exception hierarchy is re-exported here; ``sdk.client`` depends on
the ``commands`` package, which itself imports ``sdk.exceptions``.
"""

from sdk.exceptions import (
    APIException,
    ConfigurationError,
    ContractViolationError,
    ResolutionError,
    TelegramSDKException,
)

__all__ = [
    "TelegramSDKException",
    "APIException",
    "ConfigurationError",
    "ContractViolationError",
    "ResolutionError",
]

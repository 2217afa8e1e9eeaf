"""Shared fixtures and update builders for the test suite."""

import os
import sys
import tempfile

# Keep the rotating log file out of the working tree during tests.
os.environ.setdefault("TELEGRAM_LOG_DIR", tempfile.mkdtemp(prefix="telegram-logs-"))

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from sdk.client import Api
from sdk.models import Update


def make_update(text: str, chat_id: int = 1000, update_id: int = 1) -> Update:
    """Build an Update carrying a private-chat text message."""
    return Update.model_validate({
        "update_id": update_id,
        "message": {
            "message_id": 1,
            "date": 0,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
            "text": text,
        },
    })


def make_callback_update(data: str, cb_id: str = "cb123", chat_id: int = 1000, update_id: int = 2) -> Update:
    """Build an Update carrying a callback query with *data*."""
    return Update.model_validate({
        "update_id": update_id,
        "callback_query": {
            "id": cb_id,
            "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
            "chat_instance": "test",
            "message": {
                "message_id": 10,
                "date": 0,
                "chat": {"id": chat_id, "type": "private"},
            },
            "data": data,
        },
    })


@pytest.fixture()
def telegram() -> Api:
    """An Api bound to a fake server; HTTP calls must be patched by the test."""
    return Api("123:ABC", base_url="https://api.example.com")

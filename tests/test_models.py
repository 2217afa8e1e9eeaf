"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from sdk.models import BotCommand, CallbackQuery, Message, Update, User


class TestModelAliases:
    """Validate the ``from`` → ``from_field`` alias."""

    def test_message_from_alias(self) -> None:
        msg = Message.model_validate({
            "message_id": 1,
            "date": 0,
            "chat": {"id": 1, "type": "private"},
            "from": {"id": 42, "is_bot": False, "first_name": "Ann"},
        })
        assert msg.from_field is not None
        assert msg.from_field.id == 42

    def test_populate_by_name(self) -> None:
        user = User(id=1, is_bot=False, first_name="Ann")
        query = CallbackQuery(id="q", from_field=user, chat_instance="c")
        assert query.model_dump(by_alias=True)["from"]["first_name"] == "Ann"

    def test_unknown_fields_are_ignored(self) -> None:
        update = Update.model_validate({"update_id": 3, "poll": {"id": "p"}})
        assert update.update_id == 3
        assert update.message is None


class TestUpdateGetChat:
    """Validate chat lookup across update kinds."""

    def test_message_chat(self) -> None:
        update = Update.model_validate({
            "update_id": 1,
            "message": {"message_id": 1, "date": 0, "chat": {"id": 11, "type": "private"}},
        })
        assert update.get_chat().id == 11

    def test_channel_post_chat(self) -> None:
        update = Update.model_validate({
            "update_id": 1,
            "channel_post": {"message_id": 1, "date": 0, "chat": {"id": -100, "type": "channel"}},
        })
        assert update.get_chat().type == "channel"

    def test_callback_message_chat(self) -> None:
        update = Update.model_validate({
            "update_id": 1,
            "callback_query": {
                "id": "q",
                "from": {"id": 1, "is_bot": False, "first_name": "Ann"},
                "chat_instance": "c",
                "message": {"message_id": 2, "date": 0, "chat": {"id": 22, "type": "group"}},
                "data": "x",
            },
        })
        assert update.get_chat().id == 22

    def test_no_chat(self) -> None:
        assert Update(update_id=1).get_chat() is None


class TestValidation:
    """Validate required fields."""

    def test_update_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            Update.model_validate({})

    def test_bot_command_fields(self) -> None:
        with pytest.raises(ValidationError):
            BotCommand(command="start")

"""Pydantic data models for the Telegram Bot API objects the SDK consumes.

Every class corresponds to an object of the Bot API reference.  Responses
from :class:`sdk.client.Api` are validated into these models; unknown fields
sent by newer API versions are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ResponseParameters(BaseModel):
    """Contains information about why a request was unsuccessful."""

    migrate_to_chat_id: Optional[int] = None
    retry_after: Optional[int] = None

    model_config = {"populate_by_name": True}


class Error(BaseModel):
    """Error body returned by the Telegram Bot API."""

    ok: bool = False
    error_code: int
    description: str
    parameters: Optional["ResponseParameters"] = None

    model_config = {"populate_by_name": True}


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    can_join_groups: Optional[bool] = None
    can_read_all_group_messages: Optional[bool] = None
    supports_inline_queries: Optional[bool] = None

    model_config = {"populate_by_name": True}


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    description: Optional[str] = None

    model_config = {"populate_by_name": True}


class MessageEntity(BaseModel):
    """One special entity in a text message (hashtag, bot_command, url, …)."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional["User"] = None
    language: Optional[str] = None

    model_config = {"populate_by_name": True}


class LoginUrl(BaseModel):
    """Parameter of an inline keyboard button used to authorize a user."""

    url: str
    forward_text: Optional[str] = None
    bot_username: Optional[str] = None
    request_write_access: Optional[bool] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard. You **must** use exactly one of the optional fields."""

    text: str
    url: Optional[str] = None
    login_url: Optional["LoginUrl"] = None
    callback_data: Optional[str] = None
    switch_inline_query: Optional[str] = None
    switch_inline_query_current_chat: Optional[str] = None
    pay: Optional[bool] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard that appears right next to the message it belongs to."""

    inline_keyboard: List[List["InlineKeyboardButton"]]

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    """This object represents a message."""

    message_id: int
    date: int
    chat: "Chat"
    from_field: Optional["User"] = Field(None, alias="from")
    sender_chat: Optional["Chat"] = None
    reply_to_message: Optional["Message"] = None
    via_bot: Optional["User"] = None
    edit_date: Optional[int] = None
    text: Optional[str] = None
    entities: Optional[List["MessageEntity"]] = None
    caption: Optional[str] = None
    reply_markup: Optional["InlineKeyboardMarkup"] = None

    model_config = {"populate_by_name": True}


class CallbackQuery(BaseModel):
    """An incoming callback query from a callback button in an inline keyboard."""

    id: str
    from_field: "User" = Field(..., alias="from")
    chat_instance: str
    message: Optional["Message"] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None
    game_short_name: Optional[str] = None

    model_config = {"populate_by_name": True}


class Update(BaseModel):
    """An incoming update. At most **one** of the optional parameters can be present."""

    update_id: int
    message: Optional["Message"] = None
    edited_message: Optional["Message"] = None
    channel_post: Optional["Message"] = None
    edited_channel_post: Optional["Message"] = None
    callback_query: Optional["CallbackQuery"] = None

    model_config = {"populate_by_name": True}

    def get_chat(self) -> Optional[Chat]:
        """Return the chat this update belongs to, looking inside callback queries too."""
        message = (
            self.message
            or self.edited_message
            or self.channel_post
            or self.edited_channel_post
        )
        if message is None and self.callback_query is not None:
            message = self.callback_query.message
        return message.chat if message is not None else None


class WebhookInfo(BaseModel):
    """Contains information about the current status of a webhook."""

    url: str
    has_custom_certificate: bool
    pending_update_count: int
    ip_address: Optional[str] = None
    last_error_date: Optional[int] = None
    last_error_message: Optional[str] = None
    max_connections: Optional[int] = None
    allowed_updates: Optional[List[str]] = None

    model_config = {"populate_by_name": True}


class BotCommand(BaseModel):
    """This object represents a bot command shown in the client's command menu."""

    command: str
    description: str

    model_config = {"populate_by_name": True}

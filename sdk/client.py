"""Api -- Telegram Bot API client and owner of the two command buses.

HTTP calls use the ``requests`` library.  Every Bot API method is reachable
through :meth:`Api.call`; the handful of methods the dispatch layer relies on
also have typed wrappers returning Pydantic models.

Inbound updates flow through :meth:`Api.process_command` (message text →
:class:`~commands.bus.CommandBus`) and :meth:`Api.process_callback`
(callback data → :class:`~commands.bus.CallbackCommandBus`).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Union

import requests
from pydantic import ValidationError

from core.logger import SDKLogger
from commands.bus import CallbackCommandBus, CommandBus
from commands.parser import parse_command, split_arguments
from sdk.container import Container
from sdk.exceptions import APIException, TelegramSDKException
from sdk.models import BotCommand, Message, Update, User, WebhookInfo

logger = SDKLogger.get_logger()

DEFAULT_API_URL = "https://api.telegram.org"


class Api:
    """Client for one bot token.

    Args:
        token: Bot token issued by @BotFather.
        base_url: API server root (override for a local Bot API server).
        timeout: Default request timeout in seconds.
        container: Optional DI container used to build handlers registered
            by class.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: int = _DEFAULT_TIMEOUT,
        container: Optional[Container] = None,
    ) -> None:
        if not token:
            raise TelegramSDKException("Required bot token is not supplied.")
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._container = container
        # Highest raw update_id of the last getUpdates reply, malformed updates included.
        self.last_update_id: Optional[int] = None
        self.command_bus = CommandBus(self)
        self.callback_bus = CallbackCommandBus(self)

    # ------------------------------------------------------------------
    #  Configuration
    # ------------------------------------------------------------------

    @property
    def token(self) -> str:
        return self._token

    @property
    def timeout(self) -> int:
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        self._timeout = value

    @property
    def container(self) -> Optional[Container]:
        return self._container

    @container.setter
    def container(self, container: Optional[Container]) -> None:
        self._container = container
        self.command_bus.registry.container = container
        self.callback_bus.registry.container = container

    def has_container(self) -> bool:
        return self._container is not None

    # ------------------------------------------------------------------
    #  Transport
    # ------------------------------------------------------------------

    def _post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None) -> Dict[str, Any]:
        """Send a POST request and return the parsed JSON body.

        Raises:
            APIException: If the response status code is not 2xx.
            requests.RequestException: On transport-level failures.
        """
        url = f"{self._base_url}/bot{self._token}/{endpoint.lstrip('/')}"
        logger.debug("Calling Bot API", extra={"api_method": endpoint})
        response = requests.post(url, json=payload, timeout=timeout or self._timeout)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.ok:
            logger.warning("Bot API error", extra={"api_method": endpoint, "status_code": response.status_code, "api_response": body})
            raise APIException(response.status_code, body)
        return body

    def call(self, method: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None) -> Any:
        """Invoke any Bot API *method* and return its decoded ``result``.

        ``None`` values in *params* are dropped and Pydantic models are
        serialised, so typed wrappers can pass optional arguments through.

        Raises:
            APIException: If the API answers with a non-2xx status or
                ``"ok": false``.
        """
        payload = _prepare_params(params or {})
        body = self._post(method, payload, timeout=timeout)
        if not body.get("ok", False):
            raise APIException(body.get("error_code", 200), body)
        return body.get("result")

    # ------------------------------------------------------------------
    #  Typed Bot API methods
    # ------------------------------------------------------------------

    def get_me(self) -> User:
        """A simple method for testing your bot's auth token."""
        return User.model_validate(self.call("getMe"))

    def send_message(self, chat_id: Union[int, str], text: str, **params: Any) -> Message:
        """Send a text message; extra *params* map to sendMessage fields."""
        result = self.call("sendMessage", {"chat_id": chat_id, "text": text, **params})
        return Message.model_validate(result)

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: Optional[bool] = None,
        **params: Any,
    ) -> bool:
        """Send an answer to a callback query sent from an inline keyboard."""
        return bool(self.call("answerCallbackQuery", {
            "callback_query_id": callback_query_id,
            "text": text,
            "show_alert": show_alert,
            **params,
        }))

    def get_updates(
        self,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        timeout: Optional[int] = None,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Update]:
        """Receive incoming updates using long polling.

        The HTTP timeout is extended past the long-poll *timeout* so the
        server can hold the connection open.
        """
        result = self.call(
            "getUpdates",
            {"offset": offset, "limit": limit, "timeout": timeout, "allowed_updates": allowed_updates},
            timeout=(timeout or 0) + self._timeout,
        )
        updates: List[Update] = []
        self.last_update_id = None
        for raw in result or []:
            raw_id = raw.get("update_id") if isinstance(raw, dict) else None
            if isinstance(raw_id, int) and (self.last_update_id is None or raw_id > self.last_update_id):
                self.last_update_id = raw_id
            try:
                updates.append(Update.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed update", extra={"update_id": raw_id, "error": str(exc)})
        return updates

    def set_webhook(self, url: str, **params: Any) -> bool:
        return bool(self.call("setWebhook", {"url": url, **params}))

    def delete_webhook(self, drop_pending_updates: Optional[bool] = None) -> bool:
        return bool(self.call("deleteWebhook", {"drop_pending_updates": drop_pending_updates}))

    def remove_webhook(self) -> bool:
        """Remove the outgoing webhook by setting an empty url."""
        return self.set_webhook("")

    def get_webhook_info(self) -> WebhookInfo:
        return WebhookInfo.model_validate(self.call("getWebhookInfo"))

    def set_my_commands(self, commands: Iterable[BotCommand]) -> bool:
        """Publish the command list shown in the client's menu."""
        return bool(self.call("setMyCommands", {"commands": list(commands)}))

    def get_my_commands(self) -> List[BotCommand]:
        return [BotCommand.model_validate(item) for item in self.call("getMyCommands") or []]

    # ------------------------------------------------------------------
    #  Command bus access
    # ------------------------------------------------------------------

    def add_command(self, command: Any) -> CommandBus:
        return self.command_bus.add_command(command)

    def add_commands(self, commands: Iterable[Any]) -> CommandBus:
        return self.command_bus.add_commands(commands)

    def remove_command(self, name: str) -> CommandBus:
        return self.command_bus.remove_command(name)

    def remove_commands(self, names: Iterable[str]) -> CommandBus:
        return self.command_bus.remove_commands(names)

    def get_commands(self) -> Dict[str, Any]:
        return self.command_bus.get_commands()

    def add_callback_command(self, command: Any) -> CallbackCommandBus:
        return self.callback_bus.add_callback_command(command)

    def add_callback_commands(self, commands: Iterable[Any]) -> CallbackCommandBus:
        return self.callback_bus.add_callback_commands(commands)

    # ------------------------------------------------------------------
    #  Update processing
    # ------------------------------------------------------------------

    def get_webhook_update(self, body: Union[str, bytes, Dict[str, Any]]) -> Update:
        """Build an :class:`Update` from a webhook request body.

        Raises:
            TelegramSDKException: If the body is not a valid update.
        """
        try:
            data = json.loads(body) if isinstance(body, (str, bytes)) else body
            return Update.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise TelegramSDKException(f"Invalid webhook update: {exc}") from exc

    def process_command(self, update: Update) -> None:
        """Run the command bus when the update carries message text."""
        message = update.message
        if message is not None and message.text:
            self.command_bus.handler(message.text, update)

    def process_callback(self, update: Update) -> None:
        """Run the callback bus when the update carries callback data."""
        callback_query = update.callback_query
        if callback_query is not None and callback_query.data:
            self.callback_bus.handler(callback_query.data, update)

    def process_update(self, update: Update) -> Update:
        self.process_command(update)
        self.process_callback(update)
        return update

    def commands_handler(
        self,
        webhook: bool = False,
        body: Union[str, bytes, Dict[str, Any], None] = None,
        timeout: Optional[int] = None,
    ) -> Union[Update, List[Update]]:
        """Process inbound commands from a webhook *body* or one polling batch.

        In polling mode the processed batch is confirmed by requesting
        ``getUpdates`` with an offset past the highest ``update_id``.
        """
        if webhook:
            if body is None:
                raise TelegramSDKException("A webhook body is required when webhook=True.")
            return self.process_update(self.get_webhook_update(body))

        updates = self.get_updates(timeout=timeout)
        highest_id = self.last_update_id
        for update in updates:
            self.process_update(update)
            if highest_id is None or update.update_id > highest_id:
                highest_id = update.update_id

        if highest_id is not None:
            self.mark_update_as_read(highest_id + 1)
        return updates

    def mark_update_as_read(self, offset: int) -> List[Update]:
        """Confirm every update below *offset*."""
        return self.get_updates(offset=offset, limit=1)

    def trigger_command(self, name: str, update: Update) -> Any:
        """Execute command *name* with the arguments found in the update's text."""
        text = update.message.text if update.message is not None and update.message.text else ""
        match = parse_command(text)
        arguments = split_arguments(match.arguments if match is not None else text)
        return self.command_bus.execute(name.lower(), arguments, update)


def _prepare_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` values and dump Pydantic models to JSON-ready dicts."""
    prepared: Dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        prepared[key] = _dump(value)
    return prepared


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump(item) for key, item in value.items() if item is not None}
    return value

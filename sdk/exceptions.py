"""Exception hierarchy for the Telegram SDK."""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from sdk.models import Error


class TelegramSDKException(Exception):
    """Base class for every error raised by this SDK."""


class ConfigurationError(TelegramSDKException):
    """A command/bot reference in the configuration cannot be resolved.

    Raised for unknown command references, unconfigured bots and command
    groups that contain themselves.
    """


class ContractViolationError(TelegramSDKException):
    """A registered object does not implement the handler contract."""


class ResolutionError(TelegramSDKException):
    """The dependency-injection container could not build an instance."""


class APIException(TelegramSDKException):
    """Error response from the Telegram Bot API.

    Attributes:
        status_code: HTTP status code (or ``error_code``) of the reply.
        response_body: Raw response body as a dict, when available.
        error: The body parsed as :class:`~sdk.models.Error`, or ``None``
            when it does not have that shape.
    """

    def __init__(self, status_code: int, response_body: Optional[Dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self.response_body = response_body or {}
        try:
            self.error: Optional[Error] = Error.model_validate(self.response_body)
        except ValidationError:
            self.error = None
        description = self.response_body.get("description", "Unknown error")
        super().__init__(f"API error {status_code}: {description}")

    @property
    def retry_after(self) -> Optional[int]:
        """Seconds to wait before retrying, as sent with 429 Too Many Requests."""
        if self.error is None or self.error.parameters is None:
            return None
        return self.error.parameters.retry_after

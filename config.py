"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, ``BOT_NAME``, ``TELEGRAM_API_URL``, ``REQUEST_TIMEOUT``,
``POLL_TIMEOUT`` and ``RESOLVE_COMMAND_DEPENDENCIES`` from the environment via
``python-dotenv``.  All values are resolved at import time so other modules
can ``from config import …`` without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import SDKLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

logger = SDKLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_bool(raw: str | None, default: bool = False) -> bool:
    """Interpret ``"1"``, ``"true"``, ``"yes"`` and ``"on"`` (any case) as True."""
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(raw: str | None, default: int) -> int:
    """Parse *raw* as an int, falling back to *default* on missing/invalid input."""
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer in environment, using default", extra={"value": raw, "default": default})
        return default


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
BOT_NAME: str = os.environ.get("BOT_NAME", "default")
API_URL: str = os.environ.get("TELEGRAM_API_URL", "https://api.telegram.org")
REQUEST_TIMEOUT: int = _parse_int(os.environ.get("REQUEST_TIMEOUT"), 10)
POLL_TIMEOUT: int = _parse_int(os.environ.get("POLL_TIMEOUT"), 30)
RESOLVE_COMMAND_DEPENDENCIES: bool = _parse_bool(os.environ.get("RESOLVE_COMMAND_DEPENDENCIES"))


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set", extra={"bot": BOT_NAME, "api_url": API_URL})
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

logger.info(
    "Dispatch settings resolved",
    extra={
        "request_timeout": REQUEST_TIMEOUT,
        "poll_timeout": POLL_TIMEOUT,
        "resolve_command_dependencies": RESOLVE_COMMAND_DEPENDENCIES,
    },
)

"""Framework-agnostic infrastructure shared by every layer.

This package must NEVER import from ``bot/``, ``commands/`` or ``sdk/``.
"""

from core.logger import SDKLogger

__all__ = [
    "SDKLogger",
]

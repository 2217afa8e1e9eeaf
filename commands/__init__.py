"""Command & callback dispatch engine.

Parses inbound ``/command`` text and callback-query data, resolves the
registered handler and invokes it.  This package may import from ``core/``
and ``sdk/`` only (``sdk.client`` is referenced for type checking).
"""

from commands.base import (
    CallbackCommand,
    CallbackCommandInterface,
    Command,
    CommandInterface,
)
from commands.bus import NO_MATCH, CallbackCommandBus, CommandBus, NoMatch
from commands.parser import CommandMatch, parse_callback_data, parse_command, split_arguments
from commands.registry import HandlerRegistry

__all__ = [
    # Handler contract
    "Command",
    "CommandInterface",
    "CallbackCommand",
    "CallbackCommandInterface",
    # Buses
    "CommandBus",
    "CallbackCommandBus",
    "NO_MATCH",
    "NoMatch",
    # Registry
    "HandlerRegistry",
    # Parsing
    "CommandMatch",
    "parse_command",
    "parse_callback_data",
    "split_arguments",
]

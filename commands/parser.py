"""Parsing of inbound command text and callback data.

Only pure functions live here; the buses in :mod:`commands.bus` call them.
"""

import re
from typing import List, NamedTuple, Optional, Tuple

# A command is only recognised at the very start of the text:
#   /command[@botname][<whitespace> arguments…]
_COMMAND_RE = re.compile(r"^/(\w+)(?:@(\S+))?(?:\s+(.*))?$", re.DOTALL)


class CommandMatch(NamedTuple):
    """Result of :func:`parse_command`, indexable like the regex groups.

    ``match[0]`` is the full text, ``match[1]`` the command, ``match[2]``
    the bot-name suffix and ``match[3]`` the raw argument string.
    """

    full: str
    command: str
    bot_name: str
    arguments: str


def parse_command(text: str) -> Optional[CommandMatch]:
    """Parse a leading ``/command`` out of *text*.

    Returns ``None`` when *text* does not start with a command, even if one
    appears later in the text::

        >>> parse_command("/start@mybot arg1 arg2")
        CommandMatch(full='/start@mybot arg1 arg2', command='start', bot_name='mybot', arguments='arg1 arg2')
        >>> parse_command("hello /start") is None
        True
    """
    match = _COMMAND_RE.match(text)
    if match is None:
        return None
    command, bot_name, arguments = match.groups()
    return CommandMatch(match.group(0), command, bot_name or "", arguments or "")


def split_arguments(raw: str) -> List[str]:
    """Split a raw argument string into whitespace-separated tokens."""
    return raw.split()


def parse_callback_data(data: str) -> Tuple[str, List[str]]:
    """Split callback *data* on single spaces into ``(command, arguments)``.

    The command is lowercased.  An empty string yields ``("", [])``.
    """
    tokens = data.split(" ")
    return tokens[0].lower(), tokens[1:]

"""ANSI colour markup for operator-facing output.

Text marks colour changes with bracketed lower-case names such as
``[green]`` or ``[bold]``. :func:`colorize` swaps each known name for its
escape sequence, or strips it when colour is disabled. Unknown names are
left untouched.

Example:
>>> colorize("[green]ok", enabled=False)
'ok'

"""

from __future__ import annotations

import enum
import re

_MARKUP = re.compile(r"\[([a-z0-9_]+)\]")


class Color(enum.Enum):
    """ANSI SGR codes addressable from markup."""

    RESET = "0"
    BOLD = "1"
    DIM = "2"
    UNDERLINE = "4"
    BLACK = "30"
    RED = "31"
    GREEN = "32"
    YELLOW = "33"
    BLUE = "34"
    MAGENTA = "35"
    CYAN = "36"
    LIGHT_GRAY = "37"
    DEFAULT = "39"
    DARK_GRAY = "90"
    LIGHT_RED = "91"
    LIGHT_GREEN = "92"
    LIGHT_YELLOW = "93"
    LIGHT_BLUE = "94"
    LIGHT_MAGENTA = "95"
    LIGHT_CYAN = "96"
    WHITE = "97"

    @property
    def escape(self) -> str:
        """Return the terminal escape sequence for this code."""
        return f"\033[{self.value}m"


def colorize(text: str, *, enabled: bool) -> str:
    """Render colour markup in ``text``.

    Parameters
    ----------
    text : str
        Text containing ``[name]`` markup.
    enabled : bool
        Emit escape sequences when true; strip known markup otherwise.

    Returns
    -------
    str
        The rendered text. When colour is enabled a reset sequence is
        appended so styling never leaks into later output.

    """

    def _render(match: re.Match[str]) -> str:
        color = Color.__members__.get(match[1].upper())
        if color is None:
            return match[0]
        return color.escape if enabled else ""

    rendered = _MARKUP.sub(_render, text)
    if enabled:
        return rendered + Color.RESET.escape
    return rendered


__all__ = ["Color", "colorize"]

"""Style-string compilation and segment painting.

Style strings such as ``"bold green"`` or ``"fg:#c3002f bg:black"`` are
compiled into ANSI SGR prefixes. Attribute and colour names come from
``pygments.console`` so the palette matches Pygments' terminal output.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from pygments.console import codes, dark_colors, light_colors

from .errors import StyleError
from .template import Segment

logger = logging.getLogger(__name__)

ESC = "\x1b["
RESET = codes["reset"]

_ATTRIBUTES: dict[str, str] = {
    "bold": codes["bold"],
    "dimmed": codes["faint"],
    "italic": codes["standout"],
    "underline": codes["underline"],
    "blink": codes["blink"],
    "inverted": ESC + "07m",
    "hidden": ESC + "08m",
    "strikethrough": ESC + "09m",
}

# pygments calls standard white "gray" and bright white "white".
_COLOR_ALIASES = {"purple": "magenta", "grey": "gray", "white": "gray", "brightwhite": "white"}
_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")


def _color_index(name: str) -> int | None:
    """Return the SGR foreground code for a named colour, or ``None``."""
    key = name.lower().replace("-", "").replace("_", "")
    key = _COLOR_ALIASES.get(key, key)
    if key in dark_colors:
        return 30 + dark_colors.index(key)
    if key in light_colors:
        return 90 + light_colors.index(key)
    return None


def _color_sequence(value: str, background: bool) -> str:
    index = _color_index(value)
    if index is not None:
        return f"{ESC}{index + 10 if background else index}m"
    layer = 48 if background else 38
    match = _HEX_RE.match(value)
    if match:
        rgb = match.group(1)
        r, g, b = (int(rgb[i:i + 2], 16) for i in (0, 2, 4))
        return f"{ESC}{layer};2;{r};{g};{b}m"
    if value.isdigit() and 0 <= int(value) <= 255:
        return f"{ESC}{layer};5;{int(value)}m"
    raise StyleError(f"unknown colour {value!r}")


@lru_cache(maxsize=256)
def compile_style(style: str) -> str:
    """Compile ``style`` into an SGR prefix.

    Words are separated by whitespace. ``none`` disables styling entirely.
    Raises ``StyleError`` for words that are neither attributes nor colours.
    """
    words = style.split()
    if any(word.lower() == "none" for word in words):
        return ""
    out: list[str] = []
    for word in words:
        lowered = word.lower()
        if lowered in _ATTRIBUTES:
            out.append(_ATTRIBUTES[lowered])
        elif lowered.startswith("fg:"):
            out.append(_color_sequence(word[3:], background=False))
        elif lowered.startswith("bg:"):
            out.append(_color_sequence(word[3:], background=True))
        else:
            try:
                out.append(_color_sequence(word, background=False))
            except StyleError:
                raise StyleError(f"unknown style word {word!r} in {style!r}") from None
    return "".join(out)


def paint(text: str, style: str | None, no_color: bool = False) -> str:
    """Wrap ``text`` in the SGR sequences for ``style``."""
    if no_color or not style or not text:
        return text
    try:
        prefix = compile_style(style)
    except StyleError as exc:
        logger.warning("ignoring style: %s", exc)
        return text
    if not prefix:
        return text
    return prefix + text + RESET


def paint_segments(segments: Iterable[Segment], no_color: bool = False) -> str:
    """Render segments into one prompt string."""
    return "".join(paint(segment.text, segment.style, no_color) for segment in segments)


__all__ = [
    "RESET",
    "compile_style",
    "paint",
    "paint_segments",
]

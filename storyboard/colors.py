"""CSS colour parsing and alpha scaling."""

import re

from PIL import ImageColor

from storyboard.errors import InvalidColorError

TRANSPARENT = "rgba(0,0,0,0)"
TRANSPARENT_NAMES = {"transparent", "none"}

# rgb()/rgba() with plain numeric channels, as written back by with_alpha
NUMERIC_FUNCTION_PATTERN = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+%?)\s*)?\)$"
)
SPACE_SEPARATED_PATTERN = re.compile(r"^(\w+)\(([^,()]*)\)$")


def parse_color(value: str) -> tuple[float, float, float, float]:
    """Parse a CSS colour into (r, g, b, a) with alpha in [0, 1].

    Named colours, hex forms, hsl()/hsv() and percentage rgb() are handed to
    Pillow's ImageColor. Raises InvalidColorError for anything else.
    """
    text = _comma_separated(value.strip().lower())
    if text in TRANSPARENT_NAMES:
        return 0, 0, 0, 0

    match = NUMERIC_FUNCTION_PATTERN.match(text)
    if match:
        r, g, b = (_parse_number(match.group(i)) for i in (1, 2, 3))
        alpha = match.group(4)
        if alpha is None:
            return r, g, b, 1
        if alpha.endswith("%"):
            return r, g, b, _parse_number(alpha[:-1]) / 100
        return r, g, b, _parse_number(alpha)

    try:
        channels = ImageColor.getrgb(text)
    except ValueError:
        raise InvalidColorError(value) from None
    if len(channels) == 4:
        return channels[0], channels[1], channels[2], channels[3] / 255
    return channels[0], channels[1], channels[2], 1


def with_alpha(value: str | None, opacity: float) -> str | None:
    """Multiply a colour's alpha by opacity, formatted as rgba()."""
    if not value:
        return None
    r, g, b, a = parse_color(value)
    return format_rgba(r, g, b, a * opacity)


def format_rgba(r: float, g: float, b: float, a: float) -> str:
    return "rgba(" + ",".join(format_number(n) for n in (r, g, b, a)) + ")"


def format_number(value: float) -> str:
    """Integral floats print without a trailing .0."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _comma_separated(text: str) -> str:
    """Rewrite CSS Color 4 `rgb(255 0 0 / 50%)` syntax to the comma form."""
    match = SPACE_SEPARATED_PATTERN.match(text)
    if not match:
        return text
    parts = match.group(2).replace("/", " ").split()
    return f"{match.group(1)}({','.join(parts)})"


def _parse_number(text: str) -> float:
    try:
        number = float(text)
    except ValueError:
        raise InvalidColorError(text) from None
    return int(number) if number.is_integer() else number

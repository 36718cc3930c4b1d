"""Parsing of the play-time text shown by the catalog.

The catalog renders durations as free text: ``"12 Hours"``, ``"65½ Hours"``,
ranges such as ``"5 Hours - 12 Hours"`` and ``"--"`` when nobody submitted a
time yet. Very short games are listed in minutes (``"45 Mins"``).
"""

from .errors import MalformedFieldError

UNKNOWN_MARKER = "--"
RANGE_SEPARATOR = " - "

# The half marker arrives decoded when the page went through an HTML parser,
# and as a character reference when the raw markup is used.
HALF_MARKERS = ("½", "&#189;", "&frac12;")

# Unit word -> divisor to convert the quantity into hours
UNIT_DIVISORS: dict[str, int] = {
    "Hours": 1,
    "Hour": 1,
    "Mins": 60,
    "Min": 60,
}


def parse_time(text: str) -> float:
    """Parse a duration text token into hours.

    Args:
        text: Duration as shown on the page, e.g. ``"44½ Hours"``

    Returns:
        The number of hours; ``0`` for the unknown marker and the mean of
        both ends for a range

    Raises:
        MalformedFieldError: If the text has none of the known shapes
    """
    text = text.strip()
    if text == UNKNOWN_MARKER:
        return 0.0

    if RANGE_SEPARATOR in text:
        start, _, end = text.partition(RANGE_SEPARATOR)
        return (_parse_quantity(start, text) + _parse_quantity(end, text)) / 2

    return _parse_quantity(text, text)


def _parse_quantity(quantity: str, source: str) -> float:
    """Parse a single quantity like ``"12 Hours"`` or ``"5½ Hours"``."""
    number, separator, unit = quantity.strip().partition(" ")
    if not separator:
        raise MalformedFieldError("Duration has no unit", field="duration", value=source)

    divisor = UNIT_DIVISORS.get(unit.strip())
    if divisor is None:
        raise MalformedFieldError(f"Unknown duration unit: {unit.strip()!r}", field="duration", value=source)

    half = False
    for marker in HALF_MARKERS:
        if marker in number:
            number, _, trailing = number.partition(marker)
            if trailing:
                raise MalformedFieldError("Unexpected text after half marker", field="duration", value=source)
            half = True
            break

    if number == "" and half:
        # "½ Hours" has no whole part
        value = 0.5
    elif number.isascii() and number.isdigit():
        value = int(number) + (0.5 if half else 0.0)
    else:
        raise MalformedFieldError(f"Not a number: {number!r}", field="duration", value=source)

    if divisor == 1:
        return float(value)
    return round(value / divisor, 2)

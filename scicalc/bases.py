"""Integer base conversion (bases 2 to 36)."""

from .errors import InputError

DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MIN_BASE = 2
MAX_BASE = 36


def format_in_base(value: int, base: int) -> str:
    """Render an integer in the given base with upper-case digits."""
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, remainder = divmod(value, base)
        digits.append(DIGITS[remainder])
    return sign + "".join(reversed(digits))


def convert_base(number: str, from_base: int, to_base: int) -> str:
    """Convert an integer written in ``from_base`` into ``to_base``.

    Raises:
        InputError: Empty input, a base outside 2..36, or digits that are
            not valid in ``from_base``.
    """
    text = number.strip()
    if not text:
        raise InputError("Please enter a number.")
    for base in (from_base, to_base):
        if not MIN_BASE <= base <= MAX_BASE:
            raise InputError(f"Base must be between {MIN_BASE} and {MAX_BASE}.")

    try:
        value = int(text, from_base)
    except ValueError:
        raise InputError("Invalid number for the selected 'From Base'.") from None

    return format_in_base(value, to_base)

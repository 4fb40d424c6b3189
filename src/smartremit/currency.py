"""Fixed-point conversion for token amounts.

Token contracts store amounts as i128 scaled by 10^7. Amounts travel through
the API as decimal strings, so conversion is done on digit strings rather than
floats.
"""

import re

from smartremit.errors import ValidationError

DECIMALS = 7
SCALE = 10**DECIMALS

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1

_DECIMAL_RE = re.compile(r"^(-)?(\d*)(?:\.(\d*))?$")


def to_fixed_point(amount: str) -> int:
    """Convert a decimal string to its scaled integer form.

    Fraction digits beyond DECIMALS are dropped, not rounded.

    Args:
        amount: Decimal string such as "12.5" or "-3.5"

    Returns:
        Integer value scaled by 10^7 (0 for empty input)

    Raises:
        ValidationError: If the string is not a plain decimal number
            or does not fit in an i128
    """
    if not amount:
        return 0

    match = _DECIMAL_RE.match(amount.strip())
    if not match:
        raise ValidationError(f"Invalid decimal amount: {amount!r}")

    sign, whole, fraction = match.groups()
    if not whole and not fraction:
        raise ValidationError(f"Invalid decimal amount: {amount!r}")

    fraction = ((fraction or "") + "0" * DECIMALS)[:DECIMALS]
    value = int(whole or "0") * SCALE + int(fraction)
    value = -value if sign else value
    if not I128_MIN <= value <= I128_MAX:
        raise ValidationError(f"Amount is out of range: {amount!r}")
    return value


def from_fixed_point(value: int) -> str:
    """Convert a scaled integer back to a canonical decimal string.

    Trailing fraction zeros are stripped and the decimal point is omitted
    for whole numbers.
    """
    negative = value < 0
    digits = str(abs(int(value))).rjust(DECIMALS + 1, "0")

    integer = digits[:-DECIMALS]
    fraction = digits[-DECIMALS:].rstrip("0")

    formatted = f"{integer}.{fraction}" if fraction else integer
    return f"-{formatted}" if negative else formatted

# src/vmoperator/utils/quantity.py
"""
Kubernetes resource quantity parsing.

Quantities are written as a signed decimal number followed by an optional
suffix: a binary SI multiplier (Ki, Mi, Gi, Ti, Pi, Ei), a decimal SI
multiplier (n, u, m, k, M, G, T, P, E) or a decimal exponent (e3, E-2).
Values are returned as exact Decimals so "1500m" compares equal to "1.5".

Example:
    >>> parse_quantity("512Mi") == 512 * 1024 * 1024
    True
    >>> parse_quantity("1500m") < parse_quantity("2")
    True
"""

import re
from decimal import ROUND_CEILING, Decimal, DefaultContext, localcontext

from ..exceptions import InvalidArgumentError

_NUMBER_PATTERN = re.compile(r"([+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))(.*)")
_EXPONENT_PATTERN = re.compile(r"[eE]([+-]?[0-9]+)")

_BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def _parse(value: str | int | float | Decimal) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"quantity must be a string or number, got {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if not isinstance(value, str):
        raise InvalidArgumentError(f"quantity must be a string or number, got {type(value).__name__}")

    match = _NUMBER_PATTERN.fullmatch(value.strip())
    if match is None:
        raise InvalidArgumentError(f"quantities must match the regular expression: {value!r}")

    number, suffix = Decimal(match.group(1)), match.group(2)

    if suffix in _BINARY_SUFFIXES:
        return number * _BINARY_SUFFIXES[suffix]
    if suffix in _DECIMAL_SUFFIXES:
        return number * _DECIMAL_SUFFIXES[suffix]

    exponent = _EXPONENT_PATTERN.fullmatch(suffix)
    if exponent is not None:
        return number.scaleb(int(exponent.group(1)))

    raise InvalidArgumentError(f"unable to parse quantity's suffix: {value!r}")


def parse_quantity(value: str | int | float | Decimal) -> Decimal:
    """
    Parse a Kubernetes quantity.

    Args:
        value: Quantity string such as "2", "500m", "4Gi" or "1e3"; ints and
            floats are accepted as plain numbers

    Returns:
        The quantity as a finite Decimal

    Raises:
        InvalidArgumentError: If the value is not a valid quantity, is NaN or
            infinite, or is out of the representable range
    """
    try:
        with localcontext(DefaultContext):
            result = _parse(value)
    except ArithmeticError as e:
        raise InvalidArgumentError(f"quantity is out of range: {value!r}") from e

    if not result.is_finite():
        raise InvalidArgumentError(f"quantity must be a finite number, got {value!r}")
    return result


def quantity_value(value: str | int | float | Decimal) -> int:
    """
    Get a quantity as an integer, rounding fractional values up.

    "1500m" becomes 2 and "100m" becomes 1, matching how Kubernetes reports
    a quantity's integer value.
    """
    return int(parse_quantity(value).to_integral_value(rounding=ROUND_CEILING))

import math
from typing import Any

from ..exceptions import CatalogError


def finite_number(value: Any, what: str) -> float:
    """Coerce ``value`` to a finite float or raise CatalogError."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise CatalogError(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise CatalogError(f"{what} must be finite, got {value!r}")
    return number


def whole_number(value: Any, what: str) -> int:
    """Coerce ``value`` to an int, rejecting fractions instead of truncating."""
    number = finite_number(value, what)
    if not number.is_integer():
        raise CatalogError(f"{what} must be a whole number, got {value!r}")
    return int(number)

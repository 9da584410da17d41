"""Bitcoin unit factors and 64-bit unsigned integer arithmetic.

Bitcoin consensus code stores amounts, weights and fee rates as 64-bit
unsigned integers. Python integers are unbounded, so the helpers here emulate
the two families of u64 arithmetic the unit types build upon:
    - checked_* (functions): return None when the result leaves the u64 range
        or when dividing by zero.
    - strict_* (functions): raise IntegerOverflow when the result leaves the
        u64 range and ZeroDivisionError when dividing by zero.

It also includes:
    - IntegerOverflow (exception): raised by the strict family.
    - ensure_u64 (function): validation of raw integers entering a unit type.
    - sat_to_btc, btc_to_str (functions): decimal rendering of satoshis.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

# sats = satoshis

#: the largest value a 64-bit unsigned integer can hold
U64_MAX: int = 0xFFFFFFFFFFFFFFFF

#: the amount of satoshis in one bitcoin
COIN: int = 100_000_000

#: weight units per virtual byte
WITNESS_SCALE_FACTOR: int = 4

#: factor to convert units to kilo units and vice versa
KILO: int = 1000

#: sat/kwu in one sat/vB
SAT_KWU_PER_SAT_VB: int = KILO // WITNESS_SCALE_FACTOR


class IntegerOverflow(OverflowError):
    """Raise when a 64-bit unsigned operation leaves the representable range."""

    def __init__(self, operation: str, lhs: int, rhs: int):
        super().__init__(operation, lhs, rhs)
        self.operation: str = operation
        self.lhs: int = lhs
        self.rhs: int = rhs

    def __str__(self) -> str:
        return f"u64 overflow in {self.lhs} {self.operation} {self.rhs}"


def is_u64(value: int) -> bool:
    return 0 <= value <= U64_MAX


def ensure_u64(value: int, name: str = "value") -> int:
    """Validate that a raw integer can be stored as a 64-bit unsigned integer.

    Args:
        value: the raw integer.
        name: how to call the value in the error message.

    Returns:
        The same value, so the call can be used inline.

    Raises:
        TypeError: if the value is not an integer, booleans included.
        ValueError: if the value is negative or greater than U64_MAX.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not is_u64(value):
        raise ValueError(f"{name} out of u64 range: {value}")
    return value


def checked_add(lhs: int, rhs: int) -> int | None:
    result: int = lhs + rhs
    return result if is_u64(result) else None


def checked_sub(lhs: int, rhs: int) -> int | None:
    result: int = lhs - rhs
    return result if is_u64(result) else None


def checked_mul(lhs: int, rhs: int) -> int | None:
    result: int = lhs * rhs
    return result if is_u64(result) else None


def checked_div(lhs: int, rhs: int) -> int | None:
    if rhs == 0:
        return None
    return lhs // rhs


def strict_add(lhs: int, rhs: int) -> int:
    result = checked_add(lhs, rhs)
    if result is None:
        raise IntegerOverflow("+", lhs, rhs)
    return result


def strict_sub(lhs: int, rhs: int) -> int:
    result = checked_sub(lhs, rhs)
    if result is None:
        raise IntegerOverflow("-", lhs, rhs)
    return result


def strict_mul(lhs: int, rhs: int) -> int:
    result = checked_mul(lhs, rhs)
    if result is None:
        raise IntegerOverflow("*", lhs, rhs)
    return result


def strict_div(lhs: int, rhs: int) -> int:
    if rhs == 0:
        raise ZeroDivisionError(f"u64 division of {lhs} by zero")
    return lhs // rhs


def sat_to_btc(amount: int) -> Decimal:
    """Conversor from satoshis to bitcoin.

    Args:
        amount: the bitcoin amount expressed in satoshis.

    Returns:
        The bitcoin amount expressed in bitcoin units, exact to the eighth
        decimal.
    """
    return (Decimal(amount) / COIN).quantize(
        Decimal("0.00000001"), rounding=ROUND_DOWN
    )


def btc_to_str(amount: Decimal) -> str:
    """A string representation of the bitcoin amount.

    Args:
        amount: the bitcoin amount expressed in bitcoin units.

    Returns:
        A string representing the bitcoin amount with eight decimal points.
    """
    return f"{amount:.8f}"

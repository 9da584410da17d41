"""A module with the representation of bitcoin amounts.

Includes the following:
    - Amount (class): a 64-bit count of satoshis.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar

from datatypes.weight import Weight
from utils.bitcoin import (
    KILO,
    U64_MAX,
    btc_to_str,
    checked_add,
    checked_mul,
    checked_sub,
    ensure_u64,
    sat_to_btc,
    strict_add,
    strict_div,
    strict_mul,
    strict_sub,
)

if TYPE_CHECKING:
    from datatypes.fee_rate import FeeRate


@dataclass(frozen=True, order=True)
class Amount:
    """An amount of bitcoin expressed in its smallest unit, the satoshi.

    Attributes:
        sat: the number of satoshis.
    """

    ZERO: ClassVar[Amount]
    MIN: ClassVar[Amount]
    MAX: ClassVar[Amount]
    ONE_SAT: ClassVar[Amount]

    sat: int

    def __post_init__(self) -> None:
        ensure_u64(self.sat, "amount")

    @classmethod
    def from_sat(cls, sat: int) -> Amount:
        return cls(sat)

    @classmethod
    def arbitrary(cls, rng: random.Random) -> Amount:
        return cls(rng.getrandbits(64))

    def to_sat(self) -> int:
        return self.sat

    def to_btc(self) -> Decimal:
        return sat_to_btc(self.sat)

    def checked_add(self, rhs: Amount) -> Amount | None:
        sat = checked_add(self.sat, rhs.sat)
        return None if sat is None else Amount(sat)

    def checked_sub(self, rhs: Amount) -> Amount | None:
        sat = checked_sub(self.sat, rhs.sat)
        return None if sat is None else Amount(sat)

    def checked_div_by_weight(self, weight: Weight) -> FeeRate | None:
        """Derive the fee rate paid by this amount over a weight.

        Unlike `amount / weight`, the result is rounded up, so the fee rate
        never understates what was paid.

        Returns:
            The fee rate in sat/kwu, or None on overflow or if the weight is
            zero.
        """
        from datatypes.fee_rate import FeeRate

        wu: int = weight.to_wu()
        if wu == 0:
            return None
        sat_kwu = checked_mul(self.sat, KILO)
        if sat_kwu is None:
            return None
        # sat_kwu and wu - 1 are both u64, so the sum fits before dividing
        return FeeRate.from_sat_per_kwu((sat_kwu + wu - 1) // wu)

    def to_serializable(self) -> int:
        return self.sat

    @classmethod
    def from_serializable(cls, value: int) -> Amount:
        return cls(value)

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(strict_add(self.sat, other.sat))

    def __sub__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(strict_sub(self.sat, other.sat))

    def __truediv__(self, other: Weight) -> FeeRate:
        """Truncating integer division into a fee rate.

        This is likely the wrong thing for a user dividing an amount by a
        weight, truncation makes the fee rate look lower than what was paid.
        Consider using `checked_div_by_weight` instead.

        Raises:
            ZeroDivisionError: if the weight is zero.
            IntegerOverflow: if the amount in thousandths of satoshi doesn't
                fit in 64 bits.
        """
        from datatypes.fee_rate import FeeRate

        if not isinstance(other, Weight):
            return NotImplemented
        return FeeRate.from_sat_per_kwu(
            strict_div(strict_mul(self.sat, KILO), other.to_wu())
        )

    def __int__(self) -> int:
        return self.sat

    def __str__(self) -> str:
        return f"{btc_to_str(self.to_btc())} BTC"


Amount.ZERO = Amount(0)
Amount.MIN = Amount.ZERO
Amount.MAX = Amount(U64_MAX)
Amount.ONE_SAT = Amount(1)

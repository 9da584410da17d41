"""This module contains the bitcoin fee rate type.

Includes the following:
    - FeeRate (class): a fee rate in satoshis per 1000 weight units, with
        conversions from and to the per virtual byte denominations and the
        arithmetic needed to price a weight.

Arithmetic comes in two families which are never mixed within one operation:
    - checked: `checked_*`, `from_sat_per_vb`, `fee_wu`, `fee_vb` and
        `checked_sum` return None on overflow, underflow or division by zero.
    - strict: the operators (`+`, `-`, `*`), `sum` and
        `from_sat_per_vb_unchecked` raise IntegerOverflow on overflow or
        underflow. They never wrap around.
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

from datatypes.amount import Amount
from datatypes.weight import Weight
from utils.bitcoin import (
    KILO,
    SAT_KWU_PER_SAT_VB,
    U64_MAX,
    WITNESS_SCALE_FACTOR,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    ensure_u64,
    strict_add,
    strict_mul,
    strict_sub,
)

#: base-10 integer syntax, an optional plus sign followed by ASCII digits
INTEGER_PATTERN = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True, order=True)
class FeeRate:
    """Class to represent bitcoin fee rates and compute fees based on it.

    This is an integer newtype storing the fee rate in sat/kwu, which protects
    against mixing up rates with amounts and against mixing up the sat/vB and
    sat/kvB denominations, only derived at construction or extraction.

    Attributes:
        sat_kwu: the fee rate expressed in satoshis per 1000 weight units.
        ZERO: 0 sat/kwu. Equivalent to MIN, may better express intent in some
            contexts.
        MIN: minimum possible value (0 sat/kwu).
        MAX: maximum possible value.
        BROADCAST_MIN: minimum fee rate required to broadcast a transaction,
            matching the default Bitcoin Core relay policy (1 sat/vB).
        DUST: fee rate used to compute dust amounts (3 sat/vB).
    """

    ZERO: ClassVar[FeeRate]
    MIN: ClassVar[FeeRate]
    MAX: ClassVar[FeeRate]
    BROADCAST_MIN: ClassVar[FeeRate]
    DUST: ClassVar[FeeRate]

    sat_kwu: int

    def __post_init__(self) -> None:
        ensure_u64(self.sat_kwu, "fee rate")

    @classmethod
    def from_sat_per_kwu(cls, sat_kwu: int) -> FeeRate:
        return cls(sat_kwu)

    @classmethod
    def from_sat_per_vb(cls, sat_vb: int) -> FeeRate | None:
        """Build a fee rate from satoshis per virtual byte.

        Returns:
            The fee rate, or None on arithmetic overflow.
        """
        # 1 vb == 4 wu
        # 1 sat/vb == 1/4 sat/wu
        # sat_vb sat/vb * 1000 / 4 == sat/kwu
        sat_kwu = checked_mul(ensure_u64(sat_vb, "sat/vB"), SAT_KWU_PER_SAT_VB)
        return None if sat_kwu is None else cls(sat_kwu)

    @classmethod
    def from_sat_per_vb_unchecked(cls, sat_vb: int) -> FeeRate:
        """Build a fee rate from satoshis per virtual byte without a None path.

        The caller is expected to know the value fits. If it does not, the
        conversion always raises, it never produces a wrapped value.

        Raises:
            IntegerOverflow: if `sat_vb * 250` doesn't fit in 64 bits.
        """
        return cls(strict_mul(ensure_u64(sat_vb, "sat/vB"), SAT_KWU_PER_SAT_VB))

    @classmethod
    def from_sat_per_kvb(cls, sat_kvb: int) -> FeeRate:
        """Build a fee rate from satoshis per 1000 virtual bytes.

        The conversion truncates, precision below 4 sat/kvB is lost.
        """
        return cls(ensure_u64(sat_kvb, "sat/kvB") // WITNESS_SCALE_FACTOR)

    @classmethod
    def from_str(cls, value: str) -> FeeRate:
        """Parse a base-10 integer string as sat/kwu.

        Only ASCII digits with an optional leading `+` are accepted, no
        whitespace, underscores or other unicode digits.

        Raises:
            ValueError: if the string is not a valid u64.
        """
        if INTEGER_PATTERN.fullmatch(value) is None:
            raise ValueError(f"invalid fee rate literal: {value!r}")
        return cls(int(value, 10))

    @classmethod
    def arbitrary(cls, rng: random.Random) -> FeeRate:
        return cls(rng.getrandbits(64))

    @classmethod
    def sum(cls, fee_rates: Iterable[FeeRate]) -> FeeRate:
        """Add up fee rates, raising IntegerOverflow if the total overflows."""
        total: int = 0
        for fee_rate in fee_rates:
            total = strict_add(total, fee_rate.sat_kwu)
        return cls(total)

    @classmethod
    def checked_sum(cls, fee_rates: Iterable[FeeRate]) -> FeeRate | None:
        """Add up fee rates, returning None if the total overflows."""
        total: int = 0
        for fee_rate in fee_rates:
            partial = checked_add(total, fee_rate.sat_kwu)
            if partial is None:
                return None
            total = partial
        return cls(total)

    def to_sat_per_kwu(self) -> int:
        return self.sat_kwu

    def to_sat_per_vb_floor(self) -> int:
        return self.sat_kwu // SAT_KWU_PER_SAT_VB

    def to_sat_per_vb_ceil(self) -> int:
        return (self.sat_kwu + SAT_KWU_PER_SAT_VB - 1) // SAT_KWU_PER_SAT_VB

    def checked_add(self, rhs: int) -> FeeRate | None:
        sat_kwu = checked_add(self.sat_kwu, ensure_u64(rhs, "rhs"))
        return None if sat_kwu is None else FeeRate(sat_kwu)

    def checked_sub(self, rhs: int) -> FeeRate | None:
        sat_kwu = checked_sub(self.sat_kwu, ensure_u64(rhs, "rhs"))
        return None if sat_kwu is None else FeeRate(sat_kwu)

    def checked_mul(self, rhs: int) -> FeeRate | None:
        sat_kwu = checked_mul(self.sat_kwu, ensure_u64(rhs, "rhs"))
        return None if sat_kwu is None else FeeRate(sat_kwu)

    def checked_div(self, rhs: int) -> FeeRate | None:
        sat_kwu = checked_div(self.sat_kwu, ensure_u64(rhs, "rhs"))
        return None if sat_kwu is None else FeeRate(sat_kwu)

    def checked_mul_by_weight(self, weight: Weight) -> Amount | None:
        """Compute the absolute fee for a weight at this fee rate.

        When the resulting fee is a non-integer amount, the amount is rounded
        up, ensuring that the transaction fee is enough instead of falling
        short if rounded down.

        Args:
            weight: the weight to pay for.

        Returns:
            The fee, or None if an overflow occurred.
        """
        product = checked_mul(self.sat_kwu, weight.to_wu())
        if product is None:
            return None
        rounded = checked_add(product, KILO - 1)
        if rounded is None:
            return None
        return Amount.from_sat(rounded // KILO)

    def fee_wu(self, weight: Weight) -> Amount | None:
        """Calculate the fee for a weight in weight units.

        This is equivalent to `checked_mul_by_weight`.
        """
        return self.checked_mul_by_weight(weight)

    def fee_vb(self, vb: int) -> Amount | None:
        """Calculate the fee for a size in virtual bytes.

        Returns:
            The fee, or None if either converting `vb` to weight or the fee
            computation overflowed.
        """
        weight = Weight.from_vb(vb)
        if weight is None:
            return None
        return self.fee_wu(weight)

    def to_serializable(self) -> int:
        return self.sat_kwu

    @classmethod
    def from_serializable(cls, value: int) -> FeeRate:
        return cls(value)

    def __add__(self, other: FeeRate) -> FeeRate:
        if not isinstance(other, FeeRate):
            return NotImplemented
        return FeeRate(strict_add(self.sat_kwu, other.sat_kwu))

    def __radd__(self, other: int) -> FeeRate:
        # builtin sum() starts from the integer 0
        if isinstance(other, bool) or not isinstance(other, int) or other != 0:
            return NotImplemented
        return self

    def __sub__(self, other: FeeRate) -> FeeRate:
        if not isinstance(other, FeeRate):
            return NotImplemented
        return FeeRate(strict_sub(self.sat_kwu, other.sat_kwu))

    def __mul__(self, other: Weight) -> Amount:
        """Compute the fee for a weight, rounding up.

        Raises:
            IntegerOverflow: if the fee computation overflows.
        """
        if not isinstance(other, Weight):
            return NotImplemented
        product: int = strict_mul(self.sat_kwu, other.to_wu())
        return Amount.from_sat(strict_add(product, KILO - 1) // KILO)

    __rmul__ = __mul__

    def __int__(self) -> int:
        return self.sat_kwu

    def __str__(self) -> str:
        return str(self.sat_kwu)

    def __format__(self, format_spec: str) -> str:
        """Format the raw sat/kwu value, or sat/vB with a `#` format spec.

        The alternate form shows the rate rounded up to the next sat/vB, so
        it never understates the actual rate, e.g. `f"{rate:#}"` gives
        "3.00 sat/vbyte". Anything after the `#` is applied to that string.
        """
        if format_spec.startswith("#"):
            text = f"{self.to_sat_per_vb_ceil()}.00 sat/vbyte"
            return format(text, format_spec[1:])
        return format(self.sat_kwu, format_spec)


FeeRate.ZERO = FeeRate(0)
FeeRate.MIN = FeeRate.ZERO
FeeRate.MAX = FeeRate(U64_MAX)
FeeRate.BROADCAST_MIN = FeeRate.from_sat_per_vb_unchecked(1)
FeeRate.DUST = FeeRate.from_sat_per_vb_unchecked(3)

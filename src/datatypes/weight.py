"""A module with the representation of transaction weight.

Includes the following:
    - Weight (class): a 64-bit count of weight units.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import ClassVar

from utils.bitcoin import (
    U64_MAX,
    WITNESS_SCALE_FACTOR,
    checked_add,
    checked_mul,
    checked_sub,
    ensure_u64,
    strict_add,
    strict_mul,
    strict_sub,
)


@dataclass(frozen=True, order=True)
class Weight:
    """The weight of a transaction or of a part of it.

    Since segwit, block space is measured in weight units (wu). A virtual byte
    (vB) is four weight units, the witness discount being expressed by
    counting witness bytes as one weight unit and the rest as four.

    Attributes:
        wu: the weight expressed in weight units.
    """

    WITNESS_SCALE_FACTOR: ClassVar[int] = WITNESS_SCALE_FACTOR
    ZERO: ClassVar[Weight]
    MIN: ClassVar[Weight]
    MAX: ClassVar[Weight]

    wu: int

    def __post_init__(self) -> None:
        ensure_u64(self.wu, "weight")

    @classmethod
    def from_wu(cls, wu: int) -> Weight:
        return cls(wu)

    @classmethod
    def from_vb(cls, vb: int) -> Weight | None:
        """Build a weight from virtual bytes.

        Returns:
            The weight, or None if `vb` weight units don't fit in 64 bits.
        """
        wu = checked_mul(ensure_u64(vb, "vbytes"), WITNESS_SCALE_FACTOR)
        return None if wu is None else cls(wu)

    @classmethod
    def from_vb_unchecked(cls, vb: int) -> Weight:
        """Build a weight from virtual bytes, raising IntegerOverflow if it
        doesn't fit in 64 bits."""
        return cls(strict_mul(ensure_u64(vb, "vbytes"), WITNESS_SCALE_FACTOR))

    @classmethod
    def arbitrary(cls, rng: random.Random) -> Weight:
        return cls(rng.getrandbits(64))

    def to_wu(self) -> int:
        return self.wu

    def to_vbytes_floor(self) -> int:
        return self.wu // WITNESS_SCALE_FACTOR

    def to_vbytes_ceil(self) -> int:
        return (self.wu + WITNESS_SCALE_FACTOR - 1) // WITNESS_SCALE_FACTOR

    def checked_add(self, rhs: Weight) -> Weight | None:
        wu = checked_add(self.wu, rhs.wu)
        return None if wu is None else Weight(wu)

    def checked_sub(self, rhs: Weight) -> Weight | None:
        wu = checked_sub(self.wu, rhs.wu)
        return None if wu is None else Weight(wu)

    def to_serializable(self) -> int:
        return self.wu

    @classmethod
    def from_serializable(cls, value: int) -> Weight:
        return cls(value)

    def __add__(self, other: Weight) -> Weight:
        if not isinstance(other, Weight):
            return NotImplemented
        return Weight(strict_add(self.wu, other.wu))

    def __sub__(self, other: Weight) -> Weight:
        if not isinstance(other, Weight):
            return NotImplemented
        return Weight(strict_sub(self.wu, other.wu))

    def __int__(self) -> int:
        return self.wu

    def __str__(self) -> str:
        return f"{self.wu} wu"


Weight.ZERO = Weight(0)
Weight.MIN = Weight.ZERO
Weight.MAX = Weight(U64_MAX)

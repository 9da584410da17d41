"""Unit tests for the Weight and Amount collaborators."""

import random
from decimal import Decimal

import pytest

from datatypes.amount import Amount
from datatypes.fee_rate import FeeRate
from datatypes.weight import Weight
from utils.bitcoin import COIN, U64_MAX, IntegerOverflow


@pytest.mark.unit
class TestWeight:
    """Test cases for the Weight class."""

    def test_from_wu(self) -> None:
        """Weight units are stored as given."""
        assert Weight.from_wu(381).to_wu() == 381

    def test_from_vb(self) -> None:
        """A virtual byte is four weight units."""
        assert Weight.from_vb(10) == Weight.from_wu(40)
        assert Weight.from_vb(U64_MAX // 4) == Weight(U64_MAX // 4 * 4)

    def test_from_vb_overflow(self) -> None:
        """The checked conversion returns None, the unchecked one raises."""
        assert Weight.from_vb(U64_MAX // 4 + 1) is None
        with pytest.raises(IntegerOverflow):
            Weight.from_vb_unchecked(U64_MAX // 4 + 1)
        assert Weight.from_vb_unchecked(3) == Weight(12)

    def test_vbytes(self) -> None:
        """Weight converts back to virtual bytes, rounding either way."""
        weight = Weight.from_wu(381)
        assert weight.to_vbytes_floor() == 95
        assert weight.to_vbytes_ceil() == 96
        assert Weight.from_vb(7).to_vbytes_ceil() == 7

    def test_constants(self) -> None:
        """Weight boundaries."""
        assert Weight.ZERO == Weight.MIN == Weight(0)
        assert Weight.MAX.to_wu() == U64_MAX
        assert Weight.WITNESS_SCALE_FACTOR == 4

    def test_arithmetic(self) -> None:
        """Weights add and subtract in both families."""
        assert Weight(1) + Weight(2) == Weight(3)
        assert Weight(3) - Weight(2) == Weight(1)
        assert Weight.MAX.checked_add(Weight(1)) is None
        assert Weight.ZERO.checked_sub(Weight(1)) is None
        assert Weight(3).checked_sub(Weight(1)) == Weight(2)
        with pytest.raises(IntegerOverflow):
            Weight.ZERO - Weight(1)

    def test_str(self) -> None:
        """Weights print with their unit."""
        assert str(Weight(381)) == "381 wu"

    def test_arbitrary(self, rng: random.Random) -> None:
        """Arbitrary weights are valid u64 counts."""
        assert 0 <= Weight.arbitrary(rng).to_wu() <= U64_MAX


@pytest.mark.unit
class TestAmount:
    """Test cases for the Amount class."""

    def test_from_sat(self) -> None:
        """Satoshis are stored as given."""
        assert Amount.from_sat(330).to_sat() == 330

    def test_rejects_out_of_range(self) -> None:
        """Amounts are 64-bit unsigned."""
        with pytest.raises(ValueError):
            Amount.from_sat(-1)
        with pytest.raises(ValueError):
            Amount.from_sat(U64_MAX + 1)

    def test_btc(self) -> None:
        """Amounts render in bitcoin with eight decimals."""
        assert Amount.from_sat(330).to_btc() == Decimal("0.00000330")
        assert str(Amount.from_sat(330)) == "0.00000330 BTC"
        assert str(Amount.from_sat(COIN)) == "1.00000000 BTC"

    def test_arithmetic(self) -> None:
        """Amounts add and subtract in both families."""
        assert Amount.ONE_SAT + Amount.ONE_SAT == Amount(2)
        assert Amount(2) - Amount.ONE_SAT == Amount.ONE_SAT
        assert Amount.MAX.checked_add(Amount.ONE_SAT) is None
        assert Amount.ZERO.checked_sub(Amount.ONE_SAT) is None
        with pytest.raises(IntegerOverflow):
            Amount.MAX + Amount.ONE_SAT

    def test_div_by_weight_truncates(self) -> None:
        """329 sat over 381 wu is 863.5 sat/kwu, truncated to 863."""
        assert Amount.from_sat(329) / Weight.from_wu(381) == FeeRate(863)

    def test_div_by_zero_weight(self) -> None:
        """Dividing by a zero weight raises."""
        with pytest.raises(ZeroDivisionError):
            Amount.from_sat(1) / Weight.ZERO

    def test_div_by_weight_overflow(self) -> None:
        """The amount in thousandths of satoshi must fit in 64 bits."""
        with pytest.raises(IntegerOverflow):
            Amount.MAX / Weight(1)

    def test_div_by_non_weight_is_rejected(self) -> None:
        """Only weights divide amounts into fee rates."""
        with pytest.raises(TypeError):
            Amount.from_sat(1) / 2  # type: ignore[operator]

    def test_checked_div_by_weight_rounds_up(self) -> None:
        """The checked division never understates the fee rate."""
        assert Amount.from_sat(329).checked_div_by_weight(
            Weight.from_wu(381)
        ) == FeeRate(864)
        assert Amount.from_sat(330).checked_div_by_weight(
            Weight.from_wu(1000)
        ) == FeeRate(330)

    def test_checked_div_by_weight_failures(self) -> None:
        """Zero weight and overflow return None."""
        assert Amount.from_sat(1).checked_div_by_weight(Weight.ZERO) is None
        assert Amount.MAX.checked_div_by_weight(Weight(1)) is None

    def test_fee_round_trip_covers_fee(self, rng: random.Random) -> None:
        """The rate derived from a fee pays at least that fee again."""
        for _ in range(200):
            fee = Amount.from_sat(rng.randrange(1, 10**8))
            weight = Weight.from_wu(rng.randrange(1, 4 * 10**6))
            fee_rate = fee.checked_div_by_weight(weight)
            assert fee_rate * weight >= fee

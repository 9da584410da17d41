"""Unit tests for the transparent JSON serialization."""

import json

import pytest

from datatypes.amount import Amount
from datatypes.fee_rate import FeeRate
from datatypes.serialization import dumps, load_amount, load_fee_rate, load_weight
from datatypes.weight import Weight
from utils.bitcoin import U64_MAX


@pytest.mark.unit
class TestSerialization:
    """Test cases for serializing unit types as bare integers."""

    def test_fee_rate_is_a_bare_integer(self) -> None:
        """No envelope and no field names."""
        assert dumps(FeeRate(253)) == "253"
        assert FeeRate(253).to_serializable() == 253

    def test_nested_values(self) -> None:
        """Unit types nested in containers serialize too."""
        document = dumps(
            {"rate": FeeRate.DUST, "fee": Amount(9), "weight": Weight(12)}
        )
        assert json.loads(document) == {"rate": 750, "fee": 9, "weight": 12}

    def test_round_trip_boundaries(self) -> None:
        """Serialization keeps the exact raw value."""
        for fee_rate in (FeeRate.ZERO, FeeRate.DUST, FeeRate.MAX):
            assert load_fee_rate(dumps(fee_rate)) == fee_rate
        assert load_amount(dumps(Amount.MAX)) == Amount.MAX
        assert load_weight(dumps(Weight.MAX)) == Weight.MAX

    @pytest.mark.parametrize("document", ["true", "2.5", '"3"', "null", "[]"])
    def test_rejects_non_integers(self, document: str) -> None:
        """Only JSON integers deserialize into a fee rate."""
        with pytest.raises(TypeError):
            load_fee_rate(document)

    @pytest.mark.parametrize("document", ["-1", str(U64_MAX + 1)])
    def test_rejects_out_of_range(self, document: str) -> None:
        """Integers outside the u64 range are rejected."""
        with pytest.raises(ValueError):
            load_fee_rate(document)

    def test_unknown_types_still_fail(self) -> None:
        """The encoder only knows the unit types."""
        with pytest.raises(TypeError):
            dumps(object())

"""Transparent JSON serialization of the unit types.

Amounts, weights and fee rates are written as a bare integer, with no envelope
and no field names, so `FeeRate.from_sat_per_kwu(253)` serializes as `253`.

Includes the following:
    - UnitsJSONEncoder (class): a JSONEncoder aware of the unit types.
    - dumps (function): json.dumps with UnitsJSONEncoder.
    - load_fee_rate, load_amount, load_weight (functions): parse a JSON
        document holding a single integer.
"""

import json
from typing import Any

from datatypes.amount import Amount
from datatypes.fee_rate import FeeRate
from datatypes.weight import Weight

#: the types serialized as a transparent integer
UNIT_TYPES: tuple[type, ...] = (Amount, FeeRate, Weight)


class UnitsJSONEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, UNIT_TYPES):
            return o.to_serializable()
        return super().default(o)


def dumps(obj: Any, **kwargs: Any) -> str:
    return json.dumps(obj, cls=UnitsJSONEncoder, **kwargs)


def load_fee_rate(document: str) -> FeeRate:
    """Deserialize a fee rate from its JSON integer.

    Raises:
        json.JSONDecodeError: if the document is not valid JSON.
        TypeError: if the document is not an integer.
        ValueError: if the integer doesn't fit in 64 bits unsigned.
    """
    return FeeRate.from_serializable(json.loads(document))


def load_amount(document: str) -> Amount:
    return Amount.from_serializable(json.loads(document))


def load_weight(document: str) -> Weight:
    return Weight.from_serializable(json.loads(document))

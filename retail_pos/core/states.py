"""
GST State Codes

Canonical two-digit state codes used on GST invoices. Supplier and buyer
states are resolved to a StateCode once, when the jurisdiction is built,
so inter-state checks compare enum members instead of free text.
"""

from enum import Enum
from typing import Any, Dict, Optional

from retail_pos.core.exceptions import InvalidStateError


class StateCode(str, Enum):
    """GST state and union territory codes"""
    JAMMU_AND_KASHMIR = "01"
    HIMACHAL_PRADESH = "02"
    PUNJAB = "03"
    CHANDIGARH = "04"
    UTTARAKHAND = "05"
    HARYANA = "06"
    DELHI = "07"
    RAJASTHAN = "08"
    UTTAR_PRADESH = "09"
    BIHAR = "10"
    SIKKIM = "11"
    ARUNACHAL_PRADESH = "12"
    NAGALAND = "13"
    MANIPUR = "14"
    MIZORAM = "15"
    TRIPURA = "16"
    MEGHALAYA = "17"
    ASSAM = "18"
    WEST_BENGAL = "19"
    JHARKHAND = "20"
    ODISHA = "21"
    CHHATTISGARH = "22"
    MADHYA_PRADESH = "23"
    GUJARAT = "24"
    DADRA_NAGAR_HAVELI_DAMAN_DIU = "26"
    MAHARASHTRA = "27"
    KARNATAKA = "29"
    GOA = "30"
    LAKSHADWEEP = "31"
    KERALA = "32"
    TAMIL_NADU = "33"
    PUDUCHERRY = "34"
    ANDAMAN_AND_NICOBAR_ISLANDS = "35"
    TELANGANA = "36"
    ANDHRA_PRADESH = "37"
    LADAKH = "38"
    OTHER_TERRITORY = "97"

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


_ALIASES = {
    "orissa": StateCode.ODISHA,
    "pondicherry": StateCode.PUDUCHERRY,
    "new delhi": StateCode.DELHI,
    "nct of delhi": StateCode.DELHI,
    "jammu & kashmir": StateCode.JAMMU_AND_KASHMIR,
    "andaman & nicobar islands": StateCode.ANDAMAN_AND_NICOBAR_ISLANDS,
    "dadra and nagar haveli and daman and diu": StateCode.DADRA_NAGAR_HAVELI_DAMAN_DIU,
    "uttaranchal": StateCode.UTTARAKHAND,
}


def _normalize_name(value: str) -> str:
    return " ".join(value.replace("_", " ").lower().split())


STATE_NAME_INDEX: Dict[str, StateCode] = {
    _normalize_name(state.name): state for state in StateCode
}
STATE_NAME_INDEX.update(_ALIASES)


def resolve_state_code(value: Any) -> Optional[StateCode]:
    """
    Resolve a state given as code or name to its StateCode.

    Accepts a StateCode, a numeric code ("27", "7", 27) or a state name in
    any casing ("Maharashtra", "tamil nadu").

    Args:
        value: State code or name

    Returns:
        StateCode, or None when value is empty

    Raises:
        InvalidStateError: value does not match any state
    """
    if value is None:
        return None
    if isinstance(value, StateCode):
        return value
    if isinstance(value, bool):
        raise InvalidStateError(value)

    text = str(value).strip()
    if not text:
        return None

    if text.isdigit():
        try:
            return StateCode(text.zfill(2))
        except ValueError:
            raise InvalidStateError(value)

    state = STATE_NAME_INDEX.get(_normalize_name(text))
    if state is None:
        raise InvalidStateError(value)
    return state

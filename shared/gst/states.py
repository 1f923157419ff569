from typing import NamedTuple, Optional


class IndianState(NamedTuple):
    name: str
    code: str


# GST state codes
INDIAN_STATES: list[IndianState] = [
    IndianState("Andaman and Nicobar Islands", "35"),
    IndianState("Andhra Pradesh", "37"),
    IndianState("Arunachal Pradesh", "12"),
    IndianState("Assam", "18"),
    IndianState("Bihar", "10"),
    IndianState("Chandigarh", "04"),
    IndianState("Chhattisgarh", "22"),
    IndianState("Dadra and Nagar Haveli and Daman and Diu", "26"),
    IndianState("Delhi", "07"),
    IndianState("Goa", "30"),
    IndianState("Gujarat", "24"),
    IndianState("Haryana", "06"),
    IndianState("Himachal Pradesh", "02"),
    IndianState("Jammu and Kashmir", "01"),
    IndianState("Jharkhand", "20"),
    IndianState("Karnataka", "29"),
    IndianState("Kerala", "32"),
    IndianState("Ladakh", "38"),
    IndianState("Lakshadweep", "31"),
    IndianState("Madhya Pradesh", "23"),
    IndianState("Maharashtra", "27"),
    IndianState("Manipur", "14"),
    IndianState("Meghalaya", "17"),
    IndianState("Mizoram", "15"),
    IndianState("Nagaland", "13"),
    IndianState("Odisha", "21"),
    IndianState("Puducherry", "34"),
    IndianState("Punjab", "03"),
    IndianState("Rajasthan", "08"),
    IndianState("Sikkim", "11"),
    IndianState("Tamil Nadu", "33"),
    IndianState("Telangana", "36"),
    IndianState("Tripura", "16"),
    IndianState("Uttar Pradesh", "09"),
    IndianState("Uttarakhand", "05"),
    IndianState("West Bengal", "19"),
]

_BY_CODE = {s.code: s for s in INDIAN_STATES}
_BY_NAME = {s.name.lower(): s for s in INDIAN_STATES}


def get_state_by_code(code: str) -> Optional[IndianState]:
    return _BY_CODE.get(code)


def get_state_by_name(name: str) -> Optional[IndianState]:
    return _BY_NAME.get((name or "").lower())

from .states import INDIAN_STATES, IndianState, get_state_by_code, get_state_by_name
from .tax import GstSplit, calculate_gst, split_inclusive_amount, validate_gstin

__all__ = [
    "INDIAN_STATES",
    "IndianState",
    "get_state_by_code",
    "get_state_by_name",
    "GstSplit",
    "calculate_gst",
    "split_inclusive_amount",
    "validate_gstin",
]

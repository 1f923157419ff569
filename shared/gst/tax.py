import re
from typing import NamedTuple

from shared.errors import ValidationFailed

from .states import get_state_by_code

# 2 digit state code + 10 char PAN + entity number + 'Z' + check character
GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")

DEFAULT_GST_RATE = 18.0


class GstSplit(NamedTuple):
    cgst: float
    sgst: float
    igst: float

    @property
    def total(self) -> float:
        return round(self.cgst + self.sgst + self.igst, 2)

    @property
    def is_intra_state(self) -> bool:
        return self.cgst > 0


def validate_gstin(gstin: str) -> str:
    """Return the state code embedded in a GSTIN, or raise ValidationFailed."""
    if not gstin:
        raise ValidationFailed("GSTIN is required")
    normalized = gstin.strip().upper()
    if not GSTIN_PATTERN.match(normalized):
        raise ValidationFailed("Invalid GSTIN format. Expected format: 22AAAAA0000A1Z5")
    state_code = normalized[:2]
    if get_state_by_code(state_code) is None:
        raise ValidationFailed("Invalid state code in GSTIN")
    return state_code


def calculate_gst(
    taxable_amount: float,
    buyer_state_code: str,
    seller_state_code: str,
    gst_rate: float = DEFAULT_GST_RATE,
) -> GstSplit:
    """Intra-state supply splits the rate into CGST + SGST, inter-state is IGST."""
    if buyer_state_code == seller_state_code:
        half = round(taxable_amount * (gst_rate / 2) / 100, 2)
        return GstSplit(cgst=half, sgst=half, igst=0.0)
    return GstSplit(cgst=0.0, sgst=0.0, igst=round(taxable_amount * gst_rate / 100, 2))


def split_inclusive_amount(
    gross_amount: float,
    buyer_state_code: str,
    seller_state_code: str,
    gst_rate: float = DEFAULT_GST_RATE,
) -> tuple[float, GstSplit]:
    """
    Split a GST-inclusive amount into its taxable value and tax components.
    The components always add back up to the gross amount.
    """
    taxable = round(gross_amount / (1 + gst_rate / 100), 2)
    tax = round(gross_amount - taxable, 2)
    if buyer_state_code == seller_state_code:
        cgst = round(tax / 2, 2)
        return taxable, GstSplit(cgst=cgst, sgst=round(tax - cgst, 2), igst=0.0)
    return taxable, GstSplit(cgst=0.0, sgst=0.0, igst=tax)

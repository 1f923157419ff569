import pytest

from services.invoice_service.pdf import format_inr, hsn_for, rows_that_fit, truncate_name
from services.order_service.pricing import price_order, shipping_for
from shared.errors import ValidationFailed
from shared.gst import calculate_gst, get_state_by_code, split_inclusive_amount, validate_gstin


def test_valid_gstin_yields_its_state_code():
    assert validate_gstin("27aapfu0939f1zv") == "27"


@pytest.mark.parametrize(
    "gstin, message",
    [
        ("", "GSTIN is required"),
        ("27AAPFU0939F1Z", "Invalid GSTIN format"),
        ("27AAPFU0939F0ZV", "Invalid GSTIN format"),
        ("99AAPFU0939F1ZV", "Invalid state code in GSTIN"),
    ],
)
def test_invalid_gstins(gstin, message):
    with pytest.raises(ValidationFailed, match=message):
        validate_gstin(gstin)


def test_state_lookup():
    assert get_state_by_code("24").name == "Gujarat"
    assert get_state_by_code("00") is None


def test_intra_state_tax_splits_evenly():
    gst = calculate_gst(1000.0, "24", "24")

    assert (gst.cgst, gst.sgst, gst.igst) == (90.0, 90.0, 0.0)
    assert gst.is_intra_state


def test_inter_state_tax_is_igst():
    gst = calculate_gst(1000.0, "27", "24")

    assert (gst.cgst, gst.sgst, gst.igst) == (0.0, 0.0, 180.0)


def test_inclusive_split_adds_back_to_gross():
    taxable, gst = split_inclusive_amount(1179.99, "24", "24")

    assert taxable == round(1179.99 / 1.18, 2)
    assert round(taxable + gst.total, 2) == 1179.99


def test_shipping_is_waived_at_threshold():
    assert shipping_for(1000.0, flat_rate=150, free_threshold=2500) == 150
    assert shipping_for(2500.0, flat_rate=150, free_threshold=2500) == 0


def test_order_pricing_keeps_tax_inside_subtotal():
    pricing = price_order([1180.0], "27", "24", flat_rate=150, free_threshold=2500)

    assert pricing.subtotal == 1180.0
    assert pricing.taxable_amount == 1000.0
    assert pricing.gst.igst == 180.0
    assert pricing.shipping_cost == 150
    assert pricing.total_amount == 1330.0


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "Rs. 0.00"),
        (999.5, "Rs. 999.50"),
        (1000, "Rs. 1,000.00"),
        (123456, "Rs. 1,23,456.00"),
        (12345678.9, "Rs. 1,23,45,678.90"),
    ],
)
def test_indian_currency_grouping(amount, expected):
    assert format_inr(amount) == expected


def test_item_names_truncate_by_invoice_kind():
    name = "Hand-thrown speckled stoneware serving bowl with lid"

    assert truncate_name(name, gst_invoice=True) == name[:35] + "..."
    assert truncate_name(name, gst_invoice=False) == name[:45] + "..."
    assert truncate_name("Mug", gst_invoice=True) == "Mug"


def test_hsn_codes():
    assert hsn_for("product") == "6912"
    assert hsn_for("workshop") == "9983"


def test_item_rows_stop_before_summary_area():
    assert rows_that_fit(3) == 3
    assert rows_that_fit(100) == 17

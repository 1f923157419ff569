"""
Checkout arithmetic for product orders.

Catalog prices include GST. The tax is carved out of the subtotal, split
CGST + SGST for intra-state supply and IGST otherwise. Shipping is added on
top and carries no tax.
"""
from dataclasses import dataclass

from shared.config.settings import FREE_SHIPPING_THRESHOLD, GST_RATE, SHIPPING_FLAT_RATE
from shared.gst import GstSplit, split_inclusive_amount


@dataclass
class OrderPricing:
    subtotal: float
    shipping_cost: float
    taxable_amount: float
    gst: GstSplit
    total_amount: float


def shipping_for(
    subtotal: float,
    flat_rate: float = SHIPPING_FLAT_RATE,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
) -> float:
    """Flat rate, waived once the subtotal reaches the threshold."""
    if subtotal <= 0 or subtotal >= free_threshold:
        return 0.0
    return flat_rate


def price_order(
    line_totals: list[float],
    buyer_state_code: str,
    seller_state_code: str,
    gst_rate: float = GST_RATE,
    flat_rate: float = SHIPPING_FLAT_RATE,
    free_threshold: float = FREE_SHIPPING_THRESHOLD,
) -> OrderPricing:
    subtotal = round(sum(line_totals), 2)
    taxable, gst = split_inclusive_amount(subtotal, buyer_state_code, seller_state_code, gst_rate)
    shipping = shipping_for(subtotal, flat_rate, free_threshold)
    return OrderPricing(
        subtotal=subtotal,
        shipping_cost=shipping,
        taxable_amount=taxable,
        gst=gst,
        total_amount=round(subtotal + shipping, 2),
    )

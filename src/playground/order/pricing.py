"""Flat order pricing.

Tax is charged on the merchandise total only. Shipping is a flat fee that is
waived when the merchandise total is strictly above the threshold, so an
order of exactly 50,000 still pays it.
"""

from decimal import ROUND_HALF_UP, Decimal

TAX_RATE = Decimal("0.18")
SHIPPING_FEE = Decimal("2000")
FREE_SHIPPING_THRESHOLD = Decimal("50000")

_CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def price_order(lines) -> dict:
    """Return ``total_amount``, ``tax_amount``, ``shipping_amount`` and ``grand_total``.

    ``lines`` is an iterable of ``(unit_price, quantity)`` pairs.
    """
    total = sum((_money(price) * quantity for price, quantity in lines), Decimal("0"))
    total = _money(total)
    tax = _money(total * TAX_RATE)
    shipping = Decimal("0.00") if total > FREE_SHIPPING_THRESHOLD else _money(SHIPPING_FEE)
    grand_total = total + tax + shipping

    return {
        "total_amount": float(total),
        "tax_amount": float(tax),
        "shipping_amount": float(shipping),
        "grand_total": float(grand_total),
    }

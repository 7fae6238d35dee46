"""Money arithmetic for invoices and quotes.

Everything here is pure: callers load catalog, stylist and settings rows
and pass plain values in. Amounts are ``Decimal`` rounded half-up to
cents at each stored step (line totals, discount, tax, commission).
"""
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..models import DiscountTypeEnum
from .errors import ValidationError

ZERO = Decimal("0.00")
LOYALTY_POINTS_PER_UNIT = Decimal("10")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def money(value) -> Decimal:
    return to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity, discount=None) -> Decimal:
    price = to_decimal(unit_price)
    qty = to_decimal(quantity)
    if price < 0:
        raise ValidationError("Unit price cannot be negative.")
    if qty <= 0:
        raise ValidationError("Quantity must be greater than zero.")
    gross = money(price * qty)
    line_discount = money(discount)
    if line_discount < 0:
        raise ValidationError("Line discount cannot be negative.")
    if line_discount > gross:
        raise ValidationError("Line discount cannot exceed the line amount.")
    return gross - line_discount


def discount_amount(subtotal, discount_type, discount_value) -> Decimal:
    """Invoice-level discount, clamped so it never exceeds the subtotal."""
    subtotal = money(subtotal)
    value = to_decimal(discount_value)
    if not discount_type:
        return ZERO
    if value < 0:
        raise ValidationError("Discount value cannot be negative.")

    try:
        kind = DiscountTypeEnum(discount_type)
    except ValueError:
        raise ValidationError(f"Unknown discount type: {discount_type}.") from None
    if kind is DiscountTypeEnum.PERCENTAGE:
        amount = money(subtotal * value / Decimal("100"))
    elif kind is DiscountTypeEnum.FIXED:
        amount = money(value)
    else:
        amount = money(value / LOYALTY_POINTS_PER_UNIT)

    return min(max(amount, ZERO), max(subtotal, ZERO))


@dataclass(frozen=True)
class DocumentTotals:
    services_subtotal: Decimal
    products_subtotal: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal


def compute_totals(
    service_line_totals: Iterable[Decimal],
    product_line_totals: Iterable[Decimal],
    discount_type=None,
    discount_value=None,
    tax_rate=None,
) -> DocumentTotals:
    services_subtotal = money(sum(service_line_totals, ZERO))
    products_subtotal = money(sum(product_line_totals, ZERO))
    subtotal = services_subtotal + products_subtotal

    discount = discount_amount(subtotal, discount_type, discount_value)
    taxable = subtotal - discount
    rate = to_decimal(tax_rate)
    tax = money(taxable * rate)

    return DocumentTotals(
        services_subtotal=services_subtotal,
        products_subtotal=products_subtotal,
        subtotal=subtotal,
        discount_amount=discount,
        taxable_amount=taxable,
        tax_rate=rate,
        tax_amount=tax,
        total=taxable + tax,
    )


def resolve_commission_rate(
    *, line_rate=None, catalog_rate=None, stylist_rate=None, default_rate
) -> Decimal:
    """Line override, then catalog item, then stylist, then system default.

    A stylist rate of zero counts as unset.
    """
    if line_rate is not None:
        return to_decimal(line_rate)
    if catalog_rate is not None:
        return to_decimal(catalog_rate)
    if stylist_rate:
        return to_decimal(stylist_rate)
    return to_decimal(default_rate)


def commission_amount(total, rate) -> Decimal:
    return money(to_decimal(total) * to_decimal(rate))


def derive_payment_status(amount_paid, total) -> str:
    paid = money(amount_paid)
    if paid > 0 and paid >= money(total):
        return "paid"
    if paid > 0:
        return "partial"
    return "unpaid"

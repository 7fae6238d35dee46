"""Prices invoice and quote payloads against the catalog and settings.

Line items come out as plain keyword dicts ready for the invoice or quote
line models, so both documents share one snapshot and totals path.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from ..models import DiscountTypeEnum, InvoiceSettings, Stylist
from ..schemas import DocumentIn, ProductLineIn, ServiceLineIn
from . import catalog
from .errors import ValidationError
from .settings import effective_tax_rate, get_discount_preset
from .totals import (
    ZERO,
    DocumentTotals,
    commission_amount,
    compute_totals,
    line_total,
    money,
    resolve_commission_rate,
    to_decimal,
)

SERVICE_PRODUCT = "service_product"
RETAIL = "retail"


@dataclass
class PricedDocument:
    totals: DocumentTotals
    discount_type: str | None
    discount_value: Decimal
    discount_reason: str | None
    service_lines: list[dict] = field(default_factory=list)
    product_lines: list[dict] = field(default_factory=list)

    @property
    def services_commission(self) -> Decimal:
        return money(sum((line.get("commission_amount", ZERO) for line in self.service_lines), ZERO))

    @property
    def products_commission(self) -> Decimal:
        return money(sum((line.get("commission_amount", ZERO) for line in self.product_lines), ZERO))

    @property
    def commission_total(self) -> Decimal:
        return self.services_commission + self.products_commission

    def header_fields(self) -> dict:
        return {
            "services_subtotal": self.totals.services_subtotal,
            "products_subtotal": self.totals.products_subtotal,
            "subtotal": self.totals.subtotal,
            "discount_type": self.discount_type,
            "discount_value": self.discount_value,
            "discount_amount": self.totals.discount_amount,
            "discount_reason": self.discount_reason,
            "tax_rate": self.totals.tax_rate,
            "tax_amount": self.totals.tax_amount,
            "total": self.totals.total,
        }


def party_fields(payload: DocumentIn) -> dict:
    return {
        "customer_type": payload.customer_type,
        "company_name": payload.company_name,
        "business_address": payload.business_address,
        "vat_number": payload.vat_number,
        "company_reg": payload.company_reg,
        "client_notes": payload.client_notes,
        "internal_notes": payload.internal_notes,
    }


def price_document(
    db: Session,
    payload: DocumentIn,
    settings_row: InvoiceSettings,
    *,
    stylist: Stylist | None = None,
    with_commission: bool = False,
    enforce_discount_policy: bool = True,
) -> PricedDocument:
    service_lines = [
        _price_service_line(db, position, line, settings_row, stylist, with_commission)
        for position, line in enumerate(payload.services, start=1)
    ]
    product_lines = [
        _price_product_line(db, position, line, settings_row, with_commission)
        for position, line in enumerate(payload.products, start=1)
    ]

    discount_type, discount_value, discount_reason = _resolve_discount(db, payload)
    if (
        enforce_discount_policy
        and discount_type == DiscountTypeEnum.PERCENTAGE.value
        and discount_value > to_decimal(settings_row.max_discount_percentage)
    ):
        raise ValidationError(
            f"Discount cannot exceed {settings_row.max_discount_percentage}%."
        )

    totals = compute_totals(
        (line["total"] for line in service_lines),
        (line["total"] for line in product_lines),
        discount_type,
        discount_value,
        effective_tax_rate(settings_row),
    )
    if (
        enforce_discount_policy
        and totals.discount_amount > 0
        and settings_row.require_discount_reason
        and not discount_reason
    ):
        raise ValidationError("A discount reason is required.")

    return PricedDocument(
        totals=totals,
        discount_type=discount_type,
        discount_value=discount_value,
        discount_reason=discount_reason,
        service_lines=service_lines,
        product_lines=product_lines,
    )


def _resolve_discount(db: Session, payload: DocumentIn) -> tuple[str | None, Decimal, str | None]:
    if payload.discount_preset_id is not None:
        preset = get_discount_preset(db, payload.discount_preset_id)
        if not preset.is_active:
            raise ValidationError("Discount preset is not active.")
        return (
            preset.discount_type,
            money(preset.discount_value),
            payload.discount_reason or preset.name,
        )
    if payload.discount_type is None:
        return None, ZERO, payload.discount_reason
    return (
        DiscountTypeEnum(payload.discount_type).value,
        money(payload.discount_value),
        payload.discount_reason,
    )


def _price_service_line(
    db: Session,
    position: int,
    line: ServiceLineIn,
    settings_row: InvoiceSettings,
    stylist: Stylist | None,
    with_commission: bool,
) -> dict:
    name = line.name
    unit_price = line.unit_price
    category = line.category
    description = line.description
    duration = line.duration_minutes
    catalog_rate = None

    if line.service_id is not None:
        service = catalog.get_service(db, line.service_id)
        name = name or service.name
        unit_price = unit_price if unit_price is not None else service.price
        category = category or service.category
        description = description or service.description
        duration = duration if duration is not None else service.duration_minutes
        catalog_rate = service.commission_rate

    if not name or unit_price is None:
        raise ValidationError(
            f"Service line {position} needs a catalog service or a name and unit price."
        )

    total = line_total(unit_price, line.quantity, line.discount)
    priced = {
        "service_id": line.service_id,
        "name": name,
        "description": description,
        "category": category,
        "unit_price": money(unit_price),
        "quantity": to_decimal(line.quantity),
        "discount": money(line.discount),
        "total": total,
        "duration_minutes": duration,
        "notes": line.notes,
    }
    if with_commission:
        rate = resolve_commission_rate(
            line_rate=line.commission_rate,
            catalog_rate=catalog_rate,
            stylist_rate=stylist.commission_rate if stylist else None,
            default_rate=settings_row.default_service_commission_rate,
        )
        priced["commission_rate"] = rate
        priced["commission_amount"] = commission_amount(total, rate)
    return priced


def _price_product_line(
    db: Session,
    position: int,
    line: ProductLineIn,
    settings_row: InvoiceSettings,
    with_commission: bool,
) -> dict:
    name = line.name
    unit_price = line.unit_price
    category = line.category
    product_type = line.product_type
    catalog_rate = None

    if line.product_id is not None:
        product = catalog.get_product(db, line.product_id)
        name = name or product.name
        unit_price = unit_price if unit_price is not None else product.price
        category = category or product.category
        if product_type is None:
            product_type = SERVICE_PRODUCT if product.is_service_product else RETAIL
        catalog_rate = product.commission_rate

    if not name or unit_price is None:
        raise ValidationError(
            f"Product line {position} needs a catalog product or a name and unit price."
        )
    product_type = product_type or RETAIL

    total = line_total(unit_price, line.quantity, line.discount)
    priced = {
        "product_id": line.product_id,
        "name": name,
        "category": category,
        "product_type": product_type,
        "unit_price": money(unit_price),
        "quantity": to_decimal(line.quantity),
        "discount": money(line.discount),
        "total": total,
        "notes": line.notes,
    }
    if with_commission:
        if product_type == SERVICE_PRODUCT:
            default_rate = settings_row.default_service_product_commission_rate
        else:
            default_rate = settings_row.default_product_commission_rate
        # Stylist defaults only apply to service lines.
        rate = resolve_commission_rate(
            line_rate=line.commission_rate,
            catalog_rate=catalog_rate,
            default_rate=default_rate,
        )
        priced["commission_rate"] = rate
        priced["commission_amount"] = commission_amount(total, rate)
    return priced

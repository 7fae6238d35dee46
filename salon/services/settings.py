import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import SETTINGS_ROW_ID, DiscountPreset, InvoiceSettings, PaymentMethod
from ..schemas import (
    DiscountPresetCreate,
    DiscountPresetUpdate,
    InvoiceSettingsUpdate,
    PaymentMethodUpdate,
)
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def get_invoice_settings(db: Session) -> InvoiceSettings:
    row = db.get(InvoiceSettings, SETTINGS_ROW_ID)
    if row is None:
        row = InvoiceSettings(id=SETTINGS_ROW_ID)
        db.add(row)
        db.flush()
    return row


def update_invoice_settings(db: Session, payload: InvoiceSettingsUpdate) -> InvoiceSettings:
    row = get_invoice_settings(db)
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None and key != "updated_by":
            continue
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    logger.info("Invoice settings updated: %s", ", ".join(sorted(changes)) or "none")
    return row


def effective_tax_rate(row: InvoiceSettings):
    return row.tax_rate if row.tax_enabled else 0


def list_payment_methods(db: Session) -> list[PaymentMethod]:
    return list(
        db.scalars(
            select(PaymentMethod).order_by(PaymentMethod.display_order, PaymentMethod.code)
        )
    )


def get_payment_method(db: Session, method_id: int) -> PaymentMethod:
    method = db.get(PaymentMethod, method_id)
    if method is None:
        raise NotFoundError("Payment method not found")
    return method


def get_active_payment_method(db: Session, code: str) -> PaymentMethod:
    method = db.execute(
        select(PaymentMethod).where(PaymentMethod.code == code)
    ).scalar_one_or_none()
    if method is None:
        raise ValidationError(f"Unknown payment method: {code}.")
    if not method.is_active:
        raise ValidationError(f"Payment method {code} is disabled.")
    return method


def update_payment_method(
    db: Session, method_id: int, payload: PaymentMethodUpdate
) -> PaymentMethod:
    method = get_payment_method(db, method_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "description":
            continue
        setattr(method, key, value)
    db.commit()
    db.refresh(method)
    return method


def list_discount_presets(db: Session, include_inactive: bool = False) -> list[DiscountPreset]:
    query = select(DiscountPreset)
    if not include_inactive:
        query = query.where(DiscountPreset.is_active.is_(True))
    return list(db.scalars(query.order_by(DiscountPreset.display_order, DiscountPreset.id)))


def get_discount_preset(db: Session, preset_id: int) -> DiscountPreset:
    preset = db.get(DiscountPreset, preset_id)
    if preset is None:
        raise NotFoundError("Discount preset not found")
    return preset


def create_discount_preset(db: Session, payload: DiscountPresetCreate) -> DiscountPreset:
    preset = DiscountPreset(**payload.model_dump(), is_active=True)
    db.add(preset)
    db.commit()
    db.refresh(preset)
    return preset


def update_discount_preset(
    db: Session, preset_id: int, payload: DiscountPresetUpdate
) -> DiscountPreset:
    preset = get_discount_preset(db, preset_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key != "description":
            continue
        setattr(preset, key, value)
    db.commit()
    db.refresh(preset)
    return preset


def delete_discount_preset(db: Session, preset_id: int) -> None:
    preset = get_discount_preset(db, preset_id)
    db.delete(preset)
    db.commit()

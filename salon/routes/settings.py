from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    DiscountPresetCreate,
    DiscountPresetEnvelope,
    DiscountPresetListEnvelope,
    DiscountPresetUpdate,
    InvoiceSettingsEnvelope,
    InvoiceSettingsUpdate,
    PaymentMethodEnvelope,
    PaymentMethodListEnvelope,
    PaymentMethodUpdate,
)
from ..services import settings as settings_service

router = APIRouter()


@router.get("/invoice-settings", response_model=InvoiceSettingsEnvelope)
def get_invoice_settings(db: Session = Depends(get_db)) -> dict:
    return {"settings": settings_service.get_invoice_settings(db)}


@router.put("/invoice-settings", response_model=InvoiceSettingsEnvelope)
def update_invoice_settings(
    payload: InvoiceSettingsUpdate, db: Session = Depends(get_db)
) -> dict:
    return {"settings": settings_service.update_invoice_settings(db, payload)}


@router.get("/payment-methods", response_model=PaymentMethodListEnvelope)
def list_payment_methods(db: Session = Depends(get_db)) -> dict:
    return {"payment_methods": settings_service.list_payment_methods(db)}


@router.put("/payment-methods/{method_id}", response_model=PaymentMethodEnvelope)
def update_payment_method(
    method_id: int, payload: PaymentMethodUpdate, db: Session = Depends(get_db)
) -> dict:
    return {"payment_method": settings_service.update_payment_method(db, method_id, payload)}


@router.get("/discount-presets", response_model=DiscountPresetListEnvelope)
def list_discount_presets(
    include_inactive: bool = False, db: Session = Depends(get_db)
) -> dict:
    presets = settings_service.list_discount_presets(db, include_inactive=include_inactive)
    return {"discount_presets": presets}


@router.post("/discount-presets", response_model=DiscountPresetEnvelope, status_code=201)
def create_discount_preset(
    payload: DiscountPresetCreate, db: Session = Depends(get_db)
) -> dict:
    return {"discount_preset": settings_service.create_discount_preset(db, payload)}


@router.put("/discount-presets/{preset_id}", response_model=DiscountPresetEnvelope)
def update_discount_preset(
    preset_id: int, payload: DiscountPresetUpdate, db: Session = Depends(get_db)
) -> dict:
    return {
        "discount_preset": settings_service.update_discount_preset(db, preset_id, payload)
    }


@router.delete("/discount-presets/{preset_id}")
def delete_discount_preset(preset_id: int, db: Session = Depends(get_db)) -> dict:
    settings_service.delete_discount_preset(db, preset_id)
    return {"success": True, "message": "Discount preset deleted"}

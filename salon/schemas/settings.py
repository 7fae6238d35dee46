from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

FeeType = Literal["none", "percentage", "fixed"]
PresetType = Literal["percentage", "fixed"]


class InvoiceSettingsRead(BaseModel):
    tax_enabled: bool
    tax_rate: Decimal
    tax_name: str
    default_service_commission_rate: Decimal
    default_product_commission_rate: Decimal
    default_service_product_commission_rate: Decimal
    invoice_number_prefix: str
    quote_number_prefix: str
    number_format: str
    allow_partial_payments: bool
    payment_due_days: int
    max_discount_percentage: Decimal
    require_discount_reason: bool
    deduct_stock_on_finalize: bool
    allow_negative_stock: bool
    auto_approve_commission_on_payment: bool
    updated_by: str | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class InvoiceSettingsUpdate(BaseModel):
    tax_enabled: bool | None = None
    tax_rate: Decimal | None = Field(default=None, ge=0, le=1)
    tax_name: str | None = None
    default_service_commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    default_product_commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    default_service_product_commission_rate: Decimal | None = Field(
        default=None, ge=0, le=1
    )
    invoice_number_prefix: str | None = Field(default=None, min_length=1)
    quote_number_prefix: str | None = Field(default=None, min_length=1)
    # Numbers restart every year, so the year must be part of the number.
    number_format: str | None = Field(
        default=None, pattern=r"\{YEAR\}.*\{NUMBER\}|\{NUMBER\}.*\{YEAR\}"
    )
    allow_partial_payments: bool | None = None
    payment_due_days: int | None = Field(default=None, ge=0)
    max_discount_percentage: Decimal | None = Field(default=None, ge=0, le=100)
    require_discount_reason: bool | None = None
    deduct_stock_on_finalize: bool | None = None
    allow_negative_stock: bool | None = None
    auto_approve_commission_on_payment: bool | None = None
    updated_by: str | None = None


class InvoiceSettingsEnvelope(BaseModel):
    success: bool = True
    settings: InvoiceSettingsRead


class PaymentMethodRead(BaseModel):
    id: int
    code: str
    name: str
    description: str | None
    transaction_fee_type: str
    transaction_fee_value: Decimal
    display_order: int
    is_active: bool

    model_config = {"from_attributes": True}


class PaymentMethodUpdate(BaseModel):
    is_active: bool | None = None
    transaction_fee_type: FeeType | None = None
    transaction_fee_value: Decimal | None = Field(default=None, ge=0)
    description: str | None = None


class PaymentMethodEnvelope(BaseModel):
    success: bool = True
    payment_method: PaymentMethodRead


class PaymentMethodListEnvelope(BaseModel):
    success: bool = True
    payment_methods: list[PaymentMethodRead]


class DiscountPresetCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    discount_type: PresetType
    discount_value: Decimal = Field(ge=0)
    requires_approval: bool = False
    display_order: int = 0


class DiscountPresetUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    discount_type: PresetType | None = None
    discount_value: Decimal | None = Field(default=None, ge=0)
    requires_approval: bool | None = None
    display_order: int | None = None
    is_active: bool | None = None


class DiscountPresetRead(BaseModel):
    id: int
    name: str
    description: str | None
    discount_type: str
    discount_value: Decimal
    requires_approval: bool
    display_order: int
    is_active: bool

    model_config = {"from_attributes": True}


class DiscountPresetEnvelope(BaseModel):
    success: bool = True
    discount_preset: DiscountPresetRead


class DiscountPresetListEnvelope(BaseModel):
    success: bool = True
    discount_presets: list[DiscountPresetRead]

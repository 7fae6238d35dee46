from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from ..models import DiscountTypeEnum

ProductType = Literal["retail", "service_product"]
CustomerType = Literal["individual", "business"]


class ServiceLineIn(BaseModel):
    service_id: int | None = None
    name: str | None = None
    description: str | None = None
    category: str | None = None
    unit_price: Decimal | None = Field(default=None, ge=0)
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    duration_minutes: int | None = Field(default=None, ge=0)
    notes: str | None = None


class ProductLineIn(BaseModel):
    product_id: int | None = None
    name: str | None = None
    category: str | None = None
    product_type: ProductType | None = None
    unit_price: Decimal | None = Field(default=None, ge=0)
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    notes: str | None = None


class DocumentIn(BaseModel):
    services: list[ServiceLineIn] = Field(default_factory=list)
    products: list[ProductLineIn] = Field(default_factory=list)
    discount_type: DiscountTypeEnum | None = None
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    discount_reason: str | None = None
    discount_preset_id: int | None = None
    customer_type: CustomerType = "individual"
    company_name: str | None = None
    business_address: str | None = None
    vat_number: str | None = None
    company_reg: str | None = None
    client_notes: str | None = None
    internal_notes: str | None = None
    created_by: str | None = None


class ServiceLineRead(BaseModel):
    id: int
    service_id: int | None
    name: str
    description: str | None
    category: str | None
    unit_price: Decimal
    quantity: Decimal
    discount: Decimal
    total: Decimal
    duration_minutes: int | None
    notes: str | None
    commission_rate: Decimal | None = None
    commission_amount: Decimal | None = None

    model_config = {"from_attributes": True}


class ProductLineRead(BaseModel):
    id: int
    product_id: int | None
    name: str
    category: str | None
    product_type: str
    unit_price: Decimal
    quantity: Decimal
    discount: Decimal
    total: Decimal
    notes: str | None
    commission_rate: Decimal | None = None
    commission_amount: Decimal | None = None
    deducted_from_stock: bool | None = None

    model_config = {"from_attributes": True}


class DocumentTotalsRead(BaseModel):
    services_subtotal: Decimal
    products_subtotal: Decimal
    subtotal: Decimal
    discount_type: str | None
    discount_value: Decimal
    discount_amount: Decimal
    discount_reason: str | None
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    customer_type: str
    company_name: str | None
    business_address: str | None
    vat_number: str | None
    company_reg: str | None
    client_notes: str | None
    internal_notes: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime

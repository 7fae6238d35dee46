from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None


class CustomerRead(BaseModel):
    id: int
    name: str
    email: str | None
    phone: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class StylistCreate(BaseModel):
    name: str = Field(min_length=1)
    specialty: str | None = None
    commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    is_active: bool = True


class StylistRead(BaseModel):
    id: int
    name: str
    specialty: str | None
    commission_rate: Decimal | None
    is_active: bool

    model_config = {"from_attributes": True}


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    price: Decimal = Field(ge=0)
    duration_minutes: int | None = Field(default=None, ge=0)
    commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    is_active: bool = True


class ServiceRead(BaseModel):
    id: int
    name: str
    description: str | None
    category: str | None
    price: Decimal
    duration_minutes: int | None
    commission_rate: Decimal | None
    is_active: bool

    model_config = {"from_attributes": True}


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str | None = None
    price: Decimal = Field(ge=0)
    stock: int = 0
    commission_rate: Decimal | None = Field(default=None, ge=0, le=1)
    is_service_product: bool = False
    is_active: bool = True


class ProductRead(BaseModel):
    id: int
    name: str
    category: str | None
    price: Decimal
    stock: int
    commission_rate: Decimal | None
    is_service_product: bool
    is_active: bool

    model_config = {"from_attributes": True}


class PartyRef(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}

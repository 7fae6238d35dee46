from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from .catalog import PartyRef
from .documents import DocumentIn, DocumentTotalsRead, ProductLineRead, ServiceLineRead


class InvoiceCreate(DocumentIn):
    customer_id: int
    stylist_id: int
    booking_id: int | None = None
    service_date: date


class InvoiceUpdate(InvoiceCreate):
    pass


class PaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    payment_method: str = Field(min_length=1)
    payment_reference: str | None = None
    notes: str | None = None
    processed_by: str | None = None


class PaymentRead(BaseModel):
    id: int
    invoice_id: int
    amount: Decimal
    payment_method: str
    payment_reference: str | None
    notes: str | None
    processed_by: str | None
    paid_at: datetime

    model_config = {"from_attributes": True}


class CommissionRecordRead(BaseModel):
    id: int
    invoice_id: int
    stylist_id: int
    services_commission: Decimal
    products_commission: Decimal
    total_commission: Decimal
    payment_status: str
    approved_at: datetime | None
    payment_date: datetime | None
    payment_reference: str | None

    model_config = {"from_attributes": True}


class InvoiceVoidCreate(BaseModel):
    reason: str = Field(min_length=1)
    note: str | None = None
    voided_by: str = "admin"


class PaymentStatusUpdate(BaseModel):
    payment_status: Literal["refunded", "written_off"]


class InvoiceSummaryRead(DocumentTotalsRead):
    id: int
    invoice_number: str | None
    status: str
    payment_status: str
    amount_paid: Decimal
    amount_due: Decimal
    commission_total: Decimal
    commission_paid: bool
    service_date: date
    invoice_date: date | None
    due_date: date | None
    finalized_at: datetime | None
    sent_at: datetime | None
    booking_id: int | None
    customer: PartyRef
    stylist: PartyRef

    model_config = {"from_attributes": True}


class InvoiceRead(InvoiceSummaryRead):
    services: list[ServiceLineRead]
    products: list[ProductLineRead]
    payments: list[PaymentRead]
    commission: CommissionRecordRead | None


class InvoiceEnvelope(BaseModel):
    success: bool = True
    invoice: InvoiceRead


class InvoiceListEnvelope(BaseModel):
    success: bool = True
    invoices: list[InvoiceSummaryRead]


class PaymentListEnvelope(BaseModel):
    success: bool = True
    payments: list[PaymentRead]

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from .invoice import CommissionRecordRead


class CommissionRow(BaseModel):
    invoice_id: int
    invoice_number: str | None
    service_date: date
    invoice_total: Decimal
    invoice_payment_status: str
    customer_name: str | None
    stylist_id: int
    services_commission: Decimal
    products_commission: Decimal
    total_commission: Decimal
    payment_status: str
    payment_date: datetime | None
    payment_reference: str | None


class CommissionSummary(BaseModel):
    total_invoices: int
    total_sales: Decimal
    services_commission: Decimal
    products_commission: Decimal
    total_commission: Decimal
    paid_commission: Decimal
    pending_commission: Decimal


class StylistCommissionSummary(CommissionSummary):
    stylist_id: int
    stylist_name: str


class CommissionReportEnvelope(BaseModel):
    success: bool = True
    summary: CommissionSummary
    commissions: list[CommissionRow]


class CommissionSummaryEnvelope(BaseModel):
    success: bool = True
    summaries: list[StylistCommissionSummary]


class MarkCommissionsPaid(BaseModel):
    invoice_ids: list[int] = Field(min_length=1)
    payment_reference: str | None = None
    payment_date: datetime | None = None


class SkippedCommission(BaseModel):
    invoice_id: int
    reason: str


class MarkCommissionsPaidEnvelope(BaseModel):
    success: bool = True
    count: int
    payment_reference: str
    skipped: list[SkippedCommission]


class CommissionRecordEnvelope(BaseModel):
    success: bool = True
    commission: CommissionRecordRead

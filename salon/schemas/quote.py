from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from .documents import DocumentIn, DocumentTotalsRead, ProductLineRead, ServiceLineRead
from .invoice import InvoiceRead


class QuoteCreate(DocumentIn):
    customer_id: int | None = None
    stylist_id: int | None = None
    valid_until: date | None = None


class QuoteUpdate(QuoteCreate):
    pass


class QuoteConvert(BaseModel):
    service_date: date | None = None


class QuoteSummaryRead(DocumentTotalsRead):
    id: int
    quote_number: str | None
    status: str
    is_expired: bool = False
    quote_date: date
    valid_until: date
    sent_at: datetime | None
    accepted_at: datetime | None
    declined_at: datetime | None
    converted_invoice_id: int | None
    customer_id: int | None
    stylist_id: int | None

    model_config = {"from_attributes": True}


class QuoteRead(QuoteSummaryRead):
    services: list[ServiceLineRead]
    products: list[ProductLineRead]


class QuoteStats(BaseModel):
    total: int
    draft: int
    sent: int
    accepted: int
    declined: int
    expired: int
    converted: int
    total_value: Decimal
    converted_value: Decimal


class QuoteEnvelope(BaseModel):
    success: bool = True
    quote: QuoteRead


class QuoteListEnvelope(BaseModel):
    success: bool = True
    quotes: list[QuoteSummaryRead]


class QuoteStatsEnvelope(BaseModel):
    success: bool = True
    stats: QuoteStats


class QuoteConvertEnvelope(BaseModel):
    success: bool = True
    quote: QuoteRead
    invoice: InvoiceRead

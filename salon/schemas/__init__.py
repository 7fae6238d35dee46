from .catalog import (
    CustomerCreate,
    CustomerRead,
    PartyRef,
    ProductCreate,
    ProductRead,
    ServiceCreate,
    ServiceRead,
    StylistCreate,
    StylistRead,
)
from .commission import (
    CommissionRecordEnvelope,
    CommissionReportEnvelope,
    CommissionRow,
    CommissionSummary,
    CommissionSummaryEnvelope,
    MarkCommissionsPaid,
    MarkCommissionsPaidEnvelope,
    SkippedCommission,
    StylistCommissionSummary,
)
from .documents import DocumentIn, ProductLineIn, ServiceLineIn
from .invoice import (
    CommissionRecordRead,
    InvoiceCreate,
    InvoiceEnvelope,
    InvoiceListEnvelope,
    InvoiceRead,
    InvoiceSummaryRead,
    InvoiceUpdate,
    InvoiceVoidCreate,
    PaymentCreate,
    PaymentListEnvelope,
    PaymentRead,
    PaymentStatusUpdate,
)
from .quote import (
    QuoteConvert,
    QuoteConvertEnvelope,
    QuoteCreate,
    QuoteEnvelope,
    QuoteListEnvelope,
    QuoteRead,
    QuoteStats,
    QuoteStatsEnvelope,
    QuoteSummaryRead,
    QuoteUpdate,
)
from .settings import (
    DiscountPresetCreate,
    DiscountPresetEnvelope,
    DiscountPresetListEnvelope,
    DiscountPresetRead,
    DiscountPresetUpdate,
    InvoiceSettingsEnvelope,
    InvoiceSettingsRead,
    InvoiceSettingsUpdate,
    PaymentMethodEnvelope,
    PaymentMethodListEnvelope,
    PaymentMethodRead,
    PaymentMethodUpdate,
)

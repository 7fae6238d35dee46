from .base import Base
from .booking import Booking
from .catalog import Product, Service
from .customer import Customer
from .document_sequence import DocumentSequence
from .invoice import DiscountTypeEnum, Invoice, InvoiceStatusEnum, PaymentStatusEnum
from .invoice_commission import CommissionStatusEnum, InvoiceCommission
from .invoice_line import InvoiceProductLine, InvoiceServiceLine
from .invoice_payment import InvoicePayment
from .invoice_void import InvoiceVoid
from .lookups import DiscountPreset, PaymentMethod
from .quote import Quote, QuoteProductLine, QuoteServiceLine, QuoteStatusEnum
from .settings import SETTINGS_ROW_ID, InvoiceSettings
from .stylist import Stylist

__all__ = [
    "Base",
    "Booking",
    "CommissionStatusEnum",
    "Customer",
    "DiscountPreset",
    "DiscountTypeEnum",
    "DocumentSequence",
    "Invoice",
    "InvoiceCommission",
    "InvoicePayment",
    "InvoiceProductLine",
    "InvoiceServiceLine",
    "InvoiceSettings",
    "InvoiceStatusEnum",
    "InvoiceVoid",
    "PaymentMethod",
    "PaymentStatusEnum",
    "Product",
    "Quote",
    "QuoteProductLine",
    "QuoteServiceLine",
    "QuoteStatusEnum",
    "SETTINGS_ROW_ID",
    "Service",
    "Stylist",
]

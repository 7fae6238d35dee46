from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .line_item import ProductLineMixin, ServiceLineMixin


class QuoteStatusEnum(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    CONVERTED = "converted"


class Quote(Base):
    __tablename__ = "quotes"
    __table_args__ = (
        Index("ix_quotes_status", "status"),
        Index("ix_quotes_customer_id", "customer_id"),
        Index("ix_quotes_stylist_id", "stylist_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quote_number: Mapped[str | None] = mapped_column(String(50), unique=True)
    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"))
    stylist_id: Mapped[int | None] = mapped_column(ForeignKey("stylists.id"))

    services_subtotal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    products_subtotal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount_type: Mapped[str | None] = mapped_column(String(30))
    discount_value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    discount_reason: Mapped[str | None] = mapped_column(String(255))
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0"), nullable=False
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Stored status never holds "expired"; expiry is derived when read.
    status: Mapped[str] = mapped_column(
        String(30), default=QuoteStatusEnum.DRAFT.value, nullable=False
    )
    quote_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    valid_until: Mapped[date] = mapped_column(Date, nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime)
    declined_at: Mapped[datetime | None] = mapped_column(DateTime)
    converted_invoice_id: Mapped[int | None] = mapped_column(ForeignKey("invoices.id"))

    customer_type: Mapped[str] = mapped_column(
        String(30), default="individual", nullable=False
    )
    company_name: Mapped[str | None] = mapped_column(String(255))
    business_address: Mapped[str | None] = mapped_column(String(255))
    vat_number: Mapped[str | None] = mapped_column(String(50))
    company_reg: Mapped[str | None] = mapped_column(String(50))

    client_notes: Mapped[str | None] = mapped_column(Text)
    internal_notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[str | None] = mapped_column(String(150))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    services: Mapped[list["QuoteServiceLine"]] = relationship(
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteServiceLine.id",
    )
    products: Mapped[list["QuoteProductLine"]] = relationship(
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteProductLine.id",
    )


class QuoteServiceLine(ServiceLineMixin, Base):
    __tablename__ = "quote_services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quote_id: Mapped[int] = mapped_column(
        ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    service_id: Mapped[int | None] = mapped_column(
        ForeignKey("services.id", ondelete="SET NULL")
    )

    quote: Mapped["Quote"] = relationship(back_populates="services")


class QuoteProductLine(ProductLineMixin, Base):
    __tablename__ = "quote_products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quote_id: Mapped[int] = mapped_column(
        ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int | None] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL")
    )

    quote: Mapped["Quote"] = relationship(back_populates="products")

from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow

SETTINGS_ROW_ID = 1


class InvoiceSettings(Base):
    __tablename__ = "invoice_settings"
    __table_args__ = (
        sa.CheckConstraint("id = 1", name="ck_invoice_settings_singleton"),
        sa.CheckConstraint(
            "tax_rate >= 0 AND tax_rate <= 1", name="ck_invoice_settings_tax_rate"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ROW_ID)

    tax_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0.15"), nullable=False
    )
    tax_name: Mapped[str] = mapped_column(String(20), default="VAT", nullable=False)

    default_service_commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0.30"), nullable=False
    )
    default_product_commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0.10"), nullable=False
    )
    default_service_product_commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4), default=Decimal("0.05"), nullable=False
    )

    invoice_number_prefix: Mapped[str] = mapped_column(
        String(20), default="INV", nullable=False
    )
    quote_number_prefix: Mapped[str] = mapped_column(
        String(20), default="QTE", nullable=False
    )
    number_format: Mapped[str] = mapped_column(
        String(50), default="{PREFIX}-{YEAR}-{NUMBER}", nullable=False
    )

    allow_partial_payments: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    payment_due_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    max_discount_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("100"), nullable=False
    )
    require_discount_reason: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    deduct_stock_on_finalize: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    allow_negative_stock: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    auto_approve_commission_on_payment: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    updated_by: Mapped[str | None] = mapped_column(String(150))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

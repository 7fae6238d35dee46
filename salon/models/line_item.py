from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import utcnow


class LineItemMixin:
    """Columns shared by invoice and quote line items.

    Lines are snapshots of the catalog at the time they were written, so
    later catalog price or name changes never alter a stored document.
    """

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(12, 3), default=Decimal("1"), nullable=False
    )
    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0.00"), nullable=False
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class ServiceLineMixin(LineItemMixin):
    description: Mapped[str | None] = mapped_column(Text)
    duration_minutes: Mapped[int | None] = mapped_column()


class ProductLineMixin(LineItemMixin):
    product_type: Mapped[str] = mapped_column(
        String(30), default="retail", nullable=False
    )

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_invoice_id", "invoice_id"),
        Index("ix_bookings_invoiced", "invoiced"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    stylist_id: Mapped[int | None] = mapped_column(ForeignKey("stylists.id"))
    service_id: Mapped[int | None] = mapped_column(ForeignKey("services.id"))
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(30), default="confirmed", nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(30), default="unpaid", nullable=False
    )
    payment_date: Mapped[datetime | None] = mapped_column(DateTime)
    invoice_id: Mapped[int | None] = mapped_column(
        ForeignKey("invoices.id", use_alter=True, name="fk_bookings_invoice_id")
    )
    invoiced: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

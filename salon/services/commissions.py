import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import (
    CommissionStatusEnum,
    Customer,
    Invoice,
    InvoiceCommission,
    InvoiceStatusEnum,
    PaymentStatusEnum,
)
from ..models.base import utcnow
from . import catalog
from .errors import InvalidTransitionError, NotFoundError, ValidationError
from .invoices import get_invoice
from .totals import ZERO, money

logger = logging.getLogger(__name__)

PENDING = CommissionStatusEnum.PENDING.value
APPROVED = CommissionStatusEnum.APPROVED.value
PAID = CommissionStatusEnum.PAID.value
CANCELLED = CommissionStatusEnum.CANCELLED.value

REPORTABLE_INVOICE_STATUSES = (
    InvoiceStatusEnum.FINALIZED.value,
    InvoiceStatusEnum.SENT.value,
)
PAYMENT_FILTERS = {
    "paid": (PAID,),
    "unpaid": (PENDING, APPROVED),
}


def commission_report(
    db: Session,
    stylist_id: int,
    start_date: date,
    end_date: date,
    payment_status: str | None = None,
) -> tuple[dict, list[dict]]:
    """Commission rows and totals for one stylist over a service-date range."""
    if end_date < start_date:
        raise ValidationError("End date cannot be before start date.")
    catalog.get_stylist(db, stylist_id)

    query = (
        select(InvoiceCommission, Invoice, Customer.name)
        .join(Invoice, InvoiceCommission.invoice_id == Invoice.id)
        .outerjoin(Customer, Invoice.customer_id == Customer.id)
        .where(
            InvoiceCommission.stylist_id == stylist_id,
            Invoice.service_date >= start_date,
            Invoice.service_date <= end_date,
            Invoice.status.in_(REPORTABLE_INVOICE_STATUSES),
        )
        .order_by(Invoice.service_date.desc(), Invoice.id.desc())
    )
    if payment_status:
        statuses = PAYMENT_FILTERS.get(payment_status)
        if statuses is None:
            raise ValidationError(f"Unknown commission payment filter: {payment_status}.")
        query = query.where(InvoiceCommission.payment_status.in_(statuses))

    rows = []
    for commission, invoice, customer_name in db.execute(query).all():
        rows.append(
            {
                "invoice_id": invoice.id,
                "invoice_number": invoice.invoice_number,
                "service_date": invoice.service_date,
                "invoice_total": money(invoice.total),
                "invoice_payment_status": invoice.payment_status,
                "customer_name": customer_name,
                "stylist_id": commission.stylist_id,
                "services_commission": money(commission.services_commission),
                "products_commission": money(commission.products_commission),
                "total_commission": money(commission.total_commission),
                "payment_status": commission.payment_status,
                "payment_date": commission.payment_date,
                "payment_reference": commission.payment_reference,
            }
        )
    return _summarize(rows), rows


def commission_summary(db: Session, start_date: date, end_date: date) -> list[dict]:
    summaries = []
    for stylist in catalog.list_stylists(db, active_only=True):
        summary, _ = commission_report(db, stylist.id, start_date, end_date)
        summaries.append(
            {"stylist_id": stylist.id, "stylist_name": stylist.name, **summary}
        )
    return summaries


def approve_commission(db: Session, invoice_id: int) -> InvoiceCommission:
    invoice = get_invoice(db, invoice_id)
    commission = invoice.commission
    if commission is None:
        raise NotFoundError("No commission recorded for this invoice")
    if commission.payment_status != PENDING:
        raise InvalidTransitionError(
            f"Cannot approve a {commission.payment_status} commission."
        )
    if invoice.payment_status != PaymentStatusEnum.PAID.value:
        raise InvalidTransitionError("Commission can only be approved once the invoice is paid.")
    commission.payment_status = APPROVED
    commission.approved_at = utcnow()
    db.commit()
    logger.info("Commission for invoice %s approved", invoice.invoice_number)
    return commission


def mark_commissions_paid(
    db: Session,
    invoice_ids: list[int],
    payment_reference: str | None = None,
    payment_date: datetime | None = None,
) -> tuple[int, str, list[dict]]:
    """Pay out commissions for fully paid invoices; everything else is skipped."""
    now = utcnow()
    reference = payment_reference or f"PAYROLL-{now:%Y%m%d%H%M%S}"
    paid_on = _naive_utc(payment_date) if payment_date else now

    wanted = list(dict.fromkeys(invoice_ids))
    by_invoice = {
        commission.invoice_id: commission
        for commission in db.scalars(
            select(InvoiceCommission).where(InvoiceCommission.invoice_id.in_(wanted))
        )
    }

    count = 0
    skipped = []
    for invoice_id in wanted:
        commission = by_invoice.get(invoice_id)
        reason = _skip_reason(commission)
        if reason:
            skipped.append({"invoice_id": invoice_id, "reason": reason})
            continue
        commission.payment_status = PAID
        commission.payment_date = paid_on
        commission.payment_reference = reference
        if commission.approved_at is None:
            commission.approved_at = paid_on
        commission.invoice.commission_paid = True
        commission.invoice.commission_paid_date = paid_on
        count += 1

    db.commit()
    logger.info(
        "Marked %s commission(s) paid under %s; %s skipped", count, reference, len(skipped)
    )
    return count, reference, skipped


def _skip_reason(commission: InvoiceCommission | None) -> str | None:
    if commission is None:
        return "No commission recorded"
    if commission.payment_status == PAID:
        return "Commission already paid"
    if commission.payment_status == CANCELLED:
        return "Commission cancelled"
    if commission.invoice.status not in REPORTABLE_INVOICE_STATUSES:
        return f"Invoice is {commission.invoice.status}"
    if commission.invoice.payment_status != PaymentStatusEnum.PAID.value:
        return "Invoice not fully paid"
    return None


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _summarize(rows: list[dict]) -> dict:
    counted = [row for row in rows if row["payment_status"] != CANCELLED]
    paid = [row for row in counted if row["payment_status"] == PAID]
    pending = [row for row in counted if row["payment_status"] != PAID]
    return {
        "total_invoices": len(rows),
        "total_sales": money(sum((row["invoice_total"] for row in rows), ZERO)),
        "services_commission": money(
            sum((row["services_commission"] for row in counted), ZERO)
        ),
        "products_commission": money(
            sum((row["products_commission"] for row in counted), ZERO)
        ),
        "total_commission": money(sum((row["total_commission"] for row in counted), ZERO)),
        "paid_commission": money(sum((row["total_commission"] for row in paid), ZERO)),
        "pending_commission": money(sum((row["total_commission"] for row in pending), ZERO)),
    }

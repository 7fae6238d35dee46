import csv
import io
import logging
from datetime import date, timedelta
from decimal import ROUND_CEILING

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..models import (
    Booking,
    CommissionStatusEnum,
    Customer,
    Invoice,
    InvoiceCommission,
    InvoicePayment,
    InvoiceProductLine,
    InvoiceServiceLine,
    InvoiceSettings,
    InvoiceStatusEnum,
    InvoiceVoid,
    PaymentStatusEnum,
    Product,
    Quote,
    QuoteStatusEnum,
    Stylist,
)
from ..models.base import utcnow
from ..schemas import InvoiceCreate, InvoiceUpdate, InvoiceVoidCreate, PaymentCreate
from . import catalog
from .errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from .numbering import INVOICE_KIND, allocate_document_number
from .pricing import RETAIL, PricedDocument, party_fields, price_document
from .settings import get_active_payment_method, get_invoice_settings
from .totals import ZERO, derive_payment_status, money

logger = logging.getLogger(__name__)

DRAFT = InvoiceStatusEnum.DRAFT.value
FINALIZED = InvoiceStatusEnum.FINALIZED.value
SENT = InvoiceStatusEnum.SENT.value
CANCELLED = InvoiceStatusEnum.CANCELLED.value
VOID = InvoiceStatusEnum.VOID.value

PAYABLE_STATUSES = {FINALIZED, SENT}
TERMINAL_PAYMENT_STATUSES = {
    PaymentStatusEnum.REFUNDED.value,
    PaymentStatusEnum.WRITTEN_OFF.value,
}
MANUAL_PAYMENT_TRANSITIONS = {
    PaymentStatusEnum.REFUNDED.value: {
        PaymentStatusEnum.PARTIAL.value,
        PaymentStatusEnum.PAID.value,
    },
    PaymentStatusEnum.WRITTEN_OFF.value: {
        PaymentStatusEnum.UNPAID.value,
        PaymentStatusEnum.PARTIAL.value,
    },
}

CSV_COLUMNS = [
    "invoice_number",
    "status",
    "payment_status",
    "service_date",
    "customer",
    "stylist",
    "subtotal",
    "discount_amount",
    "tax_amount",
    "total",
    "amount_paid",
    "amount_due",
    "commission_total",
]


def get_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = db.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice


def list_invoices(
    db: Session,
    *,
    status: str | None = None,
    payment_status: str | None = None,
    stylist_id: int | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    limit: int | None = 50,
    offset: int = 0,
) -> list[Invoice]:
    query = select(Invoice).join(Customer, Invoice.customer_id == Customer.id)
    if status:
        query = query.where(Invoice.status == status)
    if payment_status:
        query = query.where(Invoice.payment_status == payment_status)
    if stylist_id:
        query = query.where(Invoice.stylist_id == stylist_id)
    if customer_id:
        query = query.where(Invoice.customer_id == customer_id)
    if start_date:
        query = query.where(Invoice.service_date >= start_date)
    if end_date:
        query = query.where(Invoice.service_date <= end_date)
    if search:
        like = f"%{search}%"
        query = query.where(
            or_(
                Invoice.invoice_number.ilike(like),
                Customer.name.ilike(like),
                Customer.email.ilike(like),
            )
        )
    query = query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return list(db.scalars(query))


def export_invoices_csv(db: Session, **filters) -> str:
    invoices = list_invoices(db, limit=None, **filters)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for invoice in invoices:
        writer.writerow(
            [
                invoice.invoice_number or "",
                invoice.status,
                invoice.payment_status,
                invoice.service_date.isoformat(),
                invoice.customer.name,
                invoice.stylist.name,
                money(invoice.subtotal),
                money(invoice.discount_amount),
                money(invoice.tax_amount),
                money(invoice.total),
                money(invoice.amount_paid),
                money(invoice.amount_due),
                money(invoice.commission_total),
            ]
        )
    return buffer.getvalue()


def build_invoice(
    db: Session, payload: InvoiceCreate, *, enforce_discount_policy: bool = True
) -> Invoice:
    """Price and stage a draft invoice without committing.

    Conversions from an accepted quote pass ``enforce_discount_policy=False``
    so the discount agreed on the quote survives later settings changes.
    """
    settings_row = get_invoice_settings(db)
    stylist = _load_parties(db, payload)
    priced = price_document(
        db,
        payload,
        settings_row,
        stylist=stylist,
        with_commission=True,
        enforce_discount_policy=enforce_discount_policy,
    )
    invoice = Invoice(
        customer_id=payload.customer_id,
        stylist_id=payload.stylist_id,
        booking_id=payload.booking_id,
        service_date=payload.service_date,
        status=DRAFT,
        created_by=payload.created_by,
    )
    _apply_document(invoice, priced, payload)
    db.add(invoice)
    db.flush()
    return invoice


def create_invoice(db: Session, payload: InvoiceCreate) -> Invoice:
    invoice = build_invoice(db, payload)
    db.commit()
    logger.info("Draft invoice %s created (total %s)", invoice.id, invoice.total)
    return invoice


def update_invoice(db: Session, invoice_id: int, payload: InvoiceUpdate) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    _require_status(invoice, {DRAFT}, "Only draft invoices can be edited.")
    settings_row = get_invoice_settings(db)
    stylist = _load_parties(db, payload)
    priced = price_document(
        db, payload, settings_row, stylist=stylist, with_commission=True
    )
    invoice.customer_id = payload.customer_id
    invoice.stylist_id = payload.stylist_id
    invoice.booking_id = payload.booking_id
    invoice.service_date = payload.service_date
    _apply_document(invoice, priced, payload)
    db.commit()
    return invoice


def delete_invoice(db: Session, invoice_id: int) -> None:
    invoice = get_invoice(db, invoice_id)
    _require_status(invoice, {DRAFT}, "Only draft invoices can be deleted.")
    # A quote converted into this draft goes back to accepted.
    for quote in db.scalars(select(Quote).where(Quote.converted_invoice_id == invoice.id)):
        quote.converted_invoice_id = None
        quote.status = QuoteStatusEnum.ACCEPTED.value
    db.flush()
    db.delete(invoice)
    db.commit()
    logger.info("Draft invoice %s deleted", invoice_id)


def finalize_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    _require_status(invoice, {DRAFT}, "Only draft invoices can be finalized.")
    settings_row = get_invoice_settings(db)

    for attempt in range(1, settings.finalize_attempts + 1):
        number = allocate_document_number(
            db,
            INVOICE_KIND,
            settings_row.invoice_number_prefix,
            settings_row.number_format,
        )
        # Allocated numbers are never handed out twice, even if this finalize fails.
        db.commit()
        try:
            _finalize(db, invoice_id, number, settings_row)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Invoice number %s already in use (attempt %s of %s)",
                number,
                attempt,
                settings.finalize_attempts,
            )
            continue
        logger.info("Invoice %s finalized as %s", invoice_id, number)
        return get_invoice(db, invoice_id)

    raise ConflictError("Could not allocate a unique invoice number.")


def send_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    _require_status(invoice, {FINALIZED}, "Only finalized invoices can be sent.")
    invoice.status = SENT
    invoice.sent_at = utcnow()
    db.commit()
    logger.info("Invoice %s marked as sent", invoice.invoice_number)
    return invoice


def cancel_invoice(db: Session, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    _require_status(invoice, {DRAFT}, "Only draft invoices can be cancelled.")
    invoice.status = CANCELLED
    db.commit()
    logger.info("Draft invoice %s cancelled", invoice_id)
    return invoice


def void_invoice(db: Session, invoice_id: int, payload: InvoiceVoidCreate) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    _require_status(
        invoice, {FINALIZED, SENT}, "Only finalized or sent invoices can be voided."
    )
    invoice.status = VOID
    db.add(
        InvoiceVoid(
            invoice_id=invoice.id,
            reason=payload.reason,
            note=payload.note,
            voided_at=utcnow(),
            voided_by=payload.voided_by,
        )
    )
    commission = invoice.commission
    if commission and commission.payment_status != CommissionStatusEnum.PAID.value:
        commission.payment_status = CommissionStatusEnum.CANCELLED.value
    if invoice.booking_id is not None:
        booking = db.get(Booking, invoice.booking_id)
        if booking is not None and booking.invoice_id == invoice.id:
            booking.invoice_id = None
            booking.invoiced = False
    db.commit()
    logger.info("Invoice %s voided: %s", invoice.invoice_number, payload.reason)
    return invoice


def record_payment(db: Session, invoice_id: int, payload: PaymentCreate) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    if invoice.status not in PAYABLE_STATUSES:
        raise InvalidTransitionError(
            f"Cannot record a payment on a {invoice.status} invoice."
        )
    if invoice.payment_status in TERMINAL_PAYMENT_STATUSES:
        raise InvalidTransitionError(
            f"Cannot record a payment on a {invoice.payment_status} invoice."
        )

    settings_row = get_invoice_settings(db)
    get_active_payment_method(db, payload.payment_method)

    amount = money(payload.amount)
    due = money(invoice.amount_due)
    if amount > due:
        raise ValidationError(f"Payment of {amount} exceeds the amount due ({due}).")
    if not settings_row.allow_partial_payments and amount != due:
        raise ValidationError("Partial payments are disabled; pay the full amount due.")

    previous_status = invoice.payment_status
    invoice.payments.append(
        InvoicePayment(
            amount=amount,
            payment_method=payload.payment_method,
            payment_reference=payload.payment_reference,
            notes=payload.notes,
            processed_by=payload.processed_by,
            paid_at=utcnow(),
        )
    )
    _refresh_payment_totals(invoice)

    if (
        invoice.payment_status == PaymentStatusEnum.PAID.value
        and previous_status != PaymentStatusEnum.PAID.value
    ):
        _on_invoice_paid(db, invoice, settings_row)

    db.commit()
    logger.info(
        "Payment of %s (%s) recorded on invoice %s; status %s",
        amount,
        payload.payment_method,
        invoice.invoice_number,
        invoice.payment_status,
    )
    return invoice


def set_payment_status(db: Session, invoice_id: int, payment_status: str) -> Invoice:
    invoice = get_invoice(db, invoice_id)
    if invoice.status in {DRAFT, CANCELLED}:
        raise InvalidTransitionError(
            f"Cannot change the payment status of a {invoice.status} invoice."
        )
    allowed_from = MANUAL_PAYMENT_TRANSITIONS.get(payment_status)
    if allowed_from is None:
        raise ValidationError(f"Payment status {payment_status} cannot be set manually.")
    if invoice.payment_status not in allowed_from:
        raise InvalidTransitionError(
            f"Cannot mark a {invoice.payment_status} invoice as {payment_status}."
        )

    invoice.payment_status = payment_status
    commission = invoice.commission
    if commission and commission.payment_status in {
        CommissionStatusEnum.PENDING.value,
        CommissionStatusEnum.APPROVED.value,
    }:
        commission.payment_status = CommissionStatusEnum.CANCELLED.value
    db.commit()
    logger.info("Invoice %s payment status set to %s", invoice.invoice_number, payment_status)
    return invoice


def list_payments(db: Session, invoice_id: int) -> list[InvoicePayment]:
    return list(get_invoice(db, invoice_id).payments)


def _require_status(invoice: Invoice, allowed: set[str], message: str) -> None:
    if invoice.status not in allowed:
        raise InvalidTransitionError(message)


def _load_parties(db: Session, payload: InvoiceCreate) -> Stylist:
    catalog.get_customer(db, payload.customer_id)
    stylist = catalog.get_stylist(db, payload.stylist_id)
    if payload.booking_id is not None and db.get(Booking, payload.booking_id) is None:
        raise NotFoundError(f"Booking {payload.booking_id} not found")
    return stylist


def _apply_document(invoice: Invoice, priced: PricedDocument, payload: InvoiceCreate) -> None:
    for key, value in priced.header_fields().items():
        setattr(invoice, key, value)
    for key, value in party_fields(payload).items():
        setattr(invoice, key, value)
    invoice.commission_total = priced.commission_total
    invoice.amount_paid = ZERO
    invoice.amount_due = priced.totals.total
    invoice.payment_status = PaymentStatusEnum.UNPAID.value
    invoice.services = [InvoiceServiceLine(**line) for line in priced.service_lines]
    invoice.products = [InvoiceProductLine(**line) for line in priced.product_lines]


def _finalize(
    db: Session, invoice_id: int, number: str, settings_row: InvoiceSettings
) -> None:
    now = utcnow()
    today = now.date()
    result = db.execute(
        update(Invoice)
        .where(Invoice.id == invoice_id, Invoice.status == DRAFT)
        .values(
            status=FINALIZED,
            invoice_number=number,
            invoice_date=today,
            due_date=today + timedelta(days=settings_row.payment_due_days),
            finalized_at=now,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise InvalidTransitionError("Only draft invoices can be finalized.")

    invoice = get_invoice(db, invoice_id)
    db.refresh(invoice)

    services_commission = money(
        sum((line.commission_amount for line in invoice.services), ZERO)
    )
    products_commission = money(
        sum((line.commission_amount for line in invoice.products), ZERO)
    )
    invoice.commission = InvoiceCommission(
        stylist_id=invoice.stylist_id,
        services_commission=services_commission,
        products_commission=products_commission,
        total_commission=services_commission + products_commission,
        payment_status=CommissionStatusEnum.PENDING.value,
    )

    if invoice.booking_id is not None:
        booking = db.get(Booking, invoice.booking_id)
        if booking is not None:
            booking.invoice_id = invoice.id
            booking.invoiced = True

    if settings_row.deduct_stock_on_finalize:
        _deduct_stock(db, invoice, settings_row.allow_negative_stock)

    # Nothing can be paid against a zero total, so it is settled here.
    if money(invoice.total) == ZERO:
        invoice.amount_due = ZERO
        invoice.payment_status = PaymentStatusEnum.PAID.value
        _on_invoice_paid(db, invoice, settings_row)

    db.flush()


def _deduct_stock(db: Session, invoice: Invoice, allow_negative: bool) -> None:
    for line in invoice.products:
        if line.product_type != RETAIL or line.product_id is None:
            continue
        if line.deducted_from_stock:
            continue
        product = db.get(Product, line.product_id)
        if product is None:
            continue
        quantity = int(line.quantity.to_integral_value(rounding=ROUND_CEILING))
        if not allow_negative and product.stock < quantity:
            logger.warning(
                "Not enough stock for %s: %s < %s; not deducted",
                product.name,
                product.stock,
                quantity,
            )
            continue
        product.stock -= quantity
        line.deducted_from_stock = True


def _refresh_payment_totals(invoice: Invoice) -> None:
    paid = money(sum((payment.amount for payment in invoice.payments), ZERO))
    invoice.amount_paid = paid
    invoice.amount_due = money(invoice.total) - paid
    invoice.payment_status = derive_payment_status(paid, invoice.total)


def _on_invoice_paid(db: Session, invoice: Invoice, settings_row: InvoiceSettings) -> None:
    now = utcnow()
    commission = invoice.commission
    if (
        settings_row.auto_approve_commission_on_payment
        and commission is not None
        and commission.payment_status == CommissionStatusEnum.PENDING.value
    ):
        commission.payment_status = CommissionStatusEnum.APPROVED.value
        commission.approved_at = now
    if invoice.booking_id is not None:
        booking = db.get(Booking, invoice.booking_id)
        if booking is not None:
            booking.payment_status = PaymentStatusEnum.PAID.value
            booking.payment_date = now

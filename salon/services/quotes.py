"""Quotes: priced estimates that can be sent, accepted and converted.

Expiry is never stored. A sent quote whose ``valid_until`` has passed reads
as ``expired`` everywhere (single reads, list filters and stats) through
:func:`effective_status` and :func:`effective_status_expr`.
"""
import logging
from datetime import date, timedelta

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Customer, Quote, QuoteProductLine, QuoteServiceLine, QuoteStatusEnum
from ..models.base import utcnow
from ..schemas import (
    InvoiceCreate,
    ProductLineIn,
    QuoteConvert,
    QuoteCreate,
    QuoteUpdate,
    ServiceLineIn,
)
from . import catalog, invoices
from .errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from .numbering import QUOTE_KIND, allocate_document_number
from .pricing import PricedDocument, party_fields, price_document
from .settings import get_invoice_settings
from .totals import money

logger = logging.getLogger(__name__)

DRAFT = QuoteStatusEnum.DRAFT.value
SENT = QuoteStatusEnum.SENT.value
ACCEPTED = QuoteStatusEnum.ACCEPTED.value
DECLINED = QuoteStatusEnum.DECLINED.value
EXPIRED = QuoteStatusEnum.EXPIRED.value
CONVERTED = QuoteStatusEnum.CONVERTED.value

OPEN_STATUSES = {DRAFT, SENT}
EDITABLE_STATUSES = OPEN_STATUSES | {EXPIRED}


def effective_status(quote: Quote, today: date | None = None) -> str:
    today = today or date.today()
    if quote.status == SENT and quote.valid_until < today:
        return EXPIRED
    return quote.status


def effective_status_expr(today: date | None = None):
    today = today or date.today()
    return case(
        (and_(Quote.status == SENT, Quote.valid_until < today), EXPIRED),
        else_=Quote.status,
    )


def get_quote(db: Session, quote_id: int) -> Quote:
    quote = db.get(Quote, quote_id)
    if quote is None:
        raise NotFoundError("Quote not found")
    return quote


def list_quotes(
    db: Session,
    *,
    status: str | None = None,
    stylist_id: int | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    today: date | None = None,
) -> list[Quote]:
    query = select(Quote).outerjoin(Customer, Quote.customer_id == Customer.id)
    if status:
        query = query.where(effective_status_expr(today) == status)
    if stylist_id:
        query = query.where(Quote.stylist_id == stylist_id)
    if customer_id:
        query = query.where(Quote.customer_id == customer_id)
    if start_date:
        query = query.where(Quote.quote_date >= start_date)
    if end_date:
        query = query.where(Quote.quote_date <= end_date)
    if search:
        like = f"%{search}%"
        query = query.where(
            or_(
                Quote.quote_number.ilike(like),
                Customer.name.ilike(like),
                Customer.email.ilike(like),
            )
        )
    query = (
        query.order_by(Quote.created_at.desc(), Quote.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.scalars(query))


def create_quote(db: Session, payload: QuoteCreate) -> Quote:
    settings_row = get_invoice_settings(db)
    _check_parties(db, payload)
    priced = price_document(db, payload, settings_row)
    today = date.today()
    valid_until = payload.valid_until or today + timedelta(days=settings.quote_validity_days)
    if valid_until < today:
        raise ValidationError("Valid-until date cannot be in the past.")

    quote = Quote(
        customer_id=payload.customer_id,
        stylist_id=payload.stylist_id,
        status=DRAFT,
        quote_date=today,
        valid_until=valid_until,
        created_by=payload.created_by,
    )
    _apply_document(quote, priced, payload)
    db.add(quote)
    db.commit()
    logger.info("Quote %s created (total %s)", quote.id, quote.total)
    return quote


def update_quote(db: Session, quote_id: int, payload: QuoteUpdate) -> Quote:
    quote = get_quote(db, quote_id)
    status = effective_status(quote)
    if status not in EDITABLE_STATUSES:
        raise InvalidTransitionError(f"Cannot edit quote in status {status}.")
    if payload.valid_until is not None and payload.valid_until < date.today():
        raise ValidationError("Valid-until date cannot be in the past.")

    settings_row = get_invoice_settings(db)
    _check_parties(db, payload)
    priced = price_document(db, payload, settings_row)
    quote.customer_id = payload.customer_id
    quote.stylist_id = payload.stylist_id
    if payload.valid_until is not None:
        quote.valid_until = payload.valid_until
    _apply_document(quote, priced, payload)
    db.commit()
    return quote


def delete_quote(db: Session, quote_id: int) -> None:
    quote = get_quote(db, quote_id)
    if quote.status != DRAFT:
        raise InvalidTransitionError("Only draft quotes can be deleted.")
    db.delete(quote)
    db.commit()
    logger.info("Draft quote %s deleted", quote_id)


def send_quote(db: Session, quote_id: int) -> Quote:
    quote = get_quote(db, quote_id)
    if quote.status != DRAFT:
        raise InvalidTransitionError("Only draft quotes can be sent.")
    if quote.valid_until < date.today():
        raise ValidationError("Quote validity has already passed; update valid_until first.")

    settings_row = get_invoice_settings(db)
    for attempt in range(1, settings.finalize_attempts + 1):
        number = allocate_document_number(
            db, QUOTE_KIND, settings_row.quote_number_prefix, settings_row.number_format
        )
        db.commit()
        quote = get_quote(db, quote_id)
        if quote.status != DRAFT:
            raise InvalidTransitionError("Only draft quotes can be sent.")
        quote.quote_number = number
        quote.status = SENT
        quote.sent_at = utcnow()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Quote number %s already in use (attempt %s of %s)",
                number,
                attempt,
                settings.finalize_attempts,
            )
            continue
        logger.info("Quote %s sent", number)
        return quote

    raise ConflictError("Could not allocate a unique quote number.")


def accept_quote(db: Session, quote_id: int) -> Quote:
    quote = get_quote(db, quote_id)
    status = effective_status(quote)
    if status == EXPIRED:
        raise InvalidTransitionError("Quote has expired.")
    if status not in OPEN_STATUSES:
        raise InvalidTransitionError(f"Cannot accept quote in status {status}.")
    quote.status = ACCEPTED
    quote.accepted_at = utcnow()
    db.commit()
    logger.info("Quote %s accepted", quote.quote_number or quote.id)
    return quote


def decline_quote(db: Session, quote_id: int) -> Quote:
    quote = get_quote(db, quote_id)
    status = effective_status(quote)
    if status not in OPEN_STATUSES:
        raise InvalidTransitionError(f"Cannot decline quote in status {status}.")
    quote.status = DECLINED
    quote.declined_at = utcnow()
    db.commit()
    logger.info("Quote %s declined", quote.quote_number or quote.id)
    return quote


def convert_quote(db: Session, quote_id: int, payload: QuoteConvert):
    """Turn an accepted quote into a draft invoice in one transaction."""
    quote = get_quote(db, quote_id)
    if quote.status == CONVERTED:
        raise InvalidTransitionError("Quote has already been converted.")
    if quote.status != ACCEPTED:
        raise InvalidTransitionError("Only accepted quotes can be converted.")
    if quote.customer_id is None or quote.stylist_id is None:
        raise ValidationError(
            "A quote needs a customer and a stylist before it can be converted."
        )

    label = quote.quote_number or f"#{quote.id}"
    internal_notes = f"Converted from quote {label}"
    if quote.internal_notes:
        internal_notes = f"{internal_notes}\n\n{quote.internal_notes}"

    invoice_payload = InvoiceCreate(
        customer_id=quote.customer_id,
        stylist_id=quote.stylist_id,
        service_date=payload.service_date or date.today(),
        services=[
            ServiceLineIn(
                service_id=line.service_id,
                name=line.name,
                description=line.description,
                category=line.category,
                unit_price=line.unit_price,
                quantity=line.quantity,
                discount=line.discount,
                duration_minutes=line.duration_minutes,
                notes=line.notes,
            )
            for line in quote.services
        ],
        products=[
            ProductLineIn(
                product_id=line.product_id,
                name=line.name,
                category=line.category,
                product_type=line.product_type,
                unit_price=line.unit_price,
                quantity=line.quantity,
                discount=line.discount,
                notes=line.notes,
            )
            for line in quote.products
        ],
        discount_type=quote.discount_type,
        discount_value=quote.discount_value,
        discount_reason=quote.discount_reason,
        customer_type=quote.customer_type,
        company_name=quote.company_name,
        business_address=quote.business_address,
        vat_number=quote.vat_number,
        company_reg=quote.company_reg,
        client_notes=quote.client_notes,
        internal_notes=internal_notes,
        created_by=quote.created_by,
    )
    invoice = invoices.build_invoice(
        db, invoice_payload, enforce_discount_policy=False
    )
    quote.status = CONVERTED
    quote.converted_invoice_id = invoice.id
    db.commit()
    logger.info("Quote %s converted to draft invoice %s", label, invoice.id)
    return quote, invoice


def quote_stats(db: Session, today: date | None = None) -> dict:
    status_col = effective_status_expr(today).label("effective_status")
    counts = {
        status: count
        for status, count in db.execute(
            select(status_col, func.count(Quote.id)).group_by(status_col)
        ).all()
    }
    total_value = db.scalar(select(func.coalesce(func.sum(Quote.total), 0)))
    converted_value = db.scalar(
        select(func.coalesce(func.sum(Quote.total), 0)).where(Quote.status == CONVERTED)
    )
    stats = {status.value: counts.get(status.value, 0) for status in QuoteStatusEnum}
    stats["total"] = sum(counts.values())
    stats["total_value"] = money(total_value)
    stats["converted_value"] = money(converted_value)
    return stats


def _check_parties(db: Session, payload: QuoteCreate) -> None:
    if payload.customer_id is not None:
        catalog.get_customer(db, payload.customer_id)
    if payload.stylist_id is not None:
        catalog.get_stylist(db, payload.stylist_id)


def _apply_document(quote: Quote, priced: PricedDocument, payload: QuoteCreate) -> None:
    for key, value in priced.header_fields().items():
        setattr(quote, key, value)
    for key, value in party_fields(payload).items():
        setattr(quote, key, value)
    quote.services = [QuoteServiceLine(**line) for line in priced.service_lines]
    quote.products = [QuoteProductLine(**line) for line in priced.product_lines]

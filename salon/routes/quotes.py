from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Quote
from ..schemas import (
    QuoteConvert,
    QuoteConvertEnvelope,
    QuoteCreate,
    QuoteEnvelope,
    QuoteListEnvelope,
    QuoteRead,
    QuoteStatsEnvelope,
    QuoteSummaryRead,
    QuoteUpdate,
)
from ..services import quotes as quotes_service

router = APIRouter()


def _view(quote: Quote, schema=QuoteRead):
    status = quotes_service.effective_status(quote)
    return schema.model_validate(quote).model_copy(
        update={"status": status, "is_expired": status == quotes_service.EXPIRED}
    )


@router.post("", response_model=QuoteEnvelope, status_code=201)
def create_quote(payload: QuoteCreate, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.create_quote(db, payload))}


@router.get("", response_model=QuoteListEnvelope)
def list_quotes(
    status: str | None = None,
    stylist_id: int | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
) -> dict:
    quotes = quotes_service.list_quotes(
        db,
        status=status,
        stylist_id=stylist_id,
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        limit=min(max(limit, 1), 500),
        offset=max(offset, 0),
    )
    return {"quotes": [_view(quote, QuoteSummaryRead) for quote in quotes]}


@router.get("/stats", response_model=QuoteStatsEnvelope)
def quote_stats(db: Session = Depends(get_db)) -> dict:
    return {"stats": quotes_service.quote_stats(db)}


@router.get("/{quote_id}", response_model=QuoteEnvelope)
def get_quote(quote_id: int, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.get_quote(db, quote_id))}


@router.put("/{quote_id}", response_model=QuoteEnvelope)
def update_quote(quote_id: int, payload: QuoteUpdate, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.update_quote(db, quote_id, payload))}


@router.delete("/{quote_id}")
def delete_quote(quote_id: int, db: Session = Depends(get_db)) -> dict:
    quotes_service.delete_quote(db, quote_id)
    return {"success": True, "message": "Quote deleted"}


@router.put("/{quote_id}/send", response_model=QuoteEnvelope)
def send_quote(quote_id: int, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.send_quote(db, quote_id))}


@router.put("/{quote_id}/accept", response_model=QuoteEnvelope)
def accept_quote(quote_id: int, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.accept_quote(db, quote_id))}


@router.put("/{quote_id}/decline", response_model=QuoteEnvelope)
def decline_quote(quote_id: int, db: Session = Depends(get_db)) -> dict:
    return {"quote": _view(quotes_service.decline_quote(db, quote_id))}


@router.post("/{quote_id}/convert", response_model=QuoteConvertEnvelope, status_code=201)
def convert_quote(
    quote_id: int, payload: QuoteConvert | None = None, db: Session = Depends(get_db)
) -> dict:
    quote, invoice = quotes_service.convert_quote(db, quote_id, payload or QuoteConvert())
    return {"quote": _view(quote), "invoice": invoice}

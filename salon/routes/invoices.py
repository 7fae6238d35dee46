from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    InvoiceCreate,
    InvoiceEnvelope,
    InvoiceListEnvelope,
    InvoiceUpdate,
    InvoiceVoidCreate,
    PaymentCreate,
    PaymentListEnvelope,
    PaymentStatusUpdate,
)
from ..services import invoices as invoices_service

router = APIRouter()


def invoice_filters(
    status: str | None = None,
    payment_status: str | None = None,
    stylist_id: int | None = None,
    customer_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
) -> dict:
    return {
        "status": status,
        "payment_status": payment_status,
        "stylist_id": stylist_id,
        "customer_id": customer_id,
        "start_date": start_date,
        "end_date": end_date,
        "search": search,
    }


@router.post("", response_model=InvoiceEnvelope, status_code=201)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)) -> dict:
    return {"invoice": invoices_service.create_invoice(db, payload)}


@router.get("", response_model=InvoiceListEnvelope)
def list_invoices(
    filters: dict = Depends(invoice_filters),
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
) -> dict:
    return {
        "invoices": invoices_service.list_invoices(
            db, limit=min(max(limit, 1), 500), offset=max(offset, 0), **filters
        )
    }


@router.get("/export.csv")
def export_invoices(
    filters: dict = Depends(invoice_filters), db: Session = Depends(get_db)
) -> Response:
    content = invoices_service.export_invoices_csv(db, **filters)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="invoices.csv"'},
    )


@router.get("/{invoice_id}", response_model=InvoiceEnvelope)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"invoice": invoices_service.get_invoice(db, invoice_id)}


@router.put("/{invoice_id}", response_model=InvoiceEnvelope)
def update_invoice(
    invoice_id: int, payload: InvoiceUpdate, db: Session = Depends(get_db)
) -> dict:
    return {"invoice": invoices_service.update_invoice(db, invoice_id, payload)}


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    invoices_service.delete_invoice(db, invoice_id)
    return {"success": True, "message": "Invoice deleted"}


@router.put("/{invoice_id}/finalize", response_model=InvoiceEnvelope)
def finalize_invoice(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"invoice": invoices_service.finalize_invoice(db, invoice_id)}


@router.put("/{invoice_id}/send", response_model=InvoiceEnvelope)
def send_invoice(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"invoice": invoices_service.send_invoice(db, invoice_id)}


@router.put("/{invoice_id}/cancel", response_model=InvoiceEnvelope)
def cancel_invoice(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"invoice": invoices_service.cancel_invoice(db, invoice_id)}


@router.put("/{invoice_id}/void", response_model=InvoiceEnvelope)
def void_invoice(
    invoice_id: int, payload: InvoiceVoidCreate, db: Session = Depends(get_db)
) -> dict:
    return {"invoice": invoices_service.void_invoice(db, invoice_id, payload)}


@router.put("/{invoice_id}/payment-status", response_model=InvoiceEnvelope)
def set_payment_status(
    invoice_id: int, payload: PaymentStatusUpdate, db: Session = Depends(get_db)
) -> dict:
    return {
        "invoice": invoices_service.set_payment_status(
            db, invoice_id, payload.payment_status
        )
    }


@router.get("/{invoice_id}/payments", response_model=PaymentListEnvelope)
def list_payments(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"payments": invoices_service.list_payments(db, invoice_id)}


@router.post("/{invoice_id}/payments", response_model=InvoiceEnvelope, status_code=201)
def record_payment(
    invoice_id: int, payload: PaymentCreate, db: Session = Depends(get_db)
) -> dict:
    return {"invoice": invoices_service.record_payment(db, invoice_id, payload)}

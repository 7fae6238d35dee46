from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    CommissionRecordEnvelope,
    CommissionReportEnvelope,
    CommissionSummaryEnvelope,
    MarkCommissionsPaid,
    MarkCommissionsPaidEnvelope,
)
from ..services import commissions as commissions_service

router = APIRouter()


@router.get("", response_model=CommissionReportEnvelope)
def commission_report(
    stylist_id: int,
    start_date: date,
    end_date: date,
    payment_status: Literal["paid", "unpaid"] | None = None,
    db: Session = Depends(get_db),
) -> dict:
    summary, rows = commissions_service.commission_report(
        db, stylist_id, start_date, end_date, payment_status
    )
    return {"summary": summary, "commissions": rows}


@router.get("/summary", response_model=CommissionSummaryEnvelope)
def commission_summary(
    start_date: date, end_date: date, db: Session = Depends(get_db)
) -> dict:
    return {"summaries": commissions_service.commission_summary(db, start_date, end_date)}


@router.put("/{invoice_id}/approve", response_model=CommissionRecordEnvelope)
def approve_commission(invoice_id: int, db: Session = Depends(get_db)) -> dict:
    return {"commission": commissions_service.approve_commission(db, invoice_id)}


@router.post("/mark-paid", response_model=MarkCommissionsPaidEnvelope)
def mark_commissions_paid(
    payload: MarkCommissionsPaid, db: Session = Depends(get_db)
) -> dict:
    count, reference, skipped = commissions_service.mark_commissions_paid(
        db, payload.invoice_ids, payload.payment_reference, payload.payment_date
    )
    return {"count": count, "payment_reference": reference, "skipped": skipped}

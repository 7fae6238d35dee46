from datetime import date, timedelta
from decimal import Decimal

import pytest


@pytest.fixture()
def period():
    today = date.today()
    return {
        "start_date": (today - timedelta(days=7)).isoformat(),
        "end_date": (today + timedelta(days=7)).isoformat(),
    }


def _pay_in_full(client, invoice):
    response = client.post(
        f"/invoices/{invoice['id']}/payments",
        json={"amount": invoice["amount_due"], "payment_method": "cash"},
    )
    assert response.status_code == 201, response.text
    return response.json()["invoice"]


def test_report_totals_and_filters(client, finalized_invoice, salon, period):
    paid = _pay_in_full(client, finalized_invoice())
    finalized_invoice()

    response = client.get("/commissions", params={"stylist_id": salon["stylist"], **period})

    assert response.status_code == 200
    body = response.json()
    summary = body["summary"]
    assert summary["total_invoices"] == 2
    assert Decimal(summary["total_sales"]) == Decimal("2760")
    assert Decimal(summary["services_commission"]) == Decimal("600")
    assert Decimal(summary["products_commission"]) == Decimal("40")
    assert Decimal(summary["total_commission"]) == Decimal("640")
    assert Decimal(summary["paid_commission"]) == Decimal("0")
    assert Decimal(summary["pending_commission"]) == Decimal("640")

    unpaid = client.get(
        "/commissions",
        params={"stylist_id": salon["stylist"], "payment_status": "unpaid", **period},
    ).json()["commissions"]
    assert len(unpaid) == 2
    assert {row["invoice_id"] for row in unpaid} >= {paid["id"]}


def test_report_excludes_drafts_and_voids(client, create_invoice, finalized_invoice, salon, period):
    create_invoice()
    voided = finalized_invoice()
    client.put(f"/invoices/{voided['id']}/void", json={"reason": "Entered twice"})

    body = client.get("/commissions", params={"stylist_id": salon["stylist"], **period}).json()

    assert body["commissions"] == []
    assert body["summary"]["total_invoices"] == 0


def test_report_rejects_inverted_range(client, salon):
    response = client.get(
        "/commissions",
        params={"stylist_id": salon["stylist"], "start_date": "2026-02-01", "end_date": "2026-01-01"},
    )

    assert response.status_code == 400


def test_mark_paid_skips_unpaid_invoices(client, finalized_invoice, salon, period):
    paid = _pay_in_full(client, finalized_invoice())
    unpaid = finalized_invoice()

    response = client.post(
        "/commissions/mark-paid",
        json={"invoice_ids": [paid["id"], unpaid["id"], 9999], "payment_reference": "PAYROLL-MARCH"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["payment_reference"] == "PAYROLL-MARCH"
    skipped = {row["invoice_id"]: row["reason"] for row in body["skipped"]}
    assert skipped == {unpaid["id"]: "Invoice not fully paid", 9999: "No commission recorded"}

    invoice = client.get(f"/invoices/{paid['id']}").json()["invoice"]
    assert invoice["commission_paid"] is True
    assert invoice["commission"]["payment_status"] == "paid"
    assert invoice["commission"]["payment_reference"] == "PAYROLL-MARCH"

    report = client.get(
        "/commissions",
        params={"stylist_id": salon["stylist"], "payment_status": "paid", **period},
    ).json()
    assert [row["invoice_id"] for row in report["commissions"]] == [paid["id"]]
    assert Decimal(report["summary"]["paid_commission"]) == Decimal("320")


def test_mark_paid_is_not_repeated(client, finalized_invoice):
    paid = _pay_in_full(client, finalized_invoice())
    client.post("/commissions/mark-paid", json={"invoice_ids": [paid["id"]]})

    response = client.post("/commissions/mark-paid", json={"invoice_ids": [paid["id"]]})

    body = response.json()
    assert body["count"] == 0
    assert body["skipped"] == [{"invoice_id": paid["id"], "reason": "Commission already paid"}]


def test_mark_paid_generates_reference(client, finalized_invoice):
    paid = _pay_in_full(client, finalized_invoice())

    body = client.post("/commissions/mark-paid", json={"invoice_ids": [paid["id"]]}).json()

    assert body["count"] == 1
    assert body["payment_reference"].startswith("PAYROLL-")


def test_mark_paid_requires_ids(client):
    assert client.post("/commissions/mark-paid", json={"invoice_ids": []}).status_code == 422


def test_manual_approval(client, finalized_invoice):
    client.put("/invoice-settings", json={"auto_approve_commission_on_payment": False})
    unpaid = finalized_invoice()
    assert client.put(f"/commissions/{unpaid['id']}/approve").status_code == 400

    paid = _pay_in_full(client, finalized_invoice())
    assert paid["commission"]["payment_status"] == "pending"

    response = client.put(f"/commissions/{paid['id']}/approve")
    assert response.status_code == 200
    commission = response.json()["commission"]
    assert commission["payment_status"] == "approved"
    assert commission["approved_at"] is not None

    assert client.put(f"/commissions/{paid['id']}/approve").status_code == 400


def test_approve_draft_has_no_commission(client, create_invoice):
    invoice = create_invoice()

    assert client.put(f"/commissions/{invoice['id']}/approve").status_code == 404


def test_summary_per_active_stylist(client, finalized_invoice, period):
    finalized_invoice()

    response = client.get("/commissions/summary", params=period)

    assert response.status_code == 200
    summaries = {row["stylist_name"]: row for row in response.json()["summaries"]}
    assert set(summaries) == {"Thandi", "Lerato"}
    assert Decimal(summaries["Thandi"]["total_commission"]) == Decimal("320")
    assert summaries["Lerato"]["total_invoices"] == 0


def test_zero_total_invoice_is_settled_at_finalize(client, finalized_invoice):
    invoice = finalized_invoice(
        discount_type="fixed", discount_value=1200, discount_reason="Complimentary"
    )

    assert Decimal(invoice["total"]) == Decimal("0")
    assert Decimal(invoice["amount_due"]) == Decimal("0")
    assert invoice["payment_status"] == "paid"
    assert invoice["commission"]["payment_status"] == "approved"

    body = client.post("/commissions/mark-paid", json={"invoice_ids": [invoice["id"]]}).json()
    assert body["count"] == 1
    assert body["skipped"] == []


def test_zero_total_commission_can_be_approved_manually(client, finalized_invoice):
    client.put("/invoice-settings", json={"auto_approve_commission_on_payment": False})
    invoice = finalized_invoice(
        discount_type="fixed", discount_value=1200, discount_reason="Complimentary"
    )
    assert invoice["commission"]["payment_status"] == "pending"

    response = client.put(f"/commissions/{invoice['id']}/approve")

    assert response.status_code == 200
    assert response.json()["commission"]["payment_status"] == "approved"

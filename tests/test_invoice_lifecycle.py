from datetime import date, datetime, timezone
from decimal import Decimal

from salon.models import Booking, Invoice, Product


def _year():
    return datetime.now(timezone.utc).year


def test_create_invoice_snapshots_catalog_and_totals(create_invoice):
    invoice = create_invoice(
        discount_type="percentage", discount_value=10, discount_reason="Loyal client"
    )

    assert invoice["status"] == "draft"
    assert invoice["invoice_number"] is None
    assert invoice["services"][0]["name"] == "Full Colour"
    assert Decimal(invoice["subtotal"]) == Decimal("1200")
    assert Decimal(invoice["discount_amount"]) == Decimal("120")
    assert Decimal(invoice["tax_amount"]) == Decimal("162")
    assert Decimal(invoice["total"]) == Decimal("1242")
    assert Decimal(invoice["amount_due"]) == Decimal("1242")
    assert invoice["payment_status"] == "unpaid"


def test_commission_rates_follow_hierarchy(create_invoice, salon):
    invoice = create_invoice(
        stylist_id=salon["senior"],
        services=[
            {"service_id": salon["colour"]},
            {"service_id": salon["cut"]},
            {"name": "Head massage", "unit_price": 100, "commission_rate": 0.5},
        ],
        products=[{"product_id": salon["shampoo"]}, {"product_id": salon["toner"]}],
    )

    rates = [Decimal(line["commission_rate"]) for line in invoice["services"]]
    assert rates == [Decimal("0.40"), Decimal("0.25"), Decimal("0.5")]
    product_rates = {line["name"]: Decimal(line["commission_rate"]) for line in invoice["products"]}
    assert product_rates == {"Repair Shampoo": Decimal("0.10"), "Toner": Decimal("0.05")}
    assert invoice["products"][1]["product_type"] == "service_product"
    # 400 + 87.50 + 50 + 20 + 4
    assert Decimal(invoice["commission_total"]) == Decimal("561.50")


def test_catalog_changes_do_not_alter_existing_lines(client, create_invoice, db_session, salon):
    invoice = create_invoice()
    product = db_session.get(Product, salon["shampoo"])
    product.price = Decimal("999.00")
    product.name = "Renamed"
    db_session.commit()

    fetched = client.get(f"/invoices/{invoice['id']}").json()["invoice"]
    assert fetched["products"][0]["name"] == "Repair Shampoo"
    assert Decimal(fetched["products"][0]["unit_price"]) == Decimal("200")


def test_discount_requires_reason(client, invoice_payload):
    response = client.post(
        "/invoices", json=invoice_payload(discount_type="fixed", discount_value=50)
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "A discount reason is required."}


def test_discount_above_maximum_rejected(client, invoice_payload):
    client.put("/invoice-settings", json={"max_discount_percentage": 20})

    response = client.post(
        "/invoices",
        json=invoice_payload(
            discount_type="percentage", discount_value=25, discount_reason="Too generous"
        ),
    )

    assert response.status_code == 400


def test_unknown_customer_is_not_found(client, invoice_payload):
    response = client.post("/invoices", json=invoice_payload(customer_id=9999))

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_invalid_body_returns_details(client, salon):
    response = client.post("/invoices", json={"customer_id": salon["customer"]})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    fields = {detail["field"] for detail in body["details"]}
    assert "body.stylist_id" in fields


def test_finalize_assigns_number_commission_and_deducts_stock(
    client, create_invoice, db_session, salon
):
    invoice = create_invoice(products=[{"product_id": salon["shampoo"], "quantity": 2}, {"product_id": salon["toner"]}])

    response = client.put(f"/invoices/{invoice['id']}/finalize")

    assert response.status_code == 200
    finalized = response.json()["invoice"]
    assert finalized["status"] == "finalized"
    assert finalized["invoice_number"] == f"INV-{_year()}-00001"
    assert finalized["invoice_date"] == date.today().isoformat()
    assert finalized["commission"]["payment_status"] == "pending"
    assert Decimal(finalized["commission"]["total_commission"]) == Decimal(
        finalized["commission_total"]
    )
    assert db_session.get(Product, salon["shampoo"]).stock == 8
    assert db_session.get(Product, salon["toner"]).stock == 5


def test_finalize_numbers_are_sequential(finalized_invoice):
    first = finalized_invoice()
    second = finalized_invoice()

    assert first["invoice_number"] == f"INV-{_year()}-00001"
    assert second["invoice_number"] == f"INV-{_year()}-00002"


def test_finalize_retries_when_number_is_taken(client, create_invoice, db_session, salon):
    db_session.add(
        Invoice(
            invoice_number=f"INV-{_year()}-00001",
            customer_id=salon["customer"],
            stylist_id=salon["stylist"],
            subtotal=Decimal("0"),
            total=Decimal("0"),
            service_date=date.today(),
            status="finalized",
        )
    )
    db_session.commit()
    invoice = create_invoice()

    response = client.put(f"/invoices/{invoice['id']}/finalize")

    assert response.status_code == 200
    assert response.json()["invoice"]["invoice_number"] == f"INV-{_year()}-00002"


def test_finalize_twice_is_rejected(client, finalized_invoice):
    invoice = finalized_invoice()

    response = client.put(f"/invoices/{invoice['id']}/finalize")

    assert response.status_code == 400


def test_insufficient_stock_is_skipped(client, create_invoice, db_session, salon):
    invoice = create_invoice(products=[{"product_id": salon["shampoo"], "quantity": 50}])

    response = client.put(f"/invoices/{invoice['id']}/finalize")

    assert response.status_code == 200
    assert response.json()["invoice"]["products"][0]["deducted_from_stock"] is False
    assert db_session.get(Product, salon["shampoo"]).stock == 10


def test_finalize_links_booking(client, create_invoice, db_session, salon):
    booking = Booking(
        customer_id=salon["customer"],
        stylist_id=salon["stylist"],
        service_id=salon["colour"],
        booking_date=date.today(),
    )
    db_session.add(booking)
    db_session.commit()
    invoice = create_invoice(booking_id=booking.id)

    client.put(f"/invoices/{invoice['id']}/finalize")

    db_session.refresh(booking)
    assert booking.invoice_id == invoice["id"]
    assert booking.invoiced is True


def test_update_replaces_lines_on_draft(client, create_invoice, invoice_payload, salon):
    invoice = create_invoice()

    response = client.put(
        f"/invoices/{invoice['id']}",
        json=invoice_payload(services=[{"service_id": salon["cut"]}], products=[]),
    )

    assert response.status_code == 200
    updated = response.json()["invoice"]
    assert [line["name"] for line in updated["services"]] == ["Cut & Blow"]
    assert updated["products"] == []
    assert Decimal(updated["total"]) == Decimal("402.50")


def test_finalized_invoice_is_immutable(client, finalized_invoice, invoice_payload):
    invoice = finalized_invoice()

    assert client.put(f"/invoices/{invoice['id']}", json=invoice_payload()).status_code == 400
    assert client.delete(f"/invoices/{invoice['id']}").status_code == 400
    assert client.put(f"/invoices/{invoice['id']}/cancel").status_code == 400


def test_delete_draft(client, create_invoice):
    invoice = create_invoice()

    response = client.delete(f"/invoices/{invoice['id']}")

    assert response.status_code == 200
    assert client.get(f"/invoices/{invoice['id']}").status_code == 404


def test_cancel_draft(client, create_invoice):
    invoice = create_invoice()

    response = client.put(f"/invoices/{invoice['id']}/cancel")

    assert response.status_code == 200
    assert response.json()["invoice"]["status"] == "cancelled"
    assert client.put(f"/invoices/{invoice['id']}/finalize").status_code == 400


def test_send_then_void(client, finalized_invoice):
    invoice = finalized_invoice()

    sent = client.put(f"/invoices/{invoice['id']}/send")
    assert sent.status_code == 200
    assert sent.json()["invoice"]["status"] == "sent"
    assert sent.json()["invoice"]["sent_at"] is not None

    voided = client.put(
        f"/invoices/{invoice['id']}/void", json={"reason": "Duplicate", "voided_by": "manager"}
    )
    assert voided.status_code == 200
    body = voided.json()["invoice"]
    assert body["status"] == "void"
    assert body["commission"]["payment_status"] == "cancelled"


def test_send_requires_finalized(client, create_invoice):
    invoice = create_invoice()

    assert client.put(f"/invoices/{invoice['id']}/send").status_code == 400


def test_list_filters_and_search(client, create_invoice, finalized_invoice):
    create_invoice()
    finalized = finalized_invoice()

    drafts = client.get("/invoices", params={"status": "draft"}).json()["invoices"]
    assert len(drafts) == 1
    assert drafts[0]["customer"]["name"] == "Naledi Khumalo"

    found = client.get("/invoices", params={"search": finalized["invoice_number"]}).json()
    assert [row["id"] for row in found["invoices"]] == [finalized["id"]]

    by_name = client.get("/invoices", params={"search": "naledi"}).json()["invoices"]
    assert len(by_name) == 2


def test_export_csv(client, finalized_invoice):
    invoice = finalized_invoice()

    response = client.get("/invoices/export.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("invoice_number,status,payment_status")
    assert lines[1].startswith(f"{invoice['invoice_number']},finalized,unpaid")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from salon.models import Quote


@pytest.fixture()
def quote_payload(salon):
    def build(**overrides):
        payload = {
            "customer_id": salon["customer"],
            "stylist_id": salon["stylist"],
            "services": [{"service_id": salon["colour"]}],
            "products": [{"product_id": salon["shampoo"]}],
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture()
def create_quote(client, quote_payload):
    def create(**overrides):
        response = client.post("/quotes", json=quote_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["quote"]

    return create


def _expire(db_session, quote_id):
    quote = db_session.get(Quote, quote_id)
    quote.valid_until = date.today() - timedelta(days=1)
    db_session.commit()


def test_create_quote_defaults(create_quote):
    quote = create_quote(
        discount_type="percentage", discount_value=10, discount_reason="Bridal package"
    )

    assert quote["status"] == "draft"
    assert quote["quote_number"] is None
    assert quote["valid_until"] == (date.today() + timedelta(days=30)).isoformat()
    assert Decimal(quote["total"]) == Decimal("1242")
    assert quote["services"][0]["commission_rate"] is None


def test_quote_without_customer_is_allowed(create_quote):
    quote = create_quote(customer_id=None, stylist_id=None)

    assert quote["customer_id"] is None


def test_send_assigns_number(client, create_quote):
    quote = create_quote()

    response = client.put(f"/quotes/{quote['id']}/send")

    assert response.status_code == 200
    sent = response.json()["quote"]
    assert sent["status"] == "sent"
    assert sent["quote_number"] == f"QTE-{datetime.now(timezone.utc).year}-00001"


def test_expired_quote_is_derived_not_stored(client, create_quote, db_session):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/send")
    _expire(db_session, quote["id"])

    fetched = client.get(f"/quotes/{quote['id']}").json()["quote"]
    assert fetched["status"] == "expired"
    assert fetched["is_expired"] is True

    db_session.expire_all()
    assert db_session.get(Quote, quote["id"]).status == "sent"

    listed = client.get("/quotes", params={"status": "expired"}).json()["quotes"]
    assert [row["id"] for row in listed] == [quote["id"]]
    assert client.get("/quotes", params={"status": "sent"}).json()["quotes"] == []

    response = client.put(f"/quotes/{quote['id']}/accept")
    assert response.status_code == 400
    assert response.json()["error"] == "Quote has expired."


def test_accept_and_convert(client, create_quote):
    quote = create_quote(client_notes="Allergic to ammonia")
    client.put(f"/quotes/{quote['id']}/send")
    accepted = client.put(f"/quotes/{quote['id']}/accept")
    assert accepted.json()["quote"]["status"] == "accepted"

    response = client.post(f"/quotes/{quote['id']}/convert", json={})

    assert response.status_code == 201
    body = response.json()
    assert body["quote"]["status"] == "converted"
    invoice = body["invoice"]
    assert body["quote"]["converted_invoice_id"] == invoice["id"]
    assert invoice["status"] == "draft"
    assert Decimal(invoice["total"]) == Decimal(quote["total"])
    assert invoice["client_notes"] == "Allergic to ammonia"
    assert invoice["internal_notes"].startswith("Converted from quote QTE-")
    assert Decimal(invoice["commission_total"]) == Decimal("320")

    again = client.post(f"/quotes/{quote['id']}/convert", json={})
    assert again.status_code == 400


def test_convert_requires_accepted(client, create_quote):
    quote = create_quote()

    assert client.post(f"/quotes/{quote['id']}/convert", json={}).status_code == 400


def test_convert_requires_parties(client, create_quote):
    quote = create_quote(customer_id=None)
    client.put(f"/quotes/{quote['id']}/accept")

    assert client.post(f"/quotes/{quote['id']}/convert", json={}).status_code == 400


def test_deleting_converted_draft_reopens_quote(client, create_quote):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/accept")
    invoice = client.post(f"/quotes/{quote['id']}/convert", json={}).json()["invoice"]

    assert client.delete(f"/invoices/{invoice['id']}").status_code == 200

    reopened = client.get(f"/quotes/{quote['id']}").json()["quote"]
    assert reopened["status"] == "accepted"
    assert reopened["converted_invoice_id"] is None


def test_decline(client, create_quote):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/send")

    response = client.put(f"/quotes/{quote['id']}/decline")

    assert response.json()["quote"]["status"] == "declined"
    assert client.put(f"/quotes/{quote['id']}/accept").status_code == 400


def test_update_only_while_open(client, create_quote, quote_payload, salon):
    quote = create_quote()

    response = client.put(
        f"/quotes/{quote['id']}", json=quote_payload(services=[{"service_id": salon["cut"]}], products=[])
    )
    assert response.status_code == 200
    assert Decimal(response.json()["quote"]["total"]) == Decimal("402.50")

    client.put(f"/quotes/{quote['id']}/decline")
    assert client.put(f"/quotes/{quote['id']}", json=quote_payload()).status_code == 400


def test_delete_only_drafts(client, create_quote):
    draft = create_quote()
    sent = create_quote()
    client.put(f"/quotes/{sent['id']}/send")

    assert client.delete(f"/quotes/{draft['id']}").status_code == 200
    assert client.get(f"/quotes/{draft['id']}").status_code == 404
    assert client.delete(f"/quotes/{sent['id']}").status_code == 400


def test_past_valid_until_rejected(client, quote_payload):
    payload = quote_payload(valid_until=(date.today() - timedelta(days=1)).isoformat())

    assert client.post("/quotes", json=payload).status_code == 400


def test_stats(client, create_quote, db_session):
    create_quote()
    expired = create_quote()
    client.put(f"/quotes/{expired['id']}/send")
    _expire(db_session, expired["id"])
    converted = create_quote()
    client.put(f"/quotes/{converted['id']}/accept")
    client.post(f"/quotes/{converted['id']}/convert", json={})

    stats = client.get("/quotes/stats").json()["stats"]

    assert stats["total"] == 3
    assert stats["draft"] == 1
    assert stats["expired"] == 1
    assert stats["sent"] == 0
    assert stats["converted"] == 1
    assert Decimal(stats["total_value"]) == Decimal("4140")
    assert Decimal(stats["converted_value"]) == Decimal("1380")


def test_send_retries_when_number_is_taken(client, create_quote, db_session):
    year = datetime.now(timezone.utc).year
    taken = create_quote()
    db_session.get(Quote, taken["id"]).quote_number = f"QTE-{year}-00001"
    db_session.commit()
    quote = create_quote()

    response = client.put(f"/quotes/{quote['id']}/send")

    assert response.status_code == 200
    assert response.json()["quote"]["quote_number"] == f"QTE-{year}-00002"


def test_expired_quote_can_be_extended(client, create_quote, quote_payload, db_session):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/send")
    _expire(db_session, quote["id"])
    new_date = (date.today() + timedelta(days=14)).isoformat()

    response = client.put(f"/quotes/{quote['id']}", json=quote_payload(valid_until=new_date))

    assert response.status_code == 200
    extended = response.json()["quote"]
    assert extended["status"] == "sent"
    assert extended["is_expired"] is False
    assert extended["valid_until"] == new_date
    assert client.put(f"/quotes/{quote['id']}/accept").status_code == 200


def test_extending_into_the_past_is_rejected(client, create_quote, quote_payload, db_session):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/send")
    _expire(db_session, quote["id"])
    past = (date.today() - timedelta(days=2)).isoformat()

    response = client.put(f"/quotes/{quote['id']}", json=quote_payload(valid_until=past))

    assert response.status_code == 400
    assert response.json()["error"] == "Valid-until date cannot be in the past."


def test_closed_quote_messages(client, create_quote, quote_payload):
    quote = create_quote()
    client.put(f"/quotes/{quote['id']}/decline")

    edit = client.put(f"/quotes/{quote['id']}", json=quote_payload())
    accept = client.put(f"/quotes/{quote['id']}/accept")

    assert edit.json()["error"] == "Cannot edit quote in status declined."
    assert accept.json()["error"] == "Cannot accept quote in status declined."


def test_converted_lines_match_quote_lines(client, create_quote, salon):
    quote = create_quote(
        services=[
            {"service_id": salon["colour"], "unit_price": 900, "quantity": 2, "discount": 50},
            {"name": "Head massage", "unit_price": 120},
        ],
        products=[{"product_id": salon["shampoo"], "quantity": 3, "discount": 10}],
    )
    client.put(f"/quotes/{quote['id']}/accept")

    invoice = client.post(f"/quotes/{quote['id']}/convert", json={}).json()["invoice"]

    fields = ("name", "unit_price", "quantity", "discount", "total")

    def lines(rows):
        return [
            {field: row[field] if field == "name" else Decimal(row[field]) for field in fields}
            for row in rows
        ]

    assert lines(invoice["services"]) == lines(quote["services"])
    assert lines(invoice["products"]) == lines(quote["products"])
    assert lines(quote["services"])[0] == {
        "name": "Full Colour",
        "unit_price": Decimal("900"),
        "quantity": Decimal("2"),
        "discount": Decimal("50"),
        "total": Decimal("1750"),
    }
    assert Decimal(invoice["total"]) == Decimal(quote["total"])


def test_conversion_keeps_agreed_discount(client, create_quote):
    quote = create_quote(
        discount_type="percentage", discount_value=15, discount_reason="Loyal client"
    )
    client.put(f"/quotes/{quote['id']}/accept")
    client.put(
        "/invoice-settings",
        json={"max_discount_percentage": 10, "require_discount_reason": True},
    )

    response = client.post(f"/quotes/{quote['id']}/convert", json={})

    assert response.status_code == 201, response.text
    invoice = response.json()["invoice"]
    assert Decimal(invoice["discount_value"]) == Decimal("15")
    assert Decimal(invoice["total"]) == Decimal(quote["total"])

from decimal import Decimal

from salon.seed import seed_defaults


def test_defaults_are_seeded(client):
    settings = client.get("/invoice-settings").json()["settings"]

    assert settings["tax_enabled"] is True
    assert Decimal(settings["tax_rate"]) == Decimal("0.15")
    assert settings["invoice_number_prefix"] == "INV"
    assert Decimal(settings["default_service_commission_rate"]) == Decimal("0.30")

    methods = client.get("/payment-methods").json()["payment_methods"]
    assert [method["code"] for method in methods] == [
        "cash",
        "card_on_site",
        "eft",
        "payfast",
        "yoco",
        "loyalty_points",
    ]
    presets = client.get("/discount-presets").json()["discount_presets"]
    assert len(presets) == 5


def test_seed_is_idempotent(db_session):
    assert seed_defaults(db_session) == {
        "settings": 0,
        "payment_methods": 0,
        "discount_presets": 0,
    }


def test_tax_can_be_disabled(client, create_invoice):
    response = client.put("/invoice-settings", json={"tax_enabled": False, "updated_by": "owner"})
    assert response.status_code == 200
    assert response.json()["settings"]["updated_by"] == "owner"

    invoice = create_invoice()

    assert Decimal(invoice["tax_amount"]) == Decimal("0")
    assert Decimal(invoice["total"]) == Decimal("1200")


def test_invalid_tax_rate_rejected(client):
    assert client.put("/invoice-settings", json={"tax_rate": 1.5}).status_code == 422


def test_custom_prefix_and_format(client, finalized_invoice):
    client.put(
        "/invoice-settings",
        json={"invoice_number_prefix": "FLT", "number_format": "{PREFIX}{NUMBER}/{YEAR}"},
    )

    invoice = finalized_invoice()

    assert invoice["invoice_number"].startswith("FLT00001/")


def test_number_format_must_include_year_and_number(client):
    for number_format in ("{PREFIX}-{NUMBER}", "{PREFIX}-{YEAR}"):
        response = client.put("/invoice-settings", json={"number_format": number_format})
        assert response.status_code == 422

    settings = client.get("/invoice-settings").json()["settings"]
    assert settings["number_format"] == "{PREFIX}-{YEAR}-{NUMBER}"


def test_preset_discount_applies_its_name_as_reason(client, create_invoice):
    presets = client.get("/discount-presets").json()["discount_presets"]
    vip = next(preset for preset in presets if preset["name"] == "VIP Client (10%)")

    invoice = create_invoice(discount_preset_id=vip["id"])

    assert invoice["discount_type"] == "percentage"
    assert invoice["discount_reason"] == "VIP Client (10%)"
    assert Decimal(invoice["total"]) == Decimal("1242")


def test_discount_preset_crud(client, create_invoice):
    created = client.post(
        "/discount-presets",
        json={"name": "Student", "discount_type": "fixed", "discount_value": 30},
    )
    assert created.status_code == 201
    preset = created.json()["discount_preset"]
    assert preset["is_active"] is True

    updated = client.put(f"/discount-presets/{preset['id']}", json={"is_active": False})
    assert updated.json()["discount_preset"]["is_active"] is False

    active = client.get("/discount-presets").json()["discount_presets"]
    assert preset["id"] not in [row["id"] for row in active]
    everything = client.get("/discount-presets", params={"include_inactive": True}).json()
    assert preset["id"] in [row["id"] for row in everything["discount_presets"]]

    response = client.post(
        "/invoices",
        json={
            "customer_id": 1,
            "stylist_id": 1,
            "service_date": "2026-01-01",
            "services": [{"name": "Fringe trim", "unit_price": 50}],
            "discount_preset_id": preset["id"],
        },
    )
    assert response.status_code == 400

    assert client.delete(f"/discount-presets/{preset['id']}").status_code == 200
    assert client.put(f"/discount-presets/{preset['id']}", json={}).status_code == 404


def test_payment_method_fee_update(client):
    methods = client.get("/payment-methods").json()["payment_methods"]
    yoco = next(method for method in methods if method["code"] == "yoco")

    response = client.put(
        f"/payment-methods/{yoco['id']}",
        json={"transaction_fee_type": "percentage", "transaction_fee_value": 2.95},
    )

    assert response.status_code == 200
    method = response.json()["payment_method"]
    assert method["transaction_fee_type"] == "percentage"
    assert Decimal(method["transaction_fee_value"]) == Decimal("2.95")


def test_catalog_endpoints(client):
    created = client.post("/stylists", json={"name": "Zanele", "commission_rate": 0.35})
    assert created.status_code == 201

    names = [row["name"] for row in client.get("/stylists").json()]
    assert "Zanele" in names


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

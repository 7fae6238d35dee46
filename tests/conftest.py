from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from salon.db import enable_sqlite_foreign_keys, get_db
from salon.main import app
from salon.models import Base, Customer, Product, Service, Stylist
from salon.seed import seed_defaults


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    with sessionmaker(bind=engine)() as session:
        seed_defaults(session)
    return engine


@pytest.fixture()
def SessionLocal(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def salon(db_session):
    customer = Customer(name="Naledi Khumalo", email="naledi@example.com")
    stylist = Stylist(name="Thandi", specialty="Colour")
    senior = Stylist(name="Lerato", commission_rate=Decimal("0.40"))
    colour = Service(name="Full Colour", category="colour", price=Decimal("1000.00"))
    cut = Service(
        name="Cut & Blow",
        category="cut",
        price=Decimal("350.00"),
        commission_rate=Decimal("0.25"),
    )
    shampoo = Product(name="Repair Shampoo", price=Decimal("200.00"), stock=10)
    toner = Product(
        name="Toner", price=Decimal("80.00"), stock=5, is_service_product=True
    )
    db_session.add_all([customer, stylist, senior, colour, cut, shampoo, toner])
    db_session.commit()
    return {
        "customer": customer.id,
        "stylist": stylist.id,
        "senior": senior.id,
        "colour": colour.id,
        "cut": cut.id,
        "shampoo": shampoo.id,
        "toner": toner.id,
    }


@pytest.fixture()
def invoice_payload(salon):
    def build(**overrides):
        payload = {
            "customer_id": salon["customer"],
            "stylist_id": salon["stylist"],
            "service_date": date.today().isoformat(),
            "services": [{"service_id": salon["colour"]}],
            "products": [{"product_id": salon["shampoo"]}],
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture()
def create_invoice(client, invoice_payload):
    def create(**overrides):
        response = client.post("/invoices", json=invoice_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["invoice"]

    return create


@pytest.fixture()
def finalized_invoice(client, create_invoice):
    def make(**overrides):
        invoice = create_invoice(**overrides)
        response = client.put(f"/invoices/{invoice['id']}/finalize")
        assert response.status_code == 200, response.text
        return response.json()["invoice"]

    return make

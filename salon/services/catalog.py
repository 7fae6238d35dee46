from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Customer, Product, Service, Stylist
from ..schemas import CustomerCreate, ProductCreate, ServiceCreate, StylistCreate
from .errors import NotFoundError


def _create(db: Session, model, payload):
    row = model(**payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get(db: Session, model, row_id: int | None, label: str):
    row = db.get(model, row_id) if row_id is not None else None
    if row is None:
        raise NotFoundError(f"{label} {row_id} not found")
    return row


def create_customer(db: Session, payload: CustomerCreate) -> Customer:
    return _create(db, Customer, payload)


def list_customers(db: Session) -> list[Customer]:
    return list(db.scalars(select(Customer).order_by(Customer.name)))


def get_customer(db: Session, customer_id: int | None) -> Customer:
    return _get(db, Customer, customer_id, "Customer")


def create_stylist(db: Session, payload: StylistCreate) -> Stylist:
    return _create(db, Stylist, payload)


def list_stylists(db: Session, active_only: bool = False) -> list[Stylist]:
    query = select(Stylist)
    if active_only:
        query = query.where(Stylist.is_active.is_(True))
    return list(db.scalars(query.order_by(Stylist.name)))


def get_stylist(db: Session, stylist_id: int | None) -> Stylist:
    return _get(db, Stylist, stylist_id, "Stylist")


def create_service(db: Session, payload: ServiceCreate) -> Service:
    return _create(db, Service, payload)


def list_services(db: Session) -> list[Service]:
    return list(db.scalars(select(Service).order_by(Service.category, Service.name)))


def get_service(db: Session, service_id: int | None) -> Service:
    return _get(db, Service, service_id, "Service")


def create_product(db: Session, payload: ProductCreate) -> Product:
    return _create(db, Product, payload)


def list_products(db: Session) -> list[Product]:
    return list(db.scalars(select(Product).order_by(Product.category, Product.name)))


def get_product(db: Session, product_id: int | None) -> Product:
    return _get(db, Product, product_id, "Product")

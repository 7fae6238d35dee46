from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    CustomerCreate,
    CustomerRead,
    ProductCreate,
    ProductRead,
    ServiceCreate,
    ServiceRead,
    StylistCreate,
    StylistRead,
)
from ..services import catalog as catalog_service

router = APIRouter()


@router.post("/customers", response_model=CustomerRead, status_code=201)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db)) -> CustomerRead:
    return catalog_service.create_customer(db, payload)


@router.get("/customers", response_model=list[CustomerRead])
def list_customers(db: Session = Depends(get_db)) -> list[CustomerRead]:
    return catalog_service.list_customers(db)


@router.post("/stylists", response_model=StylistRead, status_code=201)
def create_stylist(payload: StylistCreate, db: Session = Depends(get_db)) -> StylistRead:
    return catalog_service.create_stylist(db, payload)


@router.get("/stylists", response_model=list[StylistRead])
def list_stylists(active_only: bool = False, db: Session = Depends(get_db)) -> list[StylistRead]:
    return catalog_service.list_stylists(db, active_only=active_only)


@router.post("/services", response_model=ServiceRead, status_code=201)
def create_service(payload: ServiceCreate, db: Session = Depends(get_db)) -> ServiceRead:
    return catalog_service.create_service(db, payload)


@router.get("/services", response_model=list[ServiceRead])
def list_services(db: Session = Depends(get_db)) -> list[ServiceRead]:
    return catalog_service.list_services(db)


@router.post("/products", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)) -> ProductRead:
    return catalog_service.create_product(db, payload)


@router.get("/products", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)) -> list[ProductRead]:
    return catalog_service.list_products(db)

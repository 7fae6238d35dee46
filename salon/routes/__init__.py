from fastapi import APIRouter

from .catalog import router as catalog_router
from .commissions import router as commissions_router
from .invoices import router as invoices_router
from .quotes import router as quotes_router
from .settings import router as settings_router

api_router = APIRouter()
api_router.include_router(invoices_router, prefix="/invoices", tags=["invoices"])
api_router.include_router(quotes_router, prefix="/quotes", tags=["quotes"])
api_router.include_router(commissions_router, prefix="/commissions", tags=["commissions"])
api_router.include_router(settings_router, tags=["settings"])
api_router.include_router(catalog_router, tags=["catalog"])

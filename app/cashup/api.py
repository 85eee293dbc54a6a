from fastapi import APIRouter

from app.cashup.routers.cash_counts import router as cash_counts_router
from app.cashup.routers.health import router as health_router
from app.cashup.routers.topups import router as topups_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(cash_counts_router, tags=["cash-counts"])
api_router.include_router(topups_router, tags=["topups"])

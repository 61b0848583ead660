from deadstock.routers.dashboard import router as dashboard_router
from deadstock.routers.drugs import router as drugs_router
from deadstock.routers.health import router as health_router
from deadstock.routers.marketplace import router as marketplace_router
from deadstock.routers.offers import router as offers_router
from deadstock.routers.registration import router as registration_router
from deadstock.routers.requests import router as requests_router

__all__ = [
    "dashboard_router",
    "drugs_router",
    "health_router",
    "marketplace_router",
    "offers_router",
    "registration_router",
    "requests_router",
]

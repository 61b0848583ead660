import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from deadstock.config import Settings, get_settings
from deadstock.core.constants import PROFILE_PATH
from deadstock.core.logging import setup_logging
from deadstock.database import Base, engine
from deadstock.models import import_all_models
from deadstock.routers import (
    dashboard_router,
    drugs_router,
    health_router,
    marketplace_router,
    offers_router,
    registration_router,
    requests_router,
)
from deadstock.services.session_service import MissingSessionError
from deadstock.services.view_state import ViewRegistry

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)

import_all_models()
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    try:
        yield
    finally:
        closed = _app.state.views.teardown_all()
        logger.info("Tore down %d views", closed)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.state.views = ViewRegistry()


@app.exception_handler(MissingSessionError)
async def redirect_to_profile(_request: Request, exc: MissingSessionError):
    logger.info("No pharmacy in session, redirecting to profile: %s", exc)
    return RedirectResponse(url=PROFILE_PATH, status_code=303)


app.include_router(health_router)
app.include_router(marketplace_router)
app.include_router(offers_router)
app.include_router(requests_router)
app.include_router(dashboard_router)
app.include_router(drugs_router)
app.include_router(registration_router)


@app.get("/")
def root():
    return RedirectResponse(url="/dashboard", status_code=302)


__all__ = ["app", "root"]

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from deadstock.config import get_settings
from deadstock.dependencies import get_view_registry

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(views=Depends(get_view_registry)):
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "store_configured": bool(settings.STORE_URL and settings.STORE_ANON_KEY),
        "webhooks_configured": {
            "offer": bool(settings.OFFER_WEBHOOK_URL),
            "request": bool(settings.REQUEST_WEBHOOK_URL),
            "register": bool(settings.REGISTER_WEBHOOK_URL),
            "profile": bool(settings.PROFILE_WEBHOOK_URL),
        },
        "active_views": len(views),
        "time": datetime.now(timezone.utc).isoformat(),
    }

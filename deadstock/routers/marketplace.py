from fastapi import APIRouter, Depends, HTTPException, Query

from deadstock.core.constants import EGYPT_CITIES
from deadstock.dependencies import get_session_context, get_store_client, get_view_registry
from deadstock.schemas.offer import OfferFilter
from deadstock.services.marketplace_service import MarketplaceView
from deadstock.services.offer_service import with_expiry_flags

router = APIRouter(prefix="/marketplace", tags=["Marketplace"])


@router.get("")
def browse_marketplace(
    query: str = Query("", description="English/Arabic name or barcode"),
    city: str = Query("", description="Exact city; empty means any"),
    min_discount: int = Query(0, ge=0, le=100),
    refresh: bool = Query(False, description="Fetch a fresh snapshot"),
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    views=Depends(get_view_registry),
):
    view = views.get(context.session_key, MarketplaceView.name, MarketplaceView)
    if refresh or view.state.loaded_at is None:
        view.refresh(store, context)
    if view.state.error:
        raise HTTPException(status_code=502, detail=view.state.error)

    criteria = OfferFilter(query=query, city=city, min_discount=min_discount)
    offers = with_expiry_flags(view.visible(criteria))
    return {
        "offers": offers,
        "count": len(offers),
        "total": len(view.ranked),
        "viewer_city": context.city,
        "cities": list(EGYPT_CITIES),
    }


__all__ = ["router"]

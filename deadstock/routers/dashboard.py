from fastapi import APIRouter, Depends, HTTPException

from deadstock.dependencies import get_session_context, get_store_client, get_view_registry
from deadstock.services.dashboard_service import DashboardView

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("")
def dashboard(
    context=Depends(get_session_context),
    store=Depends(get_store_client),
    views=Depends(get_view_registry),
):
    view = views.get(context.session_key, DashboardView.name, DashboardView)
    view.refresh(store, context)
    if view.state.error:
        raise HTTPException(status_code=502, detail=view.state.error)
    return view.state.data


__all__ = ["router"]

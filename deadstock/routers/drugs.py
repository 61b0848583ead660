from fastapi import APIRouter, Depends, HTTPException, Query

from deadstock.dependencies import get_store_client
from deadstock.services.drug_search_service import search_drugs
from deadstock.services.store_client import StoreError

router = APIRouter(prefix="/drugs", tags=["Drugs"])


@router.get("/search")
def search_catalog(
    q: str = Query("", description="English or Arabic drug name"),
    store=Depends(get_store_client),
):
    try:
        drugs = search_drugs(store, q)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail="failed_to_load") from exc
    return {"drugs": drugs}


__all__ = ["router"]

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Offer(BaseModel):
    id: str
    pharmacy_id: int = 0
    drug_id: str = ""
    name_en: str = ""
    name_ar: str = ""
    barcode: str = ""
    expiry_date: Optional[date] = None
    discount: int = 0
    price: float = 0
    quantity: int = 0
    city: str = ""
    pharmacy_name: str = ""
    pharmacy_address: str = ""
    created_at: Optional[datetime] = None
    status: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class OfferRead(Offer):
    near_expiry: bool = False


class OfferFilter(BaseModel):
    query: str = ""
    city: str = ""
    min_discount: int = 0

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MarketRequest(BaseModel):
    id: str
    pharmacy_id: int = 0
    drug_id: str = ""
    name_en: str = ""
    name_ar: str = ""
    barcode: str = ""
    quantity: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

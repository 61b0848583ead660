from typing import Optional

from pydantic import BaseModel, ConfigDict


class Drug(BaseModel):
    id: str
    barcode: str = ""
    name_en: str = ""
    name_ar: str = ""
    price: float = 0
    manufacturer: Optional[str] = None

    model_config = ConfigDict(frozen=True)

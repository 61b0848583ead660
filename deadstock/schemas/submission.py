from typing import Optional

from pydantic import BaseModel

from deadstock.schemas.drug import Drug


class OfferDraft(BaseModel):
    drug: Optional[Drug] = None
    expiry: str = ""
    discount: int = 20
    quantity: int = 1
    price: float = 0


class OfferSubmission(OfferDraft):
    confirm_duplicate: bool = False


class RequestDraft(BaseModel):
    drug: Optional[Drug] = None
    quantity: int = 1

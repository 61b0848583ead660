from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from deadstock.schemas.offer import Offer
from deadstock.schemas.request import MarketRequest


class ActivityItem(BaseModel):
    kind: Literal["offer", "request"]
    record: Union[Offer, MarketRequest]

    model_config = ConfigDict(frozen=True)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def created_at(self) -> Optional[datetime]:
        return self.record.created_at


class DashboardStats(BaseModel):
    total_offers: int = 0
    total_requests: int = 0
    total_offers_value: float = 0
    sold_items: int = 0
    recent_activity: List[ActivityItem] = Field(default_factory=list)

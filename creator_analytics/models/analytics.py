from datetime import datetime
from typing import List
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel
from creator_analytics.utils.clock import utc_now

class HistoricalPoint(BaseModel):
    date: datetime
    followers: int
    engagement_rate: float = Field(alias="engagementRate")

class Analytics(Document):
    """Current analytics snapshot of one creator plus its historical series."""
    creator_id: PydanticObjectId = Field(alias="creatorId")

    # current values
    followers: int
    engagement_rate: float = Field(alias="engagementRate")
    avg_likes: int = Field(alias="avgLikes")
    avg_comments: int = Field(alias="avgComments")

    # chronological, append-only after creation
    historical: List[HistoricalPoint] = Field(default=[])
    last_updated: datetime = Field(default_factory=utc_now, alias="lastUpdated")

    class Settings:
        name = "analytics"
        indexes = [IndexModel([("creatorId", ASCENDING)], unique=True)]

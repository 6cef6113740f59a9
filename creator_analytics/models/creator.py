from datetime import datetime
from typing import Optional
from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from creator_analytics.utils.clock import utc_now

PLATFORMS = ("Instagram", "YouTube", "X")

class Creator(Document):
    """A tracked social media profile. Owned by exactly one user."""
    user_id: PydanticObjectId = Field(alias="userId")
    name: str
    platform: str # Instagram, YouTube, X
    username: str
    profile_image_url: Optional[str] = Field(None, alias="profileImageUrl")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    class Settings:
        name = "creators"
        indexes = [
            "userId",
            IndexModel([("userId", ASCENDING), ("username", ASCENDING)], unique=True),
        ]

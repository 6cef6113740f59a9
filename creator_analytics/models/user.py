from datetime import datetime
from beanie import Document, Indexed
from pydantic import Field
from creator_analytics.utils.clock import utc_now

ROLES = ("user", "admin")

class User(Document):
    name: str
    email: Indexed(str, unique=True)
    password_hash: str = Field(alias="passwordHash")
    role: str = "user" # user, admin
    disabled: bool = False
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    class Settings:
        name = "users"

"""
In-memory stand-ins for the Beanie-backed stores.

They implement the same async methods as UserStore, CreatorStore and
AnalyticsStore so services and routes can be exercised without MongoDB.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from beanie import PydanticObjectId
from creator_analytics.errors import AlreadyExists, NotFound
from creator_analytics.models.analytics import HistoricalPoint
from creator_analytics.services.analytics_store import apply_snapshot
from creator_analytics.utils.clock import utc_now


@dataclass
class FakeUser:
    name: str
    email: str
    password_hash: str = ""
    role: str = "user"
    disabled: bool = False
    id: PydanticObjectId = field(default_factory=PydanticObjectId)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class FakeCreator:
    user_id: Any
    name: str
    platform: str
    username: str
    profile_image_url: Optional[str] = None
    id: PydanticObjectId = field(default_factory=PydanticObjectId)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class FakeAnalytics:
    creator_id: Any
    followers: int
    engagement_rate: float
    avg_likes: int
    avg_comments: int
    historical: List[HistoricalPoint] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utc_now)
    id: PydanticObjectId = field(default_factory=PydanticObjectId)


class FakeUserStore:
    def __init__(self, users=()):
        self.items = {str(u.id): u for u in users}

    async def get(self, user_id):
        return self.items.get(str(user_id))

    async def find_by_email(self, email):
        return next((u for u in self.items.values() if u.email == email), None)

    async def list_all(self):
        return list(self.items.values())

    async def create(self, name, email, password_hash, role="user"):
        if await self.find_by_email(email):
            raise AlreadyExists("Email already registered")
        user = FakeUser(name=name, email=email, password_hash=password_hash, role=role)
        self.items[str(user.id)] = user
        return user

    async def save(self, user):
        self.items[str(user.id)] = user
        return user

    async def delete_by_emails(self, emails):
        for user in [u for u in self.items.values() if u.email in emails]:
            del self.items[str(user.id)]


class FakeCreatorStore:
    def __init__(self, creators=()):
        self.items = {str(c.id): c for c in creators}

    async def get(self, creator_id):
        return self.items.get(str(creator_id))

    async def find_by_owner_and_username(self, owner_id, username):
        return next(
            (c for c in self.items.values() if str(c.user_id) == str(owner_id) and c.username == username),
            None,
        )

    def _owned(self, owner_id):
        creators = list(self.items.values())
        if owner_id is not None:
            creators = [c for c in creators if str(c.user_id) == str(owner_id)]
        return creators

    async def find_visible(self, owner_id=None, skip=0, limit=None):
        creators = sorted(self._owned(owner_id), key=lambda c: c.created_at, reverse=True)[skip:]
        return creators if limit is None else creators[:limit]

    async def count(self, owner_id=None):
        return len(self._owned(owner_id))

    async def create(self, owner_id, name, platform, username, profile_image_url=None):
        if await self.find_by_owner_and_username(owner_id, username):
            raise AlreadyExists("Creator username exists")
        creator = FakeCreator(
            user_id=owner_id, name=name, platform=platform,
            username=username, profile_image_url=profile_image_url,
        )
        self.items[str(creator.id)] = creator
        return creator

    async def save(self, creator):
        self.items[str(creator.id)] = creator
        return creator

    async def delete(self, creator):
        self.items.pop(str(creator.id), None)


class FakeAnalyticsStore:
    def __init__(self, records=()):
        self.items = {str(r.creator_id): r for r in records}
        self.append_calls = 0

    async def get(self, creator_id):
        return self.items.get(str(creator_id))

    async def find_for_creators(self, creator_ids):
        return [self.items[str(c)] for c in creator_ids if str(c) in self.items]

    async def create(self, creator_id, snapshot, history):
        if str(creator_id) in self.items:
            raise AlreadyExists("Analytics already exist for this creator")
        record = FakeAnalytics(
            creator_id=creator_id,
            followers=snapshot.followers,
            engagement_rate=snapshot.engagement_rate,
            avg_likes=snapshot.avg_likes,
            avg_comments=snapshot.avg_comments,
            historical=list(history),
        )
        self.items[str(creator_id)] = record
        return record

    async def apply_snapshot_and_append(self, record, snapshot):
        self.append_calls += 1
        if str(record.creator_id) not in self.items:
            raise NotFound("Analytics not found")
        apply_snapshot(record, snapshot, utc_now())
        return record

    async def delete(self, creator_id):
        self.items.pop(str(creator_id), None)


def make_record(creator, followers=10000, engagement_rate=2.5, history=()):
    return FakeAnalytics(
        creator_id=creator.id,
        followers=followers,
        engagement_rate=engagement_rate,
        avg_likes=round(followers * engagement_rate / 100),
        avg_comments=round(round(followers * engagement_rate / 100) * 0.1),
        historical=list(history),
    )

import random
from typing import Optional
from creator_analytics.errors import AlreadyExists, AnalyticsError, InvalidArgument, NotFound
from creator_analytics.models.creator import PLATFORMS
from creator_analytics.services.access import ensure_can_access, visible_owner
from creator_analytics.utils.analytics_generator import default_rng, generate_history, generate_snapshot
from creator_analytics.utils.logger import logger

SEED_HISTORY_DAYS = 30
MAX_PAGE_SIZE = 200

def clean_text(value, field: str) -> Optional[str]:
    """Strip a text field; None passes through."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgument(f"{field} must be a string")
    return value.strip()

def validate_platform(platform: str) -> None:
    if platform not in PLATFORMS:
        raise InvalidArgument("Invalid platform")

class CreatorService:
    """Creator CRUD. Keeps each creator's analytics record alive exactly as long as the creator."""

    def __init__(self, creators, analytics, rng: Optional[random.Random] = None):
        self.creators = creators
        self.analytics = analytics
        self.rng = rng or default_rng

    async def _authorized_creator(self, caller_id, caller_role: str, creator_id):
        creator = await self.creators.get(creator_id)
        if creator is None:
            raise NotFound("Not found")
        ensure_can_access(caller_id, caller_role, creator)
        return creator

    async def create_creator(self, owner_id, name: str, platform: str, username: str,
                             profile_image_url: Optional[str] = None):
        name = clean_text(name, "name")
        platform = clean_text(platform, "platform")
        username = clean_text(username, "username")
        profile_image_url = clean_text(profile_image_url, "profileImageUrl") or None

        if not name or not platform or not username:
            raise InvalidArgument("Missing required fields: name, platform, username")
        validate_platform(platform)

        if await self.creators.find_by_owner_and_username(owner_id, username):
            raise AlreadyExists("Creator username exists")

        creator = await self.creators.create(owner_id, name, platform, username, profile_image_url)
        try:
            await self.analytics.create(
                creator.id,
                generate_snapshot(self.rng),
                generate_history(SEED_HISTORY_DAYS, self.rng),
            )
        except AnalyticsError:
            logger.error(f"Analytics seeding failed for creator {creator.id}; removing creator")
            await self.creators.delete(creator)
            raise

        logger.info(f"Creator {creator.id} ({platform}/{username}) created for user {owner_id}")
        return creator

    async def list_creators(self, caller_id, caller_role: str, page: int = 1, limit: int = 50,
                            user_id: Optional[str] = None) -> dict:
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        owner = visible_owner(caller_id, caller_role)
        if owner is None and user_id:
            # admins may narrow the listing to one user
            owner = user_id

        total = await self.creators.count(owner)
        creators = await self.creators.find_visible(owner, skip=(page - 1) * limit, limit=limit)
        return {"creators": creators, "total": total, "page": page, "limit": limit}

    async def get_creator(self, caller_id, caller_role: str, creator_id):
        """Returns (creator, analytics record or None)."""
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        record = await self.analytics.get(creator.id)
        return creator, record

    async def update_creator(self, caller_id, caller_role: str, creator_id, name: Optional[str] = None,
                             platform: Optional[str] = None, username: Optional[str] = None,
                             profile_image_url: Optional[str] = None):
        """Update identity fields only; empty values are ignored."""
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        name = clean_text(name, "name")
        platform = clean_text(platform, "platform")
        username = clean_text(username, "username")
        profile_image_url = clean_text(profile_image_url, "profileImageUrl")

        if platform:
            validate_platform(platform)
            creator.platform = platform
        if username and username != creator.username:
            existing = await self.creators.find_by_owner_and_username(creator.user_id, username)
            if existing and str(existing.id) != str(creator.id):
                raise AlreadyExists("Creator username exists")
            creator.username = username
        if name:
            creator.name = name
        if profile_image_url:
            creator.profile_image_url = profile_image_url

        return await self.creators.save(creator)

    async def delete_creator(self, caller_id, caller_role: str, creator_id) -> None:
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        await self.analytics.delete(creator.id)
        await self.creators.delete(creator)
        logger.info(f"Creator {creator.id} and its analytics deleted")

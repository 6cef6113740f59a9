from typing import List, Optional
from creator_analytics.models.creator import Creator
from creator_analytics.services.storage import storage_call, to_object_id

DUPLICATE_CREATOR = "Creator username exists"

class CreatorStore:

    @storage_call()
    async def get(self, creator_id) -> Optional[Creator]:
        oid = to_object_id(creator_id)
        if oid is None:
            return None
        return await Creator.get(oid)

    @storage_call()
    async def find_by_owner_and_username(self, owner_id, username: str) -> Optional[Creator]:
        return await Creator.find_one({"userId": to_object_id(owner_id), "username": username})

    @storage_call()
    async def find_visible(self, owner_id=None, skip: int = 0, limit: Optional[int] = None) -> List[Creator]:
        """All creators, or only those of `owner_id` when given. Newest first."""
        query = Creator.find(self._owner_filter(owner_id)).sort("-createdAt").skip(skip)
        if limit is not None:
            query = query.limit(limit)
        return await query.to_list()

    @storage_call()
    async def count(self, owner_id=None) -> int:
        return await Creator.find(self._owner_filter(owner_id)).count()

    @storage_call(DUPLICATE_CREATOR)
    async def create(self, owner_id, name: str, platform: str, username: str,
                     profile_image_url: Optional[str] = None) -> Creator:
        creator = Creator(
            userId=to_object_id(owner_id),
            name=name,
            platform=platform,
            username=username,
            profileImageUrl=profile_image_url,
        )
        await creator.insert()
        return creator

    @storage_call(DUPLICATE_CREATOR)
    async def save(self, creator: Creator) -> Creator:
        await creator.save()
        return creator

    @storage_call()
    async def delete(self, creator: Creator) -> None:
        await creator.delete()

    @staticmethod
    def _owner_filter(owner_id) -> dict:
        if owner_id is None:
            return {}
        return {"userId": to_object_id(owner_id)}

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from creator_analytics.models.user import User
from creator_analytics.services.creator_service import CreatorService
from creator_analytics.utils.auth import get_current_user
from creator_analytics.utils.dependencies import ensure_db, get_creator_service
from creator_analytics.utils.serializers import serialize_analytics, serialize_creator

router = APIRouter(prefix="/api/creators", tags=["Creators"], dependencies=[Depends(ensure_db)])

class CreatorIn(BaseModel):
    # Missing fields are reported by the service as a 400
    name: str = ""
    platform: str = ""
    username: str = ""
    profileImageUrl: Optional[str] = None

class CreatorUpdate(BaseModel):
    name: Optional[str] = None
    platform: Optional[str] = None
    username: Optional[str] = None
    profileImageUrl: Optional[str] = None

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_creator(
    req: CreatorIn,
    user: User = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    """Create a creator together with its generated analytics."""
    creator = await service.create_creator(
        user.id,
        name=req.name,
        platform=req.platform,
        username=req.username,
        profile_image_url=req.profileImageUrl,
    )
    return {"creator": serialize_creator(creator)}

@router.get("")
async def list_creators(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    userId: Optional[str] = None,
    user: User = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    result = await service.list_creators(str(user.id), user.role, page=page, limit=limit, user_id=userId)
    result["creators"] = [serialize_creator(c) for c in result["creators"]]
    return result

@router.get("/{creator_id}")
async def get_creator(
    creator_id: str,
    user: User = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    creator, analytics = await service.get_creator(str(user.id), user.role, creator_id)
    return {"creator": serialize_creator(creator), "analytics": serialize_analytics(analytics)}

@router.put("/{creator_id}")
async def update_creator(
    creator_id: str,
    req: CreatorUpdate,
    user: User = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    creator = await service.update_creator(
        str(user.id),
        user.role,
        creator_id,
        name=req.name,
        platform=req.platform,
        username=req.username,
        profile_image_url=req.profileImageUrl,
    )
    return {"creator": serialize_creator(creator)}

@router.delete("/{creator_id}")
async def delete_creator(
    creator_id: str,
    user: User = Depends(get_current_user),
    service: CreatorService = Depends(get_creator_service),
):
    await service.delete_creator(str(user.id), user.role, creator_id)
    return {"ok": True}

from fastapi import APIRouter, Body, Depends
from creator_analytics.models.user import User
from creator_analytics.services.auth_service import list_users_with_counts, set_user_disabled
from creator_analytics.services.creator_store import CreatorStore
from creator_analytics.services.user_store import UserStore
from creator_analytics.utils.auth import require_admin
from creator_analytics.utils.dependencies import ensure_db, get_creator_store, get_user_store
from creator_analytics.utils.serializers import serialize_user

router = APIRouter(prefix="/api/users", tags=["Users"], dependencies=[Depends(ensure_db)])

@router.get("")
async def list_users(
    admin: User = Depends(require_admin),
    users: UserStore = Depends(get_user_store),
    creators: CreatorStore = Depends(get_creator_store),
):
    """Admin: every user with their creator count."""
    rows = await list_users_with_counts(users, creators)
    return {"users": [{**serialize_user(r["user"]), "creatorCount": r["creatorCount"]} for r in rows]}

@router.patch("/{user_id}/disable")
async def disable_user(
    user_id: str,
    payload: dict = Body(default={}),
    admin: User = Depends(require_admin),
    users: UserStore = Depends(get_user_store),
):
    user = await set_user_disabled(users, user_id, bool(payload.get("disabled")))
    return {"user": serialize_user(user)}

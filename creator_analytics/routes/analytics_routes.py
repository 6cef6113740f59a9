import random
from fastapi import APIRouter, Depends, Query
from creator_analytics.models.user import User
from creator_analytics.services.analytics_dashboard_service import get_dashboard_summary
from creator_analytics.services.analytics_service import AnalyticsService
from creator_analytics.services.analytics_store import AnalyticsStore
from creator_analytics.services.creator_store import CreatorStore
from creator_analytics.utils.auth import get_current_user
from creator_analytics.utils.dependencies import (
    ensure_db, get_analytics_service, get_analytics_store, get_creator_store, get_rng
)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"], dependencies=[Depends(ensure_db)])

@router.get("/dashboard")
async def get_dashboard_analytics(
    timeframe: str = Query("week"),
    user: User = Depends(get_current_user),
    creators: CreatorStore = Depends(get_creator_store),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    rng: random.Random = Depends(get_rng),
):
    return await get_dashboard_summary(str(user.id), user.role, creators, analytics, timeframe, rng)

@router.get("/creator/{creatorId}")
async def get_creator_analytics(
    creatorId: str,
    user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return {"analytics": await service.get_creator_analytics(str(user.id), user.role, creatorId)}

@router.get("/creator/{creatorId}/history")
async def get_creator_history(
    creatorId: str,
    days: int = Query(30, ge=1, le=365),
    user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.get_history_summary(str(user.id), user.role, creatorId, days=days)

@router.post("/refresh/{creatorId}")
async def refresh_analytics(
    creatorId: str,
    user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Generate a new snapshot for the creator, creating its analytics if missing.
    """
    return {"analytics": await service.refresh(str(user.id), user.role, creatorId)}

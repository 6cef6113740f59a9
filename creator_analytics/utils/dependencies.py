"""
FastAPI dependency providers for the stores and services.

Tests swap the stores through `app.dependency_overrides`.
"""
import random
from fastapi import Depends
from creator_analytics.services.analytics_service import AnalyticsService
from creator_analytics.services.analytics_store import AnalyticsStore
from creator_analytics.services.creator_service import CreatorService
from creator_analytics.services.creator_store import CreatorStore
from creator_analytics.services.storage_service import ObjectStorage
from creator_analytics.services.user_store import UserStore
from creator_analytics.utils.analytics_generator import default_rng


def get_user_store() -> UserStore:
    return UserStore()

def get_creator_store() -> CreatorStore:
    return CreatorStore()

def get_analytics_store() -> AnalyticsStore:
    return AnalyticsStore()

def get_rng() -> random.Random:
    return default_rng

def get_object_storage() -> ObjectStorage:
    return ObjectStorage()

def get_analytics_service(
    creators: CreatorStore = Depends(get_creator_store),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    rng: random.Random = Depends(get_rng),
) -> AnalyticsService:
    return AnalyticsService(creators, analytics, rng)

def get_creator_service(
    creators: CreatorStore = Depends(get_creator_store),
    analytics: AnalyticsStore = Depends(get_analytics_store),
    rng: random.Random = Depends(get_rng),
) -> CreatorService:
    return CreatorService(creators, analytics, rng)

async def ensure_db():
    from main import ensure_beanie_initialized
    await ensure_beanie_initialized()

"""
Mock analytics generation.

Every function takes the random source explicitly so callers (and tests) can
pass a seeded `random.Random`; `default_rng` is used otherwise.
"""
import math
import random
from datetime import datetime, timedelta
from typing import List, Optional
from pydantic import BaseModel
from creator_analytics.errors import InvalidArgument
from creator_analytics.models.analytics import HistoricalPoint
from creator_analytics.utils.clock import utc_now

MIN_FOLLOWERS = 5000
MAX_FOLLOWERS = 500000
MIN_ENGAGEMENT = 1.0
MAX_ENGAGEMENT = 10.0
HISTORY_FLOOR = 100
DAILY_DRIFT = 0.02

default_rng = random.Random()

class Snapshot(BaseModel):
    followers: int
    engagement_rate: float
    avg_likes: int
    avg_comments: int

def _random_followers(rng: random.Random) -> int:
    return rng.randint(MIN_FOLLOWERS, MAX_FOLLOWERS)

def _random_engagement(rng: random.Random) -> float:
    return round(rng.random() * (MAX_ENGAGEMENT - MIN_ENGAGEMENT) + MIN_ENGAGEMENT, 2)

def generate_snapshot(rng: Optional[random.Random] = None) -> Snapshot:
    """Generate one plausible analytics data point."""
    rng = rng or default_rng
    followers = _random_followers(rng)
    engagement_rate = _random_engagement(rng)
    avg_likes = round(followers * engagement_rate / 100)
    return Snapshot(
        followers=followers,
        engagement_rate=engagement_rate,
        avg_likes=avg_likes,
        avg_comments=round(avg_likes * 0.1),
    )

def generate_history(
    days: int = 30,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> List[HistoricalPoint]:
    """
    Generate `days` daily points ending today as a random walk of followers.

    Each step moves the followers count by at most 1% of its current value
    either way and never lets it drop below 100. Engagement rates are drawn
    independently for every point.
    """
    if days < 0:
        raise InvalidArgument(f"days must be >= 0, got {days}")

    rng = rng or default_rng
    now = now or utc_now()
    base = _random_followers(rng)
    points = []
    for days_ago in range(days - 1, -1, -1):
        change = math.floor((rng.random() - 0.5) * base * DAILY_DRIFT)
        base = max(HISTORY_FLOOR, base + change)
        points.append(HistoricalPoint(
            date=now - timedelta(days=days_ago),
            followers=base,
            engagementRate=_random_engagement(rng),
        ))
    return points

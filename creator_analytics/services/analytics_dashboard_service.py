import random
from typing import List, Optional
import pandas as pd
from creator_analytics.services.access import visible_owner
from creator_analytics.utils.analytics_generator import default_rng

TIMEFRAME_POINTS = {"day": 24, "week": 7, "month": 30, "year": 12}
TOP_CREATORS = 5

def timeframe_points(timeframe: str) -> int:
    # Unknown timeframes chart like a week
    return TIMEFRAME_POINTS.get(timeframe, TIMEFRAME_POINTS["week"])

def jitter_series(base: float, count: int, rng: random.Random) -> List[float]:
    # Chart filler only: each point is the base value +/- 20%
    return [round(base * (0.8 + rng.random() * 0.4), 2) for _ in range(count)]

def summarize(creators: list, records: list, timeframe: str = "week", rng: Optional[random.Random] = None) -> dict:
    """
    Fold the analytics of the given creators into the dashboard summary.
    """
    points = timeframe_points(timeframe)
    rng = rng or default_rng
    creators_by_id = {str(c.id): c for c in creators}

    df = pd.DataFrame(
        [
            {"creatorId": str(r.creator_id), "followers": r.followers, "engagementRate": r.engagement_rate}
            for r in records
        ],
        columns=["creatorId", "followers", "engagementRate"],
    )
    df["followers"] = pd.to_numeric(df["followers"]).fillna(0)
    df["engagementRate"] = pd.to_numeric(df["engagementRate"]).fillna(0)

    total_followers = int(df["followers"].sum()) if len(df) else 0
    avg_engagement = round(float(df["engagementRate"].mean()), 2) if len(df) else 0

    platform_distribution = {}
    for creator in creators:
        platform_distribution[creator.platform] = platform_distribution.get(creator.platform, 0) + 1

    # Impact score ranking; a stable sort keeps ties in input order
    df["impact"] = df["followers"] * df["engagementRate"]
    top = df.sort_values("impact", ascending=False, kind="stable").head(TOP_CREATORS)
    top_creators = []
    for row in top.itertuples(index=False):
        creator = creators_by_id.get(row.creatorId)
        top_creators.append({
            "creatorId": row.creatorId,
            "name": creator.name if creator else None,
            "username": creator.username if creator else None,
            "followers": int(row.followers),
            "engagement": float(row.engagementRate),
        })

    return {
        "totalCreators": len(creators),
        "totalFollowers": total_followers,
        "avgEngagement": avg_engagement,
        "platformDistribution": platform_distribution,
        "topCreators": top_creators,
        "timeframe": timeframe,
        "followersGrowth": jitter_series(total_followers, points, rng),
        "engagementHistory": jitter_series(avg_engagement, points, rng),
    }

async def get_dashboard_summary(
    caller_id,
    caller_role: str,
    creator_store,
    analytics_store,
    timeframe: str = "week",
    rng: Optional[random.Random] = None,
) -> dict:
    """
    Returns aggregated stats over the creators visible to the caller:
    every creator for admins, only their own for users. Read-only.
    """
    creators = await creator_store.find_visible(visible_owner(caller_id, caller_role))
    records = await analytics_store.find_for_creators([c.id for c in creators])
    return summarize(creators, records, timeframe, rng)

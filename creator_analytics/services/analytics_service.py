import random
from datetime import timedelta
from typing import Optional
import pandas as pd
from creator_analytics.errors import NotFound
from creator_analytics.models.analytics import HistoricalPoint
from creator_analytics.services.access import ensure_can_access
from creator_analytics.utils.analytics_generator import default_rng, generate_snapshot
from creator_analytics.utils.clock import utc_now
from creator_analytics.utils.logger import logger
from creator_analytics.utils.serializers import serialize_analytics


class AnalyticsService:
    """
    Per-creator analytics: read, refresh-or-create and history summaries.

    Every operation resolves the creator first (NotFound) and then checks
    that the caller owns it or is an admin (Forbidden).
    """

    def __init__(self, creators, analytics, rng: Optional[random.Random] = None):
        self.creators = creators
        self.analytics = analytics
        self.rng = rng or default_rng

    async def _authorized_creator(self, caller_id, caller_role: str, creator_id):
        creator = await self.creators.get(creator_id)
        if creator is None:
            raise NotFound("Creator not found")
        ensure_can_access(caller_id, caller_role, creator)
        return creator

    async def get_creator_analytics(self, caller_id, caller_role: str, creator_id) -> Optional[dict]:
        """Current analytics with the creator identity, or None if none exist yet."""
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        record = await self.analytics.get(creator.id)
        return serialize_analytics(record, creator)

    async def refresh(self, caller_id, caller_role: str, creator_id) -> dict:
        """
        Generate a fresh snapshot for the creator.

        Updates the existing record and appends to its history, or creates the
        record with the snapshot as its only historical point. Either way the
        history grows by exactly one entry.
        """
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        record = await self.analytics.get(creator.id)
        snapshot = generate_snapshot(self.rng)

        if record is not None:
            record = await self.analytics.apply_snapshot_and_append(record, snapshot)
        else:
            seed = HistoricalPoint(
                date=utc_now(),
                followers=snapshot.followers,
                engagementRate=snapshot.engagement_rate,
            )
            record = await self.analytics.create(creator.id, snapshot, [seed])
            logger.info(f"Created analytics for creator {creator.id}")

        logger.info(f"Refreshed analytics for creator {creator.id}: {snapshot.followers} followers")
        return serialize_analytics(record, creator)

    async def get_history_summary(self, caller_id, caller_role: str, creator_id, days: int = 30) -> dict:
        """
        Summarize follower growth and engagement over the last `days` days
        of the creator's history using Pandas.
        """
        creator = await self._authorized_creator(caller_id, caller_role, creator_id)
        record = await self.analytics.get(creator.id)

        start_date = utc_now() - timedelta(days=days)
        points = [p for p in (record.historical if record else []) if p.date >= start_date]
        if not points:
            return {"message": "No data found for this period", "data": []}

        df = pd.DataFrame([
            {"date": p.date, "followers": p.followers, "engagementRate": p.engagement_rate}
            for p in points
        ])
        df["date"] = pd.to_datetime(df["date"], utc=True)
        df = df.sort_values("date", kind="stable")

        total_growth = df["followers"].iloc[-1] - df["followers"].iloc[0]
        avg_engagement = df["engagementRate"].mean()

        return {
            "creatorId": str(creator.id),
            "totalGrowth": int(total_growth),
            "averageEngagement": round(float(avg_engagement), 2),
            "period": f"{days} days",
            "data": [
                {"date": row.date.isoformat(), "followers": int(row.followers), "engagementRate": float(row.engagementRate)}
                for row in df.itertuples(index=False)
            ],
        }

from datetime import datetime
from typing import Iterable, List, Optional
from creator_analytics.errors import NotFound
from creator_analytics.models.analytics import Analytics, HistoricalPoint
from creator_analytics.services.storage import storage_call, to_object_id
from creator_analytics.utils.analytics_generator import Snapshot
from creator_analytics.utils.clock import utc_now


def apply_snapshot(record, snapshot: Snapshot, now: datetime) -> HistoricalPoint:
    """
    Overwrite the current values of `record` with `snapshot` and append the
    matching historical point. Returns the appended point.
    """
    record.followers = snapshot.followers
    record.engagement_rate = snapshot.engagement_rate
    record.avg_likes = snapshot.avg_likes
    record.avg_comments = snapshot.avg_comments
    point = HistoricalPoint(
        date=now,
        followers=snapshot.followers,
        engagementRate=snapshot.engagement_rate,
    )
    record.historical.append(point)
    record.last_updated = now
    return point

class AnalyticsStore:
    """One Analytics document per creator, keyed by creatorId."""

    @storage_call()
    async def get(self, creator_id) -> Optional[Analytics]:
        oid = to_object_id(creator_id)
        if oid is None:
            return None
        return await Analytics.find_one({"creatorId": oid})

    @storage_call()
    async def find_for_creators(self, creator_ids: Iterable) -> List[Analytics]:
        oids = [oid for oid in (to_object_id(c) for c in creator_ids) if oid is not None]
        if not oids:
            return []
        return await Analytics.find({"creatorId": {"$in": oids}}).to_list()

    @storage_call("Analytics already exist for this creator")
    async def create(self, creator_id, snapshot: Snapshot, history: List[HistoricalPoint]) -> Analytics:
        record = Analytics(
            creatorId=to_object_id(creator_id),
            followers=snapshot.followers,
            engagementRate=snapshot.engagement_rate,
            avgLikes=snapshot.avg_likes,
            avgComments=snapshot.avg_comments,
            historical=list(history),
            lastUpdated=utc_now(),
        )
        await record.insert()
        return record

    @storage_call()
    async def apply_snapshot_and_append(self, record: Analytics, snapshot: Snapshot) -> Analytics:
        now = utc_now()
        point = HistoricalPoint(date=now, followers=snapshot.followers, engagementRate=snapshot.engagement_rate)
        # $set + $push instead of a full save so concurrent appends are kept
        result = await Analytics.find_one({"_id": record.id}).update({
            "$set": {
                "followers": snapshot.followers,
                "engagementRate": snapshot.engagement_rate,
                "avgLikes": snapshot.avg_likes,
                "avgComments": snapshot.avg_comments,
                "lastUpdated": now,
            },
            "$push": {"historical": point.model_dump(by_alias=True)},
        })
        if result is None or result.matched_count == 0:
            # deleted since it was read
            raise NotFound("Analytics not found")
        apply_snapshot(record, snapshot, now)
        return record

    @storage_call()
    async def delete(self, creator_id) -> None:
        oid = to_object_id(creator_id)
        if oid is None:
            return
        await Analytics.find({"creatorId": oid}).delete()

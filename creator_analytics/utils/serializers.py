"""Plain-dict views of the documents, in the camelCase the frontend expects.

Each view carries the id twice: `_id`, as the frontend reads it, and `id`.
"""
from typing import Optional


def _iso(value):
    return value.isoformat() if value else None

def creator_identity(creator) -> dict:
    """Read-only projection of a creator attached to analytics responses."""
    return {
        "_id": str(creator.id),
        "id": str(creator.id),
        "name": creator.name,
        "platform": creator.platform,
        "username": creator.username,
        "profileImageUrl": creator.profile_image_url,
    }

def serialize_creator(creator) -> dict:
    data = creator_identity(creator)
    data["userId"] = str(creator.user_id)
    data["createdAt"] = _iso(creator.created_at)
    return data

def serialize_point(point) -> dict:
    return {
        "date": _iso(point.date),
        "followers": point.followers,
        "engagementRate": point.engagement_rate,
    }

def serialize_analytics(record, creator=None) -> Optional[dict]:
    if record is None:
        return None
    data = {
        "_id": str(record.id),
        "id": str(record.id),
        "creatorId": str(record.creator_id),
        "followers": record.followers,
        "engagementRate": record.engagement_rate,
        "avgLikes": record.avg_likes,
        "avgComments": record.avg_comments,
        "historical": [serialize_point(p) for p in record.historical],
        "lastUpdated": _iso(record.last_updated),
    }
    if creator is not None:
        data["creator"] = creator_identity(creator)
    return data

def serialize_user(user) -> dict:
    # never exposes the password hash
    return {
        "_id": str(user.id),
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "disabled": user.disabled,
        "createdAt": _iso(user.created_at),
    }

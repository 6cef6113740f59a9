"""
Helpers shared by the *Store classes: ObjectId parsing and translation of
pymongo errors into domain errors.
"""
import functools
from typing import Optional
from beanie import PydanticObjectId
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError
from creator_analytics.errors import AlreadyExists, StorageFailure
from creator_analytics.utils.logger import logger


def to_object_id(value) -> Optional[PydanticObjectId]:
    """Return the id as an ObjectId, or None when it cannot be one."""
    if value is None:
        return None
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if not ObjectId.is_valid(str(value)):
        return None
    return PydanticObjectId(str(value))

def storage_call(duplicate_message: str = "Document already exists"):
    """Decorator for async store methods. Storage errors are never retried."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except DuplicateKeyError as e:
                raise AlreadyExists(duplicate_message) from e
            except PyMongoError as e:
                logger.error(f"{func.__qualname__} failed: {e}")
                raise StorageFailure() from e
        return wrapper
    return decorator

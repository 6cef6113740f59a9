from typing import Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from creator_analytics.models.user import User
from creator_analytics.services.storage_service import ObjectStorage
from creator_analytics.utils.auth import get_current_user
from creator_analytics.utils.dependencies import ensure_db, get_object_storage

router = APIRouter(prefix="/api/upload", tags=["Upload"], dependencies=[Depends(ensure_db)])

@router.post("/creator-image")
async def upload_creator_image(
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """
    Upload a creator profile image and return its public URL.
    """
    if image is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content = await image.read()
    url = await storage.upload_creator_image(content, image.filename, image.content_type)
    return {"url": url}

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from mindspend.core.config import settings
from mindspend.core.security import get_current_user_id
from mindspend.db.base import PROFILES, Repository
from mindspend.db.repository import get_repository
from mindspend.models.user import ProfilePublic, ProfileUpdate
from mindspend.utils.storage import FileStorage, avatar_key, get_storage

router = APIRouter()


@router.get("/", response_model=ProfilePublic)
def get_profile(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    profile = repo.get_record(PROFILES, user_id) or {}
    return ProfilePublic(user_id=user_id, display_name=profile.get("display_name"), avatar_url=profile.get("avatar_url"))


@router.put("/", response_model=ProfilePublic)
def update_profile(
    update: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
):
    profile = repo.upsert_record(PROFILES, user_id, {"display_name": update.display_name})
    if profile is None:
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return ProfilePublic(**profile)


@router.post("/avatar", response_model=ProfilePublic)
def upload_avatar(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    repo: Repository = Depends(get_repository),
    storage: FileStorage = Depends(get_storage),
):
    content = file.file.read()
    if len(content) > settings.AVATAR_MAX_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large. Max size is 2MB")

    file.file.seek(0)
    url = storage.upload(avatar_key(user_id, file.filename), file.file, file.content_type or "image/png")
    if not url:
        raise HTTPException(status_code=500, detail="Upload failed")

    profile = repo.upsert_record(PROFILES, user_id, {"avatar_url": url})
    if profile is None:
        raise HTTPException(status_code=500, detail="Failed to update profile")
    return ProfilePublic(**profile)

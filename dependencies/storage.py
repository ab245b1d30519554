"""storage: 업로드 저장소 및 서비스 의존성.

업로드 디렉토리는 설정값(UPLOAD_DIR)으로 한 번만 결정되어 서비스에 주입됩니다.
테스트에서는 app.dependency_overrides[get_upload_store]로 교체합니다.
"""

from functools import lru_cache

from fastapi import Depends

from core.config import settings
from services.post_service import PostService
from services.user_service import UserService
from utils.storage import UploadStore


@lru_cache
def get_upload_store() -> UploadStore:
    return UploadStore(settings.UPLOAD_DIR)


def get_post_service(store: UploadStore = Depends(get_upload_store)) -> PostService:
    return PostService(store, thumbnail_max_bytes=settings.THUMBNAIL_MAX_BYTES)


def get_user_service(store: UploadStore = Depends(get_upload_store)) -> UserService:
    return UserService(store, avatar_max_bytes=settings.AVATAR_MAX_BYTES)

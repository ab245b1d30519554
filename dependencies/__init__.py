"""dependencies: FastAPI 의존성 주입 패키지.

인증, 요청 컨텍스트, 업로드 저장소 관련 의존성 함수를 제공합니다.
"""

from .auth import get_current_user
from .request_context import get_request_timestamp, get_request_time
from .storage import get_upload_store, get_post_service, get_user_service

__all__ = [
    "get_current_user",
    "get_request_timestamp",
    "get_request_time",
    "get_upload_store",
    "get_post_service",
    "get_user_service",
]

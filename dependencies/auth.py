"""auth: FastAPI 의존성 주입을 위한 인증 모듈.

Authorization: Bearer <access_token> 헤더로 현재 사용자를 확인합니다.
"""

from fastapi import Request

from dependencies.request_context import get_request_timestamp
from models import user_models
from models.user_models import User
from utils.exceptions import AppError, unauthorized_error
from utils.jwt_utils import decode_access_token


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(request: Request) -> User:
    """Access Token에서 현재 사용자를 추출하고 검증합니다.

    Args:
        request: FastAPI Request 객체.

    Returns:
        인증된 사용자 객체 (요청마다 DB에서 최신 상태로 조회).

    Raises:
        AuthError: 토큰이 없거나 유효하지 않거나 사용자가 없으면 401.
    """
    timestamp = get_request_timestamp(request)

    token = _extract_bearer_token(request)
    if not token:
        raise unauthorized_error(timestamp)

    try:
        user_id = decode_access_token(token)
    except AppError as e:
        raise e.with_timestamp(timestamp)

    user = await user_models.get_user_by_id(user_id)
    if not user:
        raise unauthorized_error(timestamp)
    return user

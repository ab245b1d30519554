"""jwt_utils: JWT 생성 및 검증 유틸리티 모듈.

Access Token (HS256 JWT) 발급 및 검증.
"""

from datetime import datetime, timedelta, timezone

import jwt

from core.config import settings
from utils.exceptions import unauthorized_error

_JWT_ALGORITHM = "HS256"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user_id: int) -> str:
    """Access Token을 생성합니다 (설정된 만료 시간 적용).

    JWT는 암호화되지 않으므로, 식별에 필요한 최소 정보(sub)만 담습니다.
    """
    now = _now_utc()
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(
            (now + timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES)).timestamp()
        ),
        "type": "access",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Access Token을 검증하고 사용자 ID를 반환합니다.

    Raises:
        AuthError: 토큰이 만료되었거나 유효하지 않은 경우 (401).
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[_JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise unauthorized_error(error_code="token_expired")
    except jwt.PyJWTError:
        raise unauthorized_error(error_code="token_invalid")

    if payload.get("type") != "access":
        raise unauthorized_error(error_code="token_invalid")

    # sub 클레임 존재 및 정수 변환 가능 여부 검증
    try:
        return int(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise unauthorized_error(error_code="token_invalid")

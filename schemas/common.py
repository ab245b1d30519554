"""common: 공통 응답 유틸리티 모듈.

API 응답 생성, 폼 데이터 검증, 공통 데이터 변환 함수를 정의합니다.
"""

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from utils.exceptions import validation_error
from utils.formatters import format_datetime

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_response(
    code: str,
    message: str,
    data: dict[str, Any] | None = None,
    timestamp: str | None = None,
) -> dict[str, Any]:
    """표준 API 응답 딕셔너리를 생성합니다.

    Args:
        code: 응답 코드 (예: "POST_CREATED").
        message: 사용자에게 표시할 메시지.
        data: 응답 데이터 (기본값: 빈 딕셔너리).
        timestamp: 타임스탬프 (기본값: 현재 시간).

    Returns:
        표준 형식의 응답 딕셔너리.
    """
    return {
        "code": code,
        "message": message,
        "data": data if data is not None else {},
        "errors": [],
        "timestamp": timestamp or datetime.now().strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


def parse_form(model: type[ModelT], timestamp: str | None = None, **fields: Any) -> ModelT:
    """multipart 폼 필드를 Pydantic 모델로 검증합니다.

    검증 실패 시 첫 번째 오류 메시지를 담은 422 ValidationError를 발생시킵니다.
    """
    # 폼에서 누락된 필드는 None으로 전달되므로 제외해야 'missing' 오류가 된다
    present = {k: v for k, v in fields.items() if v is not None}
    try:
        return model(**present)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        first = errors[0] if errors else {}
        if first.get("type") == "missing":
            message = "모든 항목을 입력해 주세요."
            error_code = "missing_fields"
        else:
            message = str(first.get("msg", "입력값이 올바르지 않습니다.")).removeprefix(
                "Value error, "
            )
            error_code = "invalid_input"
        raise validation_error(error_code, message, timestamp)


def serialize_user(user) -> dict[str, Any]:
    """User 객체를 API 응답용 딕셔너리로 변환합니다 (비밀번호 제외)."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "avatar": user.avatar,
        "posts": user.posts,
        "created_at": format_datetime(user.created_at),
    }


def serialize_post(post) -> dict[str, Any]:
    """Post 객체를 API 응답용 딕셔너리로 변환합니다."""
    return {
        "id": post.id,
        "title": post.title,
        "category": post.category,
        "description": post.description,
        "thumbnail": post.thumbnail,
        "author_id": post.author_id,
        "created_at": format_datetime(post.created_at),
        "updated_at": format_datetime(post.updated_at),
    }

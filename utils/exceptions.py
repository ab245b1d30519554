"""exceptions: API 에러 타입 및 에러 응답 생성 헬퍼 모듈.

모든 에러는 HTTPException 하위 클래스이며 detail은 다음 형식을 따릅니다.
    {"error": <에러 코드>, "message": <메시지(선택)>, "timestamp": <타임스탬프>}
"""

from datetime import datetime, timezone

from fastapi import HTTPException, status


def _now_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class AppError(HTTPException):
    """API 에러의 기반 클래스.

    Attributes:
        error_code: 클라이언트가 분기에 사용하는 에러 코드.
        message: 사용자에게 표시할 메시지.
    """

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error_code: str,
        message: str | None = None,
        timestamp: str | None = None,
        status_code: int | None = None,
    ):
        self.error_code = error_code
        self.message = message
        detail: dict[str, str] = {
            "error": error_code,
            "timestamp": timestamp or _now_timestamp(),
        }
        if message:
            detail["message"] = message
        super().__init__(status_code=status_code or self.default_status, detail=detail)

    def with_timestamp(self, timestamp: str) -> "AppError":
        """요청 타임스탬프로 detail을 갱신하고 자기 자신을 반환합니다."""
        if isinstance(self.detail, dict):
            self.detail["timestamp"] = timestamp
        return self


class ValidationError(AppError):
    """누락되었거나 형식이 잘못된 입력 (클라이언트가 수정 가능)."""

    default_status = status.HTTP_422_UNPROCESSABLE_CONTENT


class AuthError(AppError):
    """자격 증명 불일치 또는 토큰 오류."""

    default_status = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    default_status = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """고유 필드(이메일 등) 중복."""

    default_status = status.HTTP_409_CONFLICT


class FileStorageError(AppError):
    """업로드 디렉토리 파일 쓰기/삭제 실패."""


class PersistenceError(AppError):
    """데이터베이스 작업 실패."""


def validation_error(
    error_code: str,
    message: str,
    timestamp: str | None = None,
    status_code: int = status.HTTP_422_UNPROCESSABLE_CONTENT,
) -> ValidationError:
    """입력 검증 실패 에러를 생성합니다.

    Args:
        error_code: 에러 코드 (예: 'missing_fields', 'file_too_large').
        message: 사용자에게 표시할 메시지.
        timestamp: 요청 타임스탬프.
        status_code: 400 또는 422 (기본값 422).

    Returns:
        ValidationError 예외.
    """
    return ValidationError(error_code, message, timestamp, status_code=status_code)


def not_found_error(
    resource: str, timestamp: str | None = None, message: str | None = None
) -> NotFoundError:
    """리소스를 찾을 수 없을 때 404 에러를 생성합니다.

    Args:
        resource: 리소스 이름 (예: 'user', 'post').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지 (선택).

    Returns:
        NotFoundError 예외.
    """
    return NotFoundError(f"{resource}_not_found", message, timestamp)


def forbidden_error(
    action: str, timestamp: str | None = None, message: str | None = None
) -> ForbiddenError:
    """권한이 없을 때 403 에러를 생성합니다.

    Args:
        action: 수행하려는 동작 (예: 'edit', 'delete').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지 (선택).

    Returns:
        ForbiddenError 예외.
    """
    return ForbiddenError(f"not_authorized_to_{action}", message, timestamp)


def conflict_error(
    resource: str, timestamp: str | None = None, message: str | None = None
) -> ConflictError:
    """리소스 충돌 시 409 에러를 생성합니다.

    Args:
        resource: 충돌하는 리소스 (예: 'email').
        timestamp: 요청 타임스탬프.
        message: 사용자에게 표시할 메시지 (선택).

    Returns:
        ConflictError 예외.
    """
    return ConflictError(f"{resource}_already_exists", message, timestamp)


def unauthorized_error(
    timestamp: str | None = None, error_code: str = "unauthorized", message: str | None = None
) -> AuthError:
    """인증 실패 시 401 에러를 생성합니다."""
    return AuthError(error_code, message, timestamp)


def persistence_error(
    operation: str, timestamp: str | None = None
) -> PersistenceError:
    """데이터베이스 작업 실패 시 500 에러를 생성합니다.

    Args:
        operation: 실패한 작업 이름 (예: 'create_post').
        timestamp: 요청 타임스탬프.
    """
    return PersistenceError(
        "persistence_error", f"{operation} 처리 중 데이터베이스 오류가 발생했습니다.", timestamp
    )

"""exception_handler: 전역 예외 처리 핸들러 모듈.

모든 에러를 {"detail": {"error", "message", "timestamp", ...}} 형식의 JSON으로 변환합니다.
클라이언트에는 스택 트레이스를 노출하지 않습니다.
"""

import uuid
import logging
import traceback
from logging.handlers import RotatingFileHandler
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from dependencies.request_context import get_request_timestamp
from utils.exceptions import AppError


logger = logging.getLogger("api")

# 에러 전용 파일 로거 설정
error_logger = logging.getLogger("api.error")
error_logger.setLevel(logging.ERROR)

# RotatingFileHandler: 10MB 단위로 로테이션, 최대 5개 백업 파일
if not error_logger.handlers:
    error_file_handler = RotatingFileHandler(
        "server_error.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
        delay=True,
    )
    error_file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    error_logger.addHandler(error_file_handler)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """도메인 에러(ValidationError, NotFoundError 등) 처리 핸들러.

    5xx 에러(파일 저장소, DB 실패)는 추적 ID와 함께 에러 로그 파일에 기록합니다.

    Args:
        request: FastAPI Request 객체.
        exc: 발생한 AppError.

    Returns:
        에러의 상태 코드와 detail을 담은 JSON 응답.
    """
    detail = dict(exc.detail) if isinstance(exc.detail, dict) else {"error": str(exc.detail)}
    detail.setdefault("timestamp", get_request_timestamp(request))

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        tracking_id = str(uuid.uuid4())
        detail["trackingID"] = tracking_id
        cause = exc.__cause__
        logger.error(
            f"[{tracking_id}] {request.method} {request.url.path} "
            f"{detail.get('error')}: {cause or exc}"
        )
        error_logger.error(
            f"[{tracking_id}] {detail.get('error')}: {cause or exc}\n"
            f"{''.join(traceback.format_exception(exc))}"
        )

    return JSONResponse(
        status_code=exc.status_code, content={"detail": detail}, headers=exc.headers
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """전역 예외 처리 핸들러.

    처리되지 않은 모든 예외를 일관된 형식의 500 에러 응답으로 변환합니다.
    프로덕션 환경(DEBUG=False)에서는 상세 에러 정보를 숨깁니다.
    """
    from core.config import settings

    tracking_id = str(uuid.uuid4())
    timestamp = get_request_timestamp(request)

    logger.error(f"[{tracking_id}] Unhandled exception: {exc}")
    error_logger.error(
        f"[{tracking_id}] Unhandled exception: {exc}\n"
        f"{''.join(traceback.format_exception(exc))}"
    )

    detail = {
        "trackingID": tracking_id,
        "error": "internal_server_error",
        "message": "서버 내부 오류가 발생했습니다.",
        "timestamp": timestamp,
    }

    # DEBUG 모드에서만 상세 정보 포함
    if settings.DEBUG:
        detail["debug"] = str(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


def _sanitize_binary(value):
    if isinstance(value, bytes):
        return f"<binary data: {len(value)} bytes>"
    return value


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """요청 데이터 유효성 검사 예외 처리 핸들러.

    Pydantic 유효성 검사 실패 시 호출됩니다.
    업로드 파일 등 바이너리 입력은 디코딩 오류를 막기 위해 플레이스홀더로 대체합니다.
    """
    timestamp = get_request_timestamp(request)

    sanitized_errors = []
    for error in exc.errors():
        error_copy = dict(error)
        if "input" in error_copy:
            error_copy["input"] = _sanitize_binary(error_copy["input"])
        if isinstance(error_copy.get("ctx"), dict):
            error_copy["ctx"] = {
                k: _sanitize_binary(v) for k, v in error_copy["ctx"].items()
            }
        sanitized_errors.append(error_copy)

    first = sanitized_errors[0] if sanitized_errors else {}
    if first.get("type") == "missing":
        message = "모든 항목을 입력해 주세요."
    else:
        message = str(first.get("msg", "입력값이 올바르지 않습니다.")).removeprefix(
            "Value error, "
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={
            "detail": {
                "error": "validation_error",
                "message": message,
                "errors": jsonable_encoder(sanitized_errors),
                "timestamp": timestamp,
            }
        },
    )

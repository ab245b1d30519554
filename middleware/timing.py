# timing: 요청 타이밍 미들웨어
# 각 요청에 타임스탬프를 주입하고 처리 시간을 응답 헤더로 내보낸다.

import time
from datetime import datetime, timezone
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class TimingMiddleware(BaseHTTPMiddleware):
    """
    요청 타이밍 미들웨어

    요청이 들어올 때 UTC 타임스탬프를 request.state.request_time에 저장하여
    컨트롤러와 에러 응답이 같은 타임스탬프를 사용하도록 한다.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_time = datetime.now(timezone.utc)
        started = time.perf_counter()

        response = await call_next(request)

        response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.3f}"
        return response

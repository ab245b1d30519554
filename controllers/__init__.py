"""controllers: 비즈니스 로직 및 요청 핸들러 패키지.

게시글, 사용자 관련 컨트롤러 모듈을 제공합니다.
"""

from . import post_controller
from . import user_controller

__all__ = [
    "post_controller",
    "user_controller",
]

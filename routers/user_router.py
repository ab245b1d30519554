"""user_router: 사용자 관련 라우터 모듈.

회원가입, 로그인, 작성자 조회, 아바타 변경, 정보 수정 엔드포인트를 제공합니다.
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from controllers import user_controller
from dependencies.auth import get_current_user
from dependencies.storage import get_user_service
from models.user_models import User
from schemas.user_schemas import LoginRequest, RegisterRequest, UpdateUserRequest
from services.user_service import UserService


user_router = APIRouter(prefix="/v1/users", tags=["users"])
"""사용자 관련 라우터 인스턴스."""


@user_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user_data: RegisterRequest, request: Request) -> dict:
    """새 사용자를 등록합니다.

    Args:
        user_data: 이름, 이메일, 비밀번호, 비밀번호 확인.
        request: FastAPI Request 객체.

    Returns:
        생성된 사용자 정보가 포함된 응답.
    """
    return await user_controller.register(user_data, request)


@user_router.post("/login", status_code=status.HTTP_200_OK)
async def login(credentials: LoginRequest, request: Request) -> dict:
    """로그인하고 Access Token을 발급합니다."""
    return await user_controller.login(credentials, request)


@user_router.get("/", status_code=status.HTTP_200_OK)
async def get_authors(request: Request) -> dict:
    """전체 작성자 목록을 조회합니다."""
    return await user_controller.get_authors(request)


@user_router.post("/change-avatar", status_code=status.HTTP_200_OK)
async def change_avatar(
    request: Request,
    avatar: UploadFile | None = File(None, description="아바타 이미지"),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> dict:
    """현재 사용자의 아바타를 교체합니다."""
    return await user_controller.change_avatar(avatar, current_user, service, request)


@user_router.patch("/edit-user", status_code=status.HTTP_200_OK)
async def update_details(
    update_data: UpdateUserRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
) -> dict:
    """현재 사용자의 이름, 이메일, 비밀번호를 수정합니다."""
    return await user_controller.update_details(update_data, current_user, request)


@user_router.get("/{user_id}", status_code=status.HTTP_200_OK)
async def get_user(user_id: int, request: Request) -> dict:
    """사용자 ID로 사용자를 조회합니다."""
    return await user_controller.get_user(user_id, request)

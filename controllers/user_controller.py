"""user_controller: 사용자 관련 컨트롤러 모듈.

회원가입, 로그인, 작성자 조회, 아바타 변경, 정보 수정 기능을 제공합니다.
"""

from fastapi import Request, UploadFile

from dependencies.request_context import get_request_timestamp
from models.user_models import User
from schemas.common import create_response, serialize_user
from schemas.user_schemas import LoginRequest, RegisterRequest, UpdateUserRequest
from services.user_service import UserService


async def register(user_data: RegisterRequest, request: Request) -> dict:
    """새로운 사용자를 등록합니다.

    Args:
        user_data: 회원가입 정보.
        request: FastAPI Request 객체.

    Returns:
        생성된 사용자 정보가 포함된 응답 딕셔너리.

    Raises:
        HTTPException: 이메일 중복 시 409, 비밀번호 오류 시 400.
    """
    timestamp = get_request_timestamp(request)

    user = await UserService.register(user_data, timestamp)

    return create_response(
        "SIGNUP_SUCCESS",
        "회원가입에 성공했습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )


async def login(credentials: LoginRequest, request: Request) -> dict:
    """이메일과 비밀번호로 로그인합니다.

    Returns:
        access_token과 사용자 정보가 포함된 응답 딕셔너리.

    Raises:
        HTTPException: 인증 실패 시 401.
    """
    timestamp = get_request_timestamp(request)

    access_token, user = await UserService.login(
        credentials.email, credentials.password, timestamp
    )

    return create_response(
        "LOGIN_SUCCESS",
        "로그인에 성공했습니다.",
        data={
            "access_token": access_token,
            "token_type": "bearer",
            "user": {"id": user.id, "username": user.username},
        },
        timestamp=timestamp,
    )


async def get_authors(request: Request) -> dict:
    """전체 작성자 목록을 조회합니다 (비밀번호 제외)."""
    timestamp = get_request_timestamp(request)

    users = await UserService.get_users(timestamp)

    return create_response(
        "QUERY_SUCCESS",
        "작성자 목록 조회에 성공했습니다.",
        data={"users": [serialize_user(user) for user in users]},
        timestamp=timestamp,
    )


async def get_user(user_id: int, request: Request) -> dict:
    """사용자 ID로 사용자를 조회합니다.

    Raises:
        HTTPException: 사용자가 없으면 404.
    """
    timestamp = get_request_timestamp(request)

    user = await UserService.get_user(user_id, timestamp)

    return create_response(
        "QUERY_SUCCESS",
        "사용자 조회에 성공했습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )


async def change_avatar(
    avatar: UploadFile | None,
    current_user: User,
    service: UserService,
    request: Request,
) -> dict:
    """현재 사용자의 아바타를 교체합니다.

    Raises:
        HTTPException: 파일이 없거나 형식/크기가 잘못되면 422.
    """
    timestamp = get_request_timestamp(request)

    user = await service.change_avatar(current_user, avatar, timestamp)

    return create_response(
        "AVATAR_UPDATED",
        "프로필 이미지가 변경되었습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )


async def update_details(
    update_data: UpdateUserRequest, current_user: User, request: Request
) -> dict:
    """현재 사용자의 이름, 이메일, 비밀번호를 수정합니다.

    Raises:
        HTTPException: 이메일 중복 시 409, 비밀번호 검증 실패 시 422.
    """
    timestamp = get_request_timestamp(request)

    user = await UserService.update_details(current_user, update_data, timestamp)

    return create_response(
        "UPDATE_SUCCESS",
        "사용자 정보 수정에 성공했습니다.",
        data={"user": serialize_user(user)},
        timestamp=timestamp,
    )

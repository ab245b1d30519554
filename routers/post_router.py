"""post_router: 게시글 관련 라우터 모듈.

게시글 CRUD 및 작성자/카테고리별 조회 엔드포인트를 제공합니다.
"""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from controllers import post_controller
from dependencies.auth import get_current_user
from dependencies.storage import get_post_service
from models.user_models import User
from services.post_service import PostService


post_router = APIRouter(prefix="/v1/posts", tags=["posts"])
"""게시글 관련 라우터 인스턴스."""


@post_router.get("/", status_code=status.HTTP_200_OK)
async def get_posts(request: Request) -> dict:
    """전체 게시글을 최신순으로 조회합니다."""
    return await post_controller.get_posts(request)


@post_router.get("/categories/{category}", status_code=status.HTTP_200_OK)
async def get_category_posts(category: str, request: Request) -> dict:
    """카테고리별 게시글을 최신순으로 조회합니다."""
    return await post_controller.get_category_posts(category, request)


@post_router.get("/users/{author_id}", status_code=status.HTTP_200_OK)
async def get_author_posts(author_id: int, request: Request) -> dict:
    """작성자별 게시글을 최신순으로 조회합니다."""
    return await post_controller.get_author_posts(author_id, request)


@post_router.get("/{post_id}", status_code=status.HTTP_200_OK)
async def get_post(post_id: int, request: Request) -> dict:
    """게시글 하나를 조회합니다."""
    return await post_controller.get_post(post_id, request)


@post_router.post("/", status_code=status.HTTP_200_OK)
async def create_post(
    request: Request,
    title: str | None = Form(None, description="제목"),
    category: str | None = Form(None, description="카테고리"),
    description: str | None = Form(None, description="본문 (12자 이상)"),
    thumbnail: UploadFile | None = File(None, description="썸네일 이미지"),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> dict:
    """썸네일과 함께 새 게시글을 생성합니다.

    Returns:
        생성된 게시글이 포함된 응답.
    """
    return await post_controller.create_post(
        title, category, description, thumbnail, current_user, service, request
    )


@post_router.patch("/{post_id}", status_code=status.HTTP_200_OK)
async def edit_post(
    post_id: int,
    request: Request,
    title: str | None = Form(None, description="제목"),
    category: str | None = Form(None, description="카테고리"),
    description: str | None = Form(None, description="본문 (12자 이상)"),
    thumbnail: UploadFile | None = File(None, description="새 썸네일 이미지 (선택)"),
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> dict:
    """게시글을 수정합니다.

    Returns:
        수정된 게시글이 포함된 응답.
    """
    return await post_controller.edit_post(
        post_id, title, category, description, thumbnail, current_user, service, request
    )


@post_router.delete("/{post_id}", status_code=status.HTTP_200_OK)
async def delete_post(
    post_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> dict:
    """게시글과 썸네일 파일을 삭제합니다."""
    return await post_controller.delete_post(post_id, current_user, service, request)

"""post_controller: 게시글 관련 컨트롤러 모듈.

게시글 생성, 수정, 삭제, 목록/단건 조회 요청을 처리하고 표준 응답을 만듭니다.
"""

from fastapi import Request, UploadFile

from dependencies.request_context import get_request_timestamp
from models.user_models import User
from schemas.common import create_response, parse_form, serialize_post
from schemas.post_schemas import CreatePostRequest, UpdatePostRequest
from services.post_service import PostService


async def create_post(
    title: str | None,
    category: str | None,
    description: str | None,
    thumbnail: UploadFile | None,
    current_user: User,
    service: PostService,
    request: Request,
) -> dict:
    """썸네일과 함께 새 게시글을 생성합니다.

    Args:
        title: 제목 (폼 필드).
        category: 카테고리 (폼 필드).
        description: 본문 (폼 필드, 12자 이상).
        thumbnail: 썸네일 이미지 파일.
        current_user: 현재 인증된 사용자.
        service: 게시글 서비스.
        request: FastAPI Request 객체.

    Returns:
        생성된 게시글이 포함된 응답 딕셔너리.

    Raises:
        HTTPException: 입력이 잘못되면 422.
    """
    timestamp = get_request_timestamp(request)

    post_data = parse_form(
        CreatePostRequest,
        timestamp,
        title=title,
        category=category,
        description=description,
    )
    post = await service.create_post(current_user.id, post_data, thumbnail, timestamp)

    return create_response(
        "POST_CREATED",
        "게시글이 생성되었습니다.",
        data={"post": serialize_post(post)},
        timestamp=timestamp,
    )


async def edit_post(
    post_id: int,
    title: str | None,
    category: str | None,
    description: str | None,
    thumbnail: UploadFile | None,
    current_user: User,
    service: PostService,
    request: Request,
) -> dict:
    """게시글을 수정합니다. 썸네일이 전달되면 교체합니다.

    Raises:
        HTTPException: 입력 오류 422, 권한 없음 403, 게시글 없음 404.
    """
    timestamp = get_request_timestamp(request)

    post_data = parse_form(
        UpdatePostRequest,
        timestamp,
        title=title,
        category=category,
        description=description,
    )
    post = await service.edit_post(
        post_id, current_user.id, post_data, thumbnail, timestamp
    )

    return create_response(
        "POST_UPDATED",
        "게시글이 수정되었습니다.",
        data={"post": serialize_post(post)},
        timestamp=timestamp,
    )


async def delete_post(
    post_id: int, current_user: User, service: PostService, request: Request
) -> dict:
    """게시글과 썸네일을 삭제합니다.

    Raises:
        HTTPException: 권한 없음 403, 게시글 없음 404.
    """
    timestamp = get_request_timestamp(request)

    await service.delete_post(post_id, current_user.id, timestamp)

    return create_response(
        "POST_DELETED", "Post deleted successfully", timestamp=timestamp
    )


async def get_posts(request: Request) -> dict:
    """전체 게시글을 최신순으로 조회합니다."""
    timestamp = get_request_timestamp(request)

    posts = await PostService.get_posts(timestamp)

    return create_response(
        "POSTS_RETRIEVED",
        "게시글 목록 조회에 성공했습니다.",
        data={"posts": [serialize_post(post) for post in posts]},
        timestamp=timestamp,
    )


async def get_post(post_id: int, request: Request) -> dict:
    """게시글 하나를 조회합니다.

    Raises:
        HTTPException: 게시글이 없으면 404.
    """
    timestamp = get_request_timestamp(request)

    post = await PostService.get_post(post_id, timestamp)

    return create_response(
        "POST_RETRIEVED",
        "게시글 조회에 성공했습니다.",
        data={"post": serialize_post(post)},
        timestamp=timestamp,
    )


async def get_author_posts(author_id: int, request: Request) -> dict:
    """작성자별 게시글을 최신순으로 조회합니다."""
    timestamp = get_request_timestamp(request)

    posts = await PostService.get_posts_by_author(author_id, timestamp)

    return create_response(
        "POSTS_RETRIEVED",
        "작성자 게시글 조회에 성공했습니다.",
        data={"posts": [serialize_post(post) for post in posts]},
        timestamp=timestamp,
    )


async def get_category_posts(category: str, request: Request) -> dict:
    """카테고리별 게시글을 최신순으로 조회합니다.

    Raises:
        HTTPException: 해당 카테고리에 게시글이 없으면 404.
    """
    timestamp = get_request_timestamp(request)

    posts = await PostService.get_posts_by_category(category, timestamp)

    return create_response(
        "POSTS_RETRIEVED",
        "카테고리 게시글 조회에 성공했습니다.",
        data={"posts": [serialize_post(post) for post in posts]},
        timestamp=timestamp,
    )

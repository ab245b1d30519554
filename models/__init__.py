"""models: 데이터 클래스 및 데이터 관리 함수 패키지.

사용자, 게시글 데이터 모델과 MySQL 데이터베이스 관리 함수를 제공합니다.
"""

from .user_models import (
    User,
    get_user_by_id,
    get_user_by_email,
    get_users,
    create_user,
    update_user_details,
    update_avatar,
    change_post_count,
)

from .post_models import (
    Post,
    get_post_by_id,
    get_posts,
    get_posts_by_author,
    get_posts_by_category,
    create_post,
    update_post,
    delete_post,
    restore_post,
)

__all__ = [
    # 사용자 모델
    "User",
    "get_user_by_id",
    "get_user_by_email",
    "get_users",
    "create_user",
    "update_user_details",
    "update_avatar",
    "change_post_count",
    # 게시글 모델
    "Post",
    "get_post_by_id",
    "get_posts",
    "get_posts_by_author",
    "get_posts_by_category",
    "create_post",
    "update_post",
    "delete_post",
    "restore_post",
]

"""post_models: 게시글 관련 데이터 모델 및 함수 모듈.

게시글 데이터 클래스와 MySQL 데이터베이스를 관리하는 함수들을 제공합니다.
목록 조회는 모두 최신순(created_at DESC)으로 정렬됩니다.
"""

from dataclasses import dataclass
from datetime import datetime

from database.connection import get_connection, transactional


@dataclass
class Post:
    """게시글 데이터 클래스.

    Attributes:
        id: 게시글 고유 식별자.
        title: 제목.
        category: 카테고리.
        description: 본문.
        thumbnail: 업로드 디렉토리 내 썸네일 파일명.
        author_id: 작성자 ID.
        created_at: 생성 시간.
        updated_at: 수정 시간.
    """

    id: int
    title: str
    category: str
    description: str
    thumbnail: str
    author_id: int
    created_at: datetime
    updated_at: datetime | None = None


POST_SELECT_FIELDS = (
    "id, title, category, description, thumbnail, author_id, created_at, updated_at"
)

_LATEST_FIRST = "ORDER BY created_at DESC, id DESC"


def _row_to_post(row: tuple) -> Post:
    """데이터베이스 행을 Post 객체로 변환합니다."""
    return Post(
        id=row[0],
        title=row[1],
        category=row[2],
        description=row[3],
        thumbnail=row[4],
        author_id=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


async def _fetch_posts(where: str = "", params: tuple = ()) -> list[Post]:
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {POST_SELECT_FIELDS} FROM post {where} {_LATEST_FIRST}",
                params,
            )
            rows = await cur.fetchall()
            return [_row_to_post(row) for row in rows]


async def get_post_by_id(post_id: int) -> Post | None:
    """ID로 게시글을 조회합니다.

    Returns:
        게시글 객체, 없으면 None.
    """
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {POST_SELECT_FIELDS} FROM post WHERE id = %s",
                (post_id,),
            )
            row = await cur.fetchone()
            return _row_to_post(row) if row else None


async def get_posts() -> list[Post]:
    """전체 게시글을 최신순으로 조회합니다."""
    return await _fetch_posts()


async def get_posts_by_author(author_id: int) -> list[Post]:
    """작성자의 게시글을 최신순으로 조회합니다."""
    return await _fetch_posts("WHERE author_id = %s", (author_id,))


async def get_posts_by_category(category: str) -> list[Post]:
    """카테고리의 게시글을 최신순으로 조회합니다."""
    return await _fetch_posts("WHERE category = %s", (category,))


async def create_post(
    author_id: int, title: str, category: str, description: str, thumbnail: str
) -> Post:
    """새 게시글을 생성합니다.

    Args:
        author_id: 작성자 ID.
        title: 제목.
        category: 카테고리.
        description: 본문.
        thumbnail: 저장된 썸네일 파일명.

    Returns:
        생성된 게시글 객체.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO post (title, category, description, thumbnail, author_id)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (title, category, description, thumbnail, author_id),
        )
        post_id = cur.lastrowid

        await cur.execute(
            f"SELECT {POST_SELECT_FIELDS} FROM post WHERE id = %s",
            (post_id,),
        )
        row = await cur.fetchone()
        if not row:
            raise RuntimeError(f"Post 생성 직후 조회 실패: post_id={post_id}")
        return _row_to_post(row)


async def update_post(
    post_id: int,
    title: str,
    category: str,
    description: str,
    thumbnail: str | None = None,
) -> Post | None:
    """게시글을 수정합니다.

    thumbnail이 None이면 기존 썸네일을 유지합니다.

    Returns:
        수정된 게시글 객체, 없으면 None.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE post
            SET title = %s, category = %s, description = %s,
                thumbnail = COALESCE(%s, thumbnail)
            WHERE id = %s
            """,
            (title, category, description, thumbnail, post_id),
        )

        # 같은 트랜잭션 내에서 수정된 게시글 조회
        await cur.execute(
            f"SELECT {POST_SELECT_FIELDS} FROM post WHERE id = %s",
            (post_id,),
        )
        row = await cur.fetchone()
        return _row_to_post(row) if row else None


async def delete_post(post_id: int) -> bool:
    """게시글 레코드를 삭제합니다.

    Returns:
        삭제 성공 여부.
    """
    async with transactional() as cur:
        await cur.execute("DELETE FROM post WHERE id = %s", (post_id,))
        return cur.rowcount > 0


async def restore_post(post: Post) -> Post:
    """삭제된 게시글 레코드를 같은 ID로 다시 삽입합니다.

    게시글 삭제 이후 단계가 실패했을 때 삭제를 되돌리는 데 사용합니다.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO post
                (id, title, category, description, thumbnail, author_id,
                 created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """,
            (
                post.id,
                post.title,
                post.category,
                post.description,
                post.thumbnail,
                post.author_id,
                post.created_at,
                post.updated_at,
            ),
        )
    return post

"""user_models: 사용자 관련 데이터 모델 및 함수 모듈.

사용자 데이터 클래스와 MySQL 데이터베이스를 관리하는 함수들을 제공합니다.
"""

from dataclasses import dataclass
from datetime import datetime

from database.connection import get_connection, transactional


@dataclass(frozen=True)
class User:
    """사용자 데이터 클래스.

    Attributes:
        id: 사용자 고유 식별자.
        username: 표시 이름.
        email: 이메일 주소 (소문자로 정규화).
        password: bcrypt 해시.
        avatar: 업로드 디렉토리 내 아바타 파일명.
        posts: 작성한 게시글 수.
        created_at: 생성 시간.
        updated_at: 수정 시간.
    """

    id: int
    username: str
    email: str
    password: str
    avatar: str | None = None
    posts: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


# 공통으로 사용되는 SELECT 필드
USER_SELECT_FIELDS = (
    "id, username, email, password, avatar, posts, created_at, updated_at"
)


def _row_to_user(row: tuple) -> User:
    """데이터베이스 행을 User 객체로 변환합니다.

    Args:
        row: (id, username, email, password, avatar, posts, created_at, updated_at)
    """
    return User(
        id=row[0],
        username=row[1],
        email=row[2],
        password=row[3],
        avatar=row[4],
        posts=row[5],
        created_at=row[6],
        updated_at=row[7],
    )


async def get_user_by_id(user_id: int) -> User | None:
    """ID로 사용자를 조회합니다.

    Returns:
        사용자 객체, 없으면 None.
    """
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {USER_SELECT_FIELDS} FROM user WHERE id = %s",
                (user_id,),
            )
            row = await cur.fetchone()
            return _row_to_user(row) if row else None


async def get_user_by_email(email: str) -> User | None:
    """이메일로 사용자를 조회합니다 (대소문자 무시).

    Returns:
        사용자 객체, 없으면 None.
    """
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {USER_SELECT_FIELDS} FROM user WHERE email = %s",
                (email.lower(),),
            )
            row = await cur.fetchone()
            return _row_to_user(row) if row else None


async def get_users() -> list[User]:
    """모든 사용자(작성자)를 가입순으로 조회합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {USER_SELECT_FIELDS} FROM user ORDER BY created_at, id"
            )
            rows = await cur.fetchall()
            return [_row_to_user(row) for row in rows]


async def create_user(username: str, email: str, password: str) -> User:
    """새 사용자를 추가합니다.

    이메일 중복은 UNIQUE 인덱스가 판단하며,
    동시에 같은 이메일로 가입하면 한쪽은 IntegrityError(1062)가 발생합니다.

    Args:
        username: 표시 이름.
        email: 이메일 주소 (소문자로 저장).
        password: bcrypt 해시.

    Returns:
        생성된 사용자 객체.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            INSERT INTO user (username, email, password)
            VALUES (%s, %s, %s)
            """,
            (username, email.lower(), password),
        )
        user_id = cur.lastrowid

        await cur.execute(
            f"SELECT {USER_SELECT_FIELDS} FROM user WHERE id = %s",
            (user_id,),
        )
        row = await cur.fetchone()
        if not row:
            raise RuntimeError(f"User 생성 직후 조회 실패: user_id={user_id}")
        return _row_to_user(row)


async def update_user_details(
    user_id: int, username: str, email: str, password: str
) -> User | None:
    """사용자 이름, 이메일, 비밀번호를 변경합니다.

    Returns:
        수정된 사용자 객체, 사용자가 없으면 None.
    """
    async with transactional() as cur:
        await cur.execute(
            """
            UPDATE user
            SET username = %s, email = %s, password = %s
            WHERE id = %s
            """,
            (username, email.lower(), password, user_id),
        )

        # 같은 트랜잭션 내에서 수정된 사용자 조회
        await cur.execute(
            f"SELECT {USER_SELECT_FIELDS} FROM user WHERE id = %s",
            (user_id,),
        )
        row = await cur.fetchone()
        return _row_to_user(row) if row else None


async def update_avatar(user_id: int, avatar: str | None) -> User | None:
    """사용자의 아바타 파일명을 교체합니다.

    Returns:
        수정된 사용자 객체, 사용자가 없으면 None.
    """
    async with transactional() as cur:
        await cur.execute(
            "UPDATE user SET avatar = %s WHERE id = %s",
            (avatar, user_id),
        )
        await cur.execute(
            f"SELECT {USER_SELECT_FIELDS} FROM user WHERE id = %s",
            (user_id,),
        )
        row = await cur.fetchone()
        return _row_to_user(row) if row else None


async def change_post_count(user_id: int, delta: int) -> bool:
    """사용자의 게시글 수를 원자적으로 증감합니다.

    읽고-수정하고-쓰는 방식 대신 단일 UPDATE 문으로 처리하므로
    동시 생성/삭제에도 값이 어긋나지 않습니다. 0 미만으로 내려가지 않습니다.

    Args:
        user_id: 사용자 ID.
        delta: 증감량 (+1 생성, -1 삭제).

    Returns:
        값이 실제로 변경되었으면 True (사용자가 없거나 이미 0이면 False).
    """
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE user
                SET posts = GREATEST(CAST(posts AS SIGNED) + %s, 0)
                WHERE id = %s
                """,
                (delta, user_id),
            )
            return cur.rowcount > 0

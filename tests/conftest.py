import sys
import os
import tempfile
from datetime import datetime

# 설정 로드 전에 테스트용 환경 변수 주입
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only-0123456789")
os.environ.setdefault("DB_HOST", "127.0.0.1")
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_NAME", "blog_test")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="blog-uploads-"))

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from fastapi import UploadFile
from httpx import AsyncClient, ASGITransport
from faker import Faker
from pymysql.err import MySQLError

from main import app
from database.connection import get_connection, init_db, close_db
from dependencies.auth import get_current_user
from dependencies.storage import get_upload_store
from models.post_models import Post
from models.user_models import User
from utils.password import hash_password
from utils.storage import UploadStore

# 최소한의 유효한 이미지 시그니처
JPEG_BYTES = b"\xFF\xD8\xFF\xE0" + b"\x00" * 64
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

PASSWORD = "Password123!"
_PASSWORD_HASH = hash_password(PASSWORD)

NOW = datetime(2024, 1, 1, 12, 0, 0)


def make_upload(filename: str | None, content: bytes) -> MagicMock:
    """UploadFile 목 객체를 생성합니다."""
    file = MagicMock(spec=UploadFile)
    file.filename = filename
    file.read = AsyncMock(return_value=content)
    return file


def make_user(**overrides) -> User:
    values = {
        "id": 1,
        "username": "writer",
        "email": "writer@example.com",
        "password": _PASSWORD_HASH,
        "avatar": None,
        "posts": 0,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return User(**values)


def make_post(**overrides) -> Post:
    values = {
        "id": 10,
        "title": "첫 번째 글",
        "category": "tech",
        "description": "열두 글자가 넘는 게시글 본문입니다.",
        "thumbnail": "cat0123.jpg",
        "author_id": 1,
        "created_at": NOW,
        "updated_at": NOW,
    }
    values.update(overrides)
    return Post(**values)


@pytest.fixture
def fake():
    return Faker("ko_KR")


@pytest.fixture
def upload_dir(tmp_path):
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def store(upload_dir):
    return UploadStore(upload_dir)


@pytest.fixture
def user():
    return make_user()


@pytest_asyncio.fixture
async def client(store):
    """API 테스트를 위한 Async Client (업로드 디렉토리는 테스트별 임시 경로)"""
    app.dependency_overrides[get_upload_store] = lambda: store
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authorized_client(client, user):
    """인증된 사용자로 요청하는 클라이언트와 사용자 정보 반환."""
    app.dependency_overrides[get_current_user] = lambda: user
    yield client, user


_SCHEMA_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "database", "schema.sql"
)


async def create_schema() -> None:
    """테스트용 헬퍼: schema.sql의 테이블을 생성합니다."""
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        statements = [s.strip() for s in f.read().split(";")]
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            for statement in statements:
                if statement:
                    await cur.execute(statement)


async def clear_all_data() -> None:
    """테스트용 헬퍼: 모든 데이터를 삭제합니다."""
    async with get_connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SET FOREIGN_KEY_CHECKS = 0")
            await cur.execute("TRUNCATE TABLE post")
            await cur.execute("TRUNCATE TABLE user")
            await cur.execute("SET FOREIGN_KEY_CHECKS = 1")


@pytest_asyncio.fixture(scope="function")
async def db():
    """각 테스트 함수 실행 전 데이터 초기화 및 DB 연결 관리.

    DB_HOST의 MySQL에 연결할 수 없으면 테스트를 건너뜁니다.
    """
    try:
        await init_db()
    except (MySQLError, OSError) as e:
        pytest.skip(f"MySQL에 연결할 수 없습니다: {e}")
    try:
        await create_schema()
        await clear_all_data()
        yield
    finally:
        await close_db()

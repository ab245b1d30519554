"""MySQL-backed tests for the models layer and the post workflows.

db 픽스처가 schema.sql로 테이블을 만들고 매 테스트마다 데이터를 비웁니다.
"""

import asyncio

import pytest
from pymysql.err import IntegrityError

from conftest import JPEG_BYTES, PASSWORD, make_upload
from models import post_models, user_models
from schemas.post_schemas import CreatePostRequest
from schemas.user_schemas import RegisterRequest
from services.post_service import PostService
from services.user_service import UserService
from utils.exceptions import ConflictError, NotFoundError


async def _create_author(email: str = "author@example.com") -> user_models.User:
    return await user_models.create_user("author", email, "hashed-password")


async def _create_post(author_id: int, thumbnail: str = "cat0123.jpg") -> post_models.Post:
    return await post_models.create_post(
        author_id=author_id,
        title="첫 번째 글",
        category="tech",
        description="열두 글자가 넘는 게시글 본문입니다.",
        thumbnail=thumbnail,
    )


class TestPostCounter:
    @pytest.mark.asyncio
    async def test_increment_and_decrement(self, db):
        author = await _create_author()

        assert await user_models.change_post_count(author.id, 1)
        assert await user_models.change_post_count(author.id, 1)
        assert await user_models.change_post_count(author.id, -1)

        assert (await user_models.get_user_by_id(author.id)).posts == 1

    @pytest.mark.asyncio
    async def test_never_goes_below_zero(self, db):
        author = await _create_author()

        changed = await user_models.change_post_count(author.id, -1)

        assert changed is False
        assert (await user_models.get_user_by_id(author.id)).posts == 0

    @pytest.mark.asyncio
    async def test_concurrent_increments_are_not_lost(self, db):
        author = await _create_author()

        await asyncio.gather(
            *(user_models.change_post_count(author.id, 1) for _ in range(20))
        )

        assert (await user_models.get_user_by_id(author.id)).posts == 20


class TestPostRecords:
    @pytest.mark.asyncio
    async def test_update_without_thumbnail_keeps_old_file_name(self, db):
        author = await _create_author()
        post = await _create_post(author.id)

        updated = await post_models.update_post(
            post.id,
            title="수정된 제목",
            category="life",
            description="수정된 본문도 열두 글자를 넘습니다.",
        )

        assert updated.title == "수정된 제목"
        assert updated.thumbnail == "cat0123.jpg"

    @pytest.mark.asyncio
    async def test_update_with_thumbnail_replaces_file_name(self, db):
        author = await _create_author()
        post = await _create_post(author.id)

        updated = await post_models.update_post(
            post.id,
            title=post.title,
            category=post.category,
            description=post.description,
            thumbnail="dog4567.png",
        )

        assert updated.thumbnail == "dog4567.png"

    @pytest.mark.asyncio
    async def test_deleted_post_is_not_found_until_restored(self, db):
        author = await _create_author()
        post = await _create_post(author.id)

        assert await post_models.delete_post(post.id) is True
        assert await post_models.get_post_by_id(post.id) is None
        assert await post_models.delete_post(post.id) is False

        await post_models.restore_post(post)

        restored = await post_models.get_post_by_id(post.id)
        assert restored.id == post.id
        assert restored.title == post.title
        assert restored.thumbnail == post.thumbnail
        assert restored.author_id == author.id
        assert restored.created_at == post.created_at

    @pytest.mark.asyncio
    async def test_lists_are_latest_first(self, db):
        author = await _create_author()
        first = await _create_post(author.id, "a.jpg")
        second = await _create_post(author.id, "b.jpg")

        posts = await post_models.get_posts_by_author(author.id)

        assert [p.id for p in posts] == [second.id, first.id]


class TestUniqueEmail:
    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected_by_index(self, db):
        await _create_author("same@example.com")

        with pytest.raises(IntegrityError) as exc_info:
            await _create_author("SAME@example.com")

        assert exc_info.value.args[0] == 1062

    @pytest.mark.asyncio
    async def test_concurrent_registration_one_wins(self, db):
        request = RegisterRequest(
            username="writer",
            email="race@example.com",
            password=PASSWORD,
            password2=PASSWORD,
        )

        results = await asyncio.gather(
            UserService.register(request),
            UserService.register(request),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConflictError)]
        users = [r for r in results if isinstance(r, user_models.User)]
        assert len(users) == 1
        assert len(conflicts) == 1
        assert conflicts[0].status_code == 409


class TestPostWorkflowWithDatabase:
    @pytest.mark.asyncio
    async def test_create_then_delete(self, db, store, upload_dir):
        author = await _create_author()
        service = PostService(store, thumbnail_max_bytes=2_000_000)
        post_data = CreatePostRequest(
            title="첫 번째 글",
            category="tech",
            description="열두 글자가 넘는 게시글 본문입니다.",
        )

        post = await service.create_post(
            author.id, post_data, make_upload("cat.jpg", JPEG_BYTES)
        )

        assert (await user_models.get_user_by_id(author.id)).posts == 1
        assert (upload_dir / post.thumbnail).exists()

        await service.delete_post(post.id, author.id)

        with pytest.raises(NotFoundError):
            await PostService.get_post(post.id)
        assert (await user_models.get_user_by_id(author.id)).posts == 0
        assert list(upload_dir.iterdir()) == []

"""Tests for PostService create/edit/delete workflows and compensation."""

import pytest
from unittest.mock import AsyncMock, patch
from pymysql.err import OperationalError

from conftest import JPEG_BYTES, NOW, PNG_BYTES, make_post, make_upload
from models.post_models import Post
from schemas.post_schemas import CreatePostRequest, UpdatePostRequest
from services.post_service import PostService
from utils.exceptions import (
    FileStorageError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

AUTHOR_ID = 1


@pytest.fixture
def service(store):
    return PostService(store, thumbnail_max_bytes=2_000_000)


@pytest.fixture
def post_data():
    return CreatePostRequest(
        title="첫 번째 글",
        category="tech",
        description="열두 글자가 넘는 게시글 본문입니다.",
    )


async def _created_post(**kwargs) -> Post:
    return Post(id=10, created_at=NOW, updated_at=NOW, **kwargs)


class TestCreatePost:
    @pytest.mark.asyncio
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_success(self, mock_create, mock_count, service, post_data, upload_dir):
        mock_create.side_effect = _created_post
        mock_count.return_value = True

        post = await service.create_post(
            AUTHOR_ID, post_data, make_upload("cat.photo.jpg", JPEG_BYTES)
        )

        assert post.thumbnail.startswith("cat")
        assert post.thumbnail.endswith(".jpg")
        assert (upload_dir / post.thumbnail).read_bytes() == JPEG_BYTES
        assert mock_create.await_args.kwargs["thumbnail"] == post.thumbnail
        mock_count.assert_awaited_once_with(AUTHOR_ID, 1)

    @pytest.mark.asyncio
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_persist_failure_removes_file(
        self, mock_create, mock_count, service, post_data, upload_dir
    ):
        mock_create.side_effect = OperationalError(2013, "Lost connection")

        with pytest.raises(PersistenceError) as exc_info:
            await service.create_post(
                AUTHOR_ID, post_data, make_upload("cat.jpg", JPEG_BYTES)
            )

        assert exc_info.value.status_code == 500
        assert list(upload_dir.iterdir()) == []
        mock_count.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_counter_failure_removes_record_and_file(
        self, mock_create, mock_count, mock_delete, service, post_data, upload_dir
    ):
        mock_create.side_effect = _created_post
        mock_count.side_effect = OperationalError(1205, "Lock wait timeout")

        with pytest.raises(PersistenceError):
            await service.create_post(
                AUTHOR_ID, post_data, make_upload("cat.jpg", JPEG_BYTES)
            )

        mock_delete.assert_awaited_once_with(10)
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_missing_thumbnail(self, mock_create, service, post_data, upload_dir):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_post(AUTHOR_ID, post_data, None)

        assert exc_info.value.status_code == 422
        assert exc_info.value.detail["error"] == "missing_attachment"
        mock_create.assert_not_awaited()
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_oversized_thumbnail(self, mock_create, service, post_data, upload_dir):
        content = JPEG_BYTES[:4] + b"\x00" * 2_000_000

        with pytest.raises(ValidationError) as exc_info:
            await service.create_post(AUTHOR_ID, post_data, make_upload("big.jpg", content))

        assert exc_info.value.detail["error"] == "file_too_large"
        mock_create.assert_not_awaited()
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    @patch("models.post_models.create_post", new_callable=AsyncMock)
    async def test_write_failure_skips_persist(self, mock_create, service, post_data):
        with patch.object(
            service.store, "write", side_effect=FileStorageError("file_save_error")
        ):
            with pytest.raises(FileStorageError):
                await service.create_post(
                    AUTHOR_ID, post_data, make_upload("cat.jpg", JPEG_BYTES)
                )

        mock_create.assert_not_awaited()


class TestEditPost:
    @pytest.fixture
    def update_data(self):
        return UpdatePostRequest(
            title="수정된 제목",
            category="life",
            description="수정된 본문도 열두 글자를 넘습니다.",
        )

    @pytest.mark.asyncio
    @patch("models.post_models.update_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_edit_without_thumbnail_keeps_file(
        self, mock_get, mock_update, service, update_data, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()
        mock_update.return_value = make_post(title="수정된 제목")

        post = await service.edit_post(10, AUTHOR_ID, update_data)

        assert post.title == "수정된 제목"
        assert "thumbnail" not in mock_update.await_args.kwargs
        assert (upload_dir / "cat0123.jpg").exists()

    @pytest.mark.asyncio
    @patch("models.post_models.update_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_replace_thumbnail_deletes_old_file(
        self, mock_get, mock_update, service, update_data, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()

        async def _updated(post_id, **kwargs):
            return make_post(**kwargs)

        mock_update.side_effect = _updated

        post = await service.edit_post(
            10, AUTHOR_ID, update_data, make_upload("dog.png", PNG_BYTES)
        )

        assert post.thumbnail != "cat0123.jpg"
        assert post.thumbnail.startswith("dog")
        assert [p.name for p in upload_dir.iterdir()] == [post.thumbnail]

    @pytest.mark.asyncio
    @patch("models.post_models.update_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_replace_tolerates_missing_old_file(
        self, mock_get, mock_update, service, update_data, upload_dir
    ):
        mock_get.return_value = make_post(thumbnail="gone.jpg")

        async def _updated(post_id, **kwargs):
            return make_post(**kwargs)

        mock_update.side_effect = _updated

        post = await service.edit_post(
            10, AUTHOR_ID, update_data, make_upload("dog.png", PNG_BYTES)
        )

        assert (upload_dir / post.thumbnail).exists()

    @pytest.mark.asyncio
    @patch("models.post_models.update_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_replace_persist_failure_keeps_old_file(
        self, mock_get, mock_update, service, update_data, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()
        mock_update.side_effect = OperationalError(2013, "Lost connection")

        with pytest.raises(PersistenceError):
            await service.edit_post(
                10, AUTHOR_ID, update_data, make_upload("dog.png", PNG_BYTES)
            )

        assert [p.name for p in upload_dir.iterdir()] == ["cat0123.jpg"]

    @pytest.mark.asyncio
    @patch("models.post_models.update_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_edit_by_other_user_forbidden(
        self, mock_get, mock_update, service, update_data
    ):
        mock_get.return_value = make_post(author_id=99)

        with pytest.raises(ForbiddenError) as exc_info:
            await service.edit_post(10, AUTHOR_ID, update_data)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["error"] == "not_authorized_to_edit"
        mock_update.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_edit_missing_post(self, mock_get, service, update_data):
        mock_get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await service.edit_post(404, AUTHOR_ID, update_data)

        assert exc_info.value.detail["error"] == "post_not_found"


class TestDeletePost:
    @pytest.mark.asyncio
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_success_removes_file_and_decrements(
        self, mock_get, mock_delete, mock_count, service, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()
        mock_delete.return_value = True
        mock_count.return_value = True

        await service.delete_post(10, AUTHOR_ID)

        assert list(upload_dir.iterdir()) == []
        mock_delete.assert_awaited_once_with(10)
        mock_count.assert_awaited_once_with(AUTHOR_ID, -1)

    @pytest.mark.asyncio
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_missing_file_is_not_fatal(
        self, mock_get, mock_delete, mock_count, service
    ):
        mock_get.return_value = make_post(thumbnail="gone.jpg")
        mock_delete.return_value = True

        await service.delete_post(10, AUTHOR_ID)

        mock_delete.assert_awaited_once_with(10)
        mock_count.assert_awaited_once_with(AUTHOR_ID, -1)

    @pytest.mark.asyncio
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_other_user_forbidden(
        self, mock_get, mock_delete, service, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post(author_id=99)

        with pytest.raises(ForbiddenError) as exc_info:
            await service.delete_post(10, AUTHOR_ID)

        assert exc_info.value.detail["error"] == "not_authorized_to_delete"
        mock_delete.assert_not_awaited()
        assert (upload_dir / "cat0123.jpg").exists()

    @pytest.mark.asyncio
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_record_delete_failure_restores_file(
        self, mock_get, mock_delete, service, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()
        mock_delete.side_effect = OperationalError(2013, "Lost connection")

        with pytest.raises(PersistenceError):
            await service.delete_post(10, AUTHOR_ID)

        assert [p.name for p in upload_dir.iterdir()] == ["cat0123.jpg"]

    @pytest.mark.asyncio
    @patch("models.post_models.restore_post", new_callable=AsyncMock)
    @patch("models.user_models.change_post_count", new_callable=AsyncMock)
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_counter_failure_restores_record_and_file(
        self, mock_get, mock_delete, mock_count, mock_restore, service, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        post = make_post()
        mock_get.return_value = post
        mock_delete.return_value = True
        mock_count.side_effect = OperationalError(1205, "Lock wait timeout")

        with pytest.raises(PersistenceError):
            await service.delete_post(10, AUTHOR_ID)

        mock_restore.assert_awaited_once_with(post)
        assert (upload_dir / "cat0123.jpg").read_bytes() == JPEG_BYTES

    @pytest.mark.asyncio
    @patch("models.post_models.delete_post", new_callable=AsyncMock)
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_concurrently_deleted_post(
        self, mock_get, mock_delete, service, store, upload_dir
    ):
        await store.write(JPEG_BYTES, "cat0123.jpg")
        mock_get.return_value = make_post()
        mock_delete.return_value = False

        with pytest.raises(NotFoundError):
            await service.delete_post(10, AUTHOR_ID)

        assert (upload_dir / "cat0123.jpg").exists()


class TestQueries:
    @pytest.mark.asyncio
    @patch("models.post_models.get_posts_by_category", new_callable=AsyncMock)
    async def test_empty_category_not_found(self, mock_by_category):
        mock_by_category.return_value = []

        with pytest.raises(NotFoundError) as exc_info:
            await PostService.get_posts_by_category("nothing")

        assert exc_info.value.detail["error"] == "posts_not_found"

    @pytest.mark.asyncio
    @patch("models.post_models.get_posts_by_author", new_callable=AsyncMock)
    async def test_author_without_posts_returns_empty(self, mock_by_author):
        mock_by_author.return_value = []

        assert await PostService.get_posts_by_author(5) == []

    @pytest.mark.asyncio
    @patch("models.post_models.get_post_by_id", new_callable=AsyncMock)
    async def test_missing_post(self, mock_get):
        mock_get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await PostService.get_post(404)

        assert exc_info.value.status_code == 404

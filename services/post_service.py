"""post_service: 게시글 관련 비즈니스 로직을 처리하는 서비스.

썸네일 파일과 게시글 레코드, 작성자의 게시글 수를 함께 변경하는 작업은
AttachmentWorkflow로 실행하여 중간 단계 실패 시 완료된 단계를 되돌립니다.
"""

import logging

from fastapi import UploadFile

from core.config import settings
from models import post_models, user_models
from models.post_models import Post
from schemas.post_schemas import CreatePostRequest, UpdatePostRequest
from services.attachment_workflow import AttachmentWorkflow, WorkflowState, persist
from utils.exceptions import FileStorageError, forbidden_error, not_found_error
from utils.file_validators import read_attachment
from utils.storage import UploadStore, generate_unique_filename

logger = logging.getLogger(__name__)

THUMBNAIL_SLOT = "thumbnail"


class PostService:
    """게시글 관리 서비스.

    Args:
        store: 썸네일 파일을 저장할 업로드 저장소.
        thumbnail_max_bytes: 썸네일 최대 크기 (바이트).
    """

    def __init__(self, store: UploadStore, thumbnail_max_bytes: int | None = None):
        self.store = store
        self.thumbnail_max_bytes = thumbnail_max_bytes or settings.THUMBNAIL_MAX_BYTES

    # ============ 조회 ============

    @staticmethod
    async def get_posts(timestamp: str | None = None) -> list[Post]:
        """전체 게시글을 최신순으로 조회합니다."""
        return await persist("get_posts", post_models.get_posts(), timestamp)

    @staticmethod
    async def get_post(post_id: int, timestamp: str | None = None) -> Post:
        """게시글 하나를 조회합니다.

        Raises:
            NotFoundError: 게시글이 없으면 404.
        """
        post = await persist("get_post", post_models.get_post_by_id(post_id), timestamp)
        if not post:
            raise not_found_error("post", timestamp, "게시글을 찾을 수 없습니다.")
        return post

    @staticmethod
    async def get_posts_by_author(author_id: int, timestamp: str | None = None) -> list[Post]:
        """작성자별 게시글을 최신순으로 조회합니다. 결과가 없으면 빈 목록."""
        return await persist(
            "get_posts_by_author", post_models.get_posts_by_author(author_id), timestamp
        )

    @staticmethod
    async def get_posts_by_category(category: str, timestamp: str | None = None) -> list[Post]:
        """카테고리별 게시글을 최신순으로 조회합니다.

        Raises:
            NotFoundError: 카테고리에 게시글이 하나도 없으면 404.
        """
        posts = await persist(
            "get_posts_by_category", post_models.get_posts_by_category(category), timestamp
        )
        if not posts:
            raise not_found_error(
                "posts", timestamp, "해당 카테고리에 게시글이 없습니다."
            )
        return posts

    # ============ 생성 ============

    async def create_post(
        self,
        author_id: int,
        post_data: CreatePostRequest,
        thumbnail: UploadFile | None,
        timestamp: str | None = None,
    ) -> Post:
        """썸네일과 함께 게시글을 생성합니다.

        VALIDATING -> WRITING_FILE -> PERSISTING_ENTITY -> UPDATING_OWNER_COUNTER
        순서로 진행되며, 실패 시 저장한 파일과 레코드를 삭제합니다.

        Raises:
            ValidationError: 썸네일이 없거나 형식/크기가 잘못된 경우 (422).
            FileStorageError: 파일 저장 실패 (500).
            PersistenceError: DB 작업 실패 (500).
        """
        async with AttachmentWorkflow("create_post") as wf:
            attachment = await read_attachment(
                thumbnail, THUMBNAIL_SLOT, self.thumbnail_max_bytes, timestamp
            )
            filename = generate_unique_filename(attachment.filename)

            await wf.step(
                WorkflowState.WRITING_FILE,
                lambda: self.store.write(attachment.content, filename),
                compensate=lambda _: self.store.delete(filename, missing_ok=True),
            )
            post = await wf.step(
                WorkflowState.PERSISTING_ENTITY,
                lambda: persist(
                    "create_post",
                    post_models.create_post(
                        author_id=author_id,
                        title=post_data.title,
                        category=post_data.category,
                        description=post_data.description,
                        thumbnail=filename,
                    ),
                    timestamp,
                ),
                compensate=lambda created: post_models.delete_post(created.id),
            )
            await wf.step(
                WorkflowState.UPDATING_OWNER_COUNTER,
                lambda: persist(
                    "increment_post_count",
                    user_models.change_post_count(author_id, 1),
                    timestamp,
                ),
            )

        logger.info("게시글 생성: post_id=%s author_id=%s", post.id, author_id)
        return post

    # ============ 수정 ============

    async def _get_own_post(
        self, post_id: int, user_id: int, action: str, timestamp: str | None
    ) -> Post:
        post = await self.get_post(post_id, timestamp)
        if post.author_id != user_id:
            raise forbidden_error(
                action,
                timestamp,
                "게시글 작성자만 수정/삭제할 수 있습니다.",
            )
        return post

    async def edit_post(
        self,
        post_id: int,
        user_id: int,
        post_data: UpdatePostRequest,
        thumbnail: UploadFile | None = None,
        timestamp: str | None = None,
    ) -> Post:
        """게시글을 수정합니다. 새 썸네일이 있으면 기존 파일을 교체합니다.

        썸네일 교체는 WRITING_FILE -> PERSISTING_ENTITY -> DELETING_OLD_FILE
        순서로 진행됩니다. 기존 파일 삭제는 실패해도 수정 결과에 영향이 없습니다.

        Raises:
            NotFoundError: 게시글이 없으면 404.
            ForbiddenError: 작성자가 아니면 403.
            ValidationError: 새 썸네일이 잘못된 경우 422.
        """
        post = await self._get_own_post(post_id, user_id, "edit", timestamp)

        if thumbnail is None:
            updated = await persist(
                "update_post",
                post_models.update_post(
                    post_id,
                    title=post_data.title,
                    category=post_data.category,
                    description=post_data.description,
                ),
                timestamp,
            )
        else:
            updated = await self._replace_thumbnail(post, post_data, thumbnail, timestamp)

        if not updated:
            raise not_found_error("post", timestamp, "게시글을 찾을 수 없습니다.")
        return updated

    async def _replace_thumbnail(
        self,
        post: Post,
        post_data: UpdatePostRequest,
        thumbnail: UploadFile,
        timestamp: str | None,
    ) -> Post | None:
        async with AttachmentWorkflow("replace_thumbnail") as wf:
            attachment = await read_attachment(
                thumbnail, THUMBNAIL_SLOT, self.thumbnail_max_bytes, timestamp
            )
            filename = generate_unique_filename(attachment.filename)

            await wf.step(
                WorkflowState.WRITING_FILE,
                lambda: self.store.write(attachment.content, filename),
                compensate=lambda _: self.store.delete(filename, missing_ok=True),
            )
            updated = await wf.step(
                WorkflowState.PERSISTING_ENTITY,
                lambda: persist(
                    "update_post",
                    post_models.update_post(
                        post.id,
                        title=post_data.title,
                        category=post_data.category,
                        description=post_data.description,
                        thumbnail=filename,
                    ),
                    timestamp,
                ),
            )
            if updated is None:
                # 수정 도중 게시글이 삭제된 경우: 새 파일은 보상 작업으로 정리됨
                raise not_found_error("post", timestamp, "게시글을 찾을 수 없습니다.")
            if post.thumbnail and post.thumbnail != filename:
                await wf.best_effort(
                    WorkflowState.DELETING_OLD_FILE,
                    lambda: self.store.delete(post.thumbnail, missing_ok=True),
                )
        return updated

    # ============ 삭제 ============

    async def delete_post(
        self, post_id: int, user_id: int, timestamp: str | None = None
    ) -> None:
        """게시글과 썸네일 파일을 삭제하고 작성자의 게시글 수를 줄입니다.

        LOCATING_ENTITY -> DELETING_FILE -> DELETING_ENTITY -> UPDATING_OWNER_COUNTER
        순서로 진행됩니다. 썸네일 파일은 먼저 삭제 대기 이름으로 옮겨두고,
        레코드 삭제가 끝난 뒤 실제로 지웁니다. 디스크에 파일이 없어도 진행합니다.

        Raises:
            NotFoundError: 게시글이 없으면 404.
            ForbiddenError: 작성자가 아니면 403.
        """
        async with AttachmentWorkflow(
            "delete_post", initial=WorkflowState.LOCATING_ENTITY
        ) as wf:
            post = await self._get_own_post(post_id, user_id, "delete", timestamp)

            staged = await wf.step(
                WorkflowState.DELETING_FILE,
                lambda: self.store.stage_delete(post.thumbnail),
                compensate=self.store.restore,
            )
            deleted = await wf.step(
                WorkflowState.DELETING_ENTITY,
                lambda: persist("delete_post", post_models.delete_post(post.id), timestamp),
                compensate=lambda ok: post_models.restore_post(post) if ok else _noop(),
            )
            if not deleted:
                raise not_found_error("post", timestamp, "게시글을 찾을 수 없습니다.")
            await wf.step(
                WorkflowState.UPDATING_OWNER_COUNTER,
                lambda: persist(
                    "decrement_post_count",
                    user_models.change_post_count(post.author_id, -1),
                    timestamp,
                ),
            )

        try:
            await self.store.discard(staged)
        except FileStorageError as e:
            logger.warning("삭제 대기 썸네일 정리 실패: %s (%s)", post.thumbnail, e.detail)
        logger.info("게시글 삭제: post_id=%s author_id=%s", post.id, post.author_id)


async def _noop() -> None:
    return None

"""user_service: 사용자 관련 비즈니스 로직을 처리하는 서비스."""

import logging

from fastapi import UploadFile, status
from pymysql.err import IntegrityError

from core.config import settings
from models import user_models
from models.user_models import User
from schemas.user_schemas import RegisterRequest, UpdateUserRequest
from services.attachment_workflow import AttachmentWorkflow, WorkflowState, persist
from utils.exceptions import (
    PersistenceError,
    conflict_error,
    not_found_error,
    unauthorized_error,
    validation_error,
)
from utils.file_validators import read_attachment
from utils.jwt_utils import create_access_token
from utils.password import (
    MIN_PASSWORD_LENGTH,
    hash_password_async,
    verify_password_async,
)
from utils.storage import UploadStore, generate_unique_filename

logger = logging.getLogger(__name__)

AVATAR_SLOT = "avatar"

# MySQL 중복 키 에러 코드
_DUPLICATE_ENTRY = 1062


class UserService:
    """사용자 관리 서비스.

    Args:
        store: 아바타 파일을 저장할 업로드 저장소.
        avatar_max_bytes: 아바타 최대 크기 (바이트).
    """

    def __init__(self, store: UploadStore, avatar_max_bytes: int | None = None):
        self.store = store
        self.avatar_max_bytes = avatar_max_bytes or settings.AVATAR_MAX_BYTES

    @staticmethod
    async def register(user_data: RegisterRequest, timestamp: str | None = None) -> User:
        """회원가입을 처리합니다.

        이메일은 소문자로 저장되며, 동시 가입 경쟁은 UNIQUE 인덱스로 판정합니다.

        Raises:
            ConflictError: 이미 가입된 이메일이면 409.
            ValidationError: 항목이 누락되었거나, 비밀번호가 8자 미만이거나
                확인 값과 다르면 400.
        """
        if not user_data.is_complete:
            raise validation_error(
                "missing_fields",
                "모든 항목을 입력해 주세요.",
                timestamp,
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        email = user_data.email.lower()

        # 1. 이메일 중복 확인
        if await persist("get_user_by_email", user_models.get_user_by_email(email), timestamp):
            raise conflict_error("email", timestamp, "이미 가입된 이메일입니다.")

        # 2. 비밀번호 검증
        if len(user_data.password.strip()) < MIN_PASSWORD_LENGTH:
            raise validation_error(
                "password_too_short",
                f"비밀번호는 최소 {MIN_PASSWORD_LENGTH}자 이상이어야 합니다.",
                timestamp,
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        if user_data.password != user_data.password2:
            raise validation_error(
                "password_mismatch",
                "비밀번호가 일치하지 않습니다.",
                timestamp,
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        # 3. 비밀번호 해싱 후 사용자 생성
        hashed_password = await hash_password_async(user_data.password)
        try:
            user = await persist(
                "create_user",
                user_models.create_user(
                    username=user_data.username,
                    email=email,
                    password=hashed_password,
                ),
                timestamp,
            )
        except PersistenceError as e:
            # 사전 확인 이후 동시에 같은 이메일로 가입한 경우
            cause = e.__cause__
            if isinstance(cause, IntegrityError) and cause.args[0] == _DUPLICATE_ENTRY:
                raise conflict_error("email", timestamp, "이미 가입된 이메일입니다.") from e
            raise

        logger.info("회원가입: user_id=%s", user.id)
        return user

    @staticmethod
    async def login(email: str, password: str, timestamp: str | None = None) -> tuple[str, User]:
        """이메일과 비밀번호로 로그인하고 Access Token을 발급합니다.

        Returns:
            (access_token, user)

        Raises:
            AuthError: 사용자가 없거나 비밀번호가 틀리면 401.
        """
        user = await persist(
            "get_user_by_email", user_models.get_user_by_email(email.lower()), timestamp
        )
        password_valid = await verify_password_async(
            password, user.password if user else None
        )
        if not user or not password_valid:
            raise unauthorized_error(
                timestamp, message="이메일 또는 비밀번호가 올바르지 않습니다."
            )
        return create_access_token(user_id=user.id), user

    @staticmethod
    async def get_users(timestamp: str | None = None) -> list[User]:
        """전체 작성자 목록을 조회합니다."""
        return await persist("get_users", user_models.get_users(), timestamp)

    @staticmethod
    async def get_user(user_id: int, timestamp: str | None = None) -> User:
        """ID로 사용자를 조회합니다.

        Raises:
            NotFoundError: 사용자가 없으면 404.
        """
        user = await persist("get_user", user_models.get_user_by_id(user_id), timestamp)
        if not user:
            raise not_found_error("user", timestamp, "사용자를 찾을 수 없습니다.")
        return user

    async def change_avatar(
        self, user: User, avatar: UploadFile | None, timestamp: str | None = None
    ) -> User:
        """프로필 아바타를 교체합니다.

        VALIDATING -> WRITING_FILE -> PERSISTING_ENTITY -> DELETING_OLD_FILE
        새 파일 저장과 레코드 갱신이 끝난 뒤 기존 파일을 삭제하며,
        기존 파일이 없거나 삭제에 실패해도 경고만 남기고 진행합니다.

        Raises:
            ValidationError: 아바타가 없거나 형식/크기가 잘못된 경우 (422).
            FileStorageError: 새 파일 저장 실패 (500).
            PersistenceError: DB 작업 실패 (500).
        """
        old_avatar = user.avatar

        async with AttachmentWorkflow("change_avatar") as wf:
            attachment = await read_attachment(
                avatar, AVATAR_SLOT, self.avatar_max_bytes, timestamp
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
                    "update_avatar", user_models.update_avatar(user.id, filename), timestamp
                ),
            )
            if updated is None:
                raise not_found_error("user", timestamp, "사용자를 찾을 수 없습니다.")
            if old_avatar and old_avatar != filename:
                await wf.best_effort(
                    WorkflowState.DELETING_OLD_FILE,
                    lambda: self.store.delete(old_avatar),
                )

        return updated

    @staticmethod
    async def update_details(
        user: User, update_data: UpdateUserRequest, timestamp: str | None = None
    ) -> User:
        """사용자 이름, 이메일, 비밀번호를 변경합니다.

        Raises:
            ConflictError: 다른 사용자가 사용 중인 이메일이면 409.
            ValidationError: 현재 비밀번호 불일치, 새 비밀번호 길이 부족,
                확인 값 불일치 시 422.
        """
        email = update_data.email.lower()

        # 1. 이메일 중복 확인 (본인 제외)
        existing = await persist(
            "get_user_by_email", user_models.get_user_by_email(email), timestamp
        )
        if existing and existing.id != user.id:
            raise conflict_error("email", timestamp, "이미 사용 중인 이메일입니다.")

        # 2. 현재 비밀번호 확인
        if not await verify_password_async(update_data.current_password, user.password):
            raise validation_error(
                "invalid_current_password", "현재 비밀번호가 올바르지 않습니다.", timestamp
            )

        # 3. 새 비밀번호 검증
        if len(update_data.new_password) < MIN_PASSWORD_LENGTH:
            raise validation_error(
                "password_too_short",
                f"비밀번호는 최소 {MIN_PASSWORD_LENGTH}자 이상이어야 합니다.",
                timestamp,
            )
        if update_data.new_password != update_data.new_password_confirm:
            raise validation_error(
                "password_mismatch", "비밀번호가 일치하지 않습니다.", timestamp
            )

        hashed_password = await hash_password_async(update_data.new_password)
        try:
            updated = await persist(
                "update_user_details",
                user_models.update_user_details(
                    user.id,
                    username=update_data.username,
                    email=email,
                    password=hashed_password,
                ),
                timestamp,
            )
        except PersistenceError as e:
            cause = e.__cause__
            if isinstance(cause, IntegrityError) and cause.args[0] == _DUPLICATE_ENTRY:
                raise conflict_error("email", timestamp, "이미 사용 중인 이메일입니다.") from e
            raise

        if updated is None:
            raise not_found_error("user", timestamp, "사용자를 찾을 수 없습니다.")
        return updated

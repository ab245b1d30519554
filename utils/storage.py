"""로컬 업로드 파일 저장소.

게시글 썸네일과 프로필 아바타를 업로드 디렉토리에 저장/삭제합니다.
저장된 파일은 /uploads/<파일명> 경로로 서빙됩니다.
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from utils.exceptions import FileStorageError

logger = logging.getLogger(__name__)

_STAGED_SUFFIX = ".deleting"


def generate_unique_filename(original_name: str) -> str:
    """원본 파일명으로부터 고유한 저장 파일명을 생성합니다.

    첫 번째 '.' 앞부분(기본 이름)과 128비트 무작위 UUID, 마지막 확장자를
    구분자 없이 이어 붙입니다. 예: "cat.photo.png" -> "cat<uuid>.png"

    Args:
        original_name: 클라이언트가 업로드한 파일명.

    Returns:
        업로드 디렉토리 안에서 재사용되지 않는 파일명.
    """
    # 경로 구분자를 포함한 파일명은 마지막 구성요소만 사용
    name = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    parts = name.split(".")
    base = parts[0]
    token = uuid.uuid4().hex
    if len(parts) == 1:
        return f"{base}{token}"
    return f"{base}{token}.{parts[-1]}"


@dataclass(frozen=True)
class StagedDeletion:
    """삭제 대기 상태로 이름이 바뀐 파일."""

    name: str
    staged_path: Path | None


class UploadStore:
    """업로드 디렉토리에 대한 파일 쓰기/삭제를 담당합니다.

    디렉토리는 생성 시점에 명시적으로 전달받습니다.
    블로킹 파일 I/O는 asyncio.to_thread로 이벤트 루프 밖에서 수행합니다.
    """

    def __init__(self, directory: str | os.PathLike[str]):
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        """파일명을 업로드 디렉토리 내부의 절대 경로로 변환합니다.

        Raises:
            FileStorageError: 디렉토리 밖을 가리키는 파일명인 경우.
        """
        if not name or name in (".", ".."):
            raise FileStorageError("invalid_filename", "잘못된 파일명입니다.")
        base = self.directory.resolve()
        path = (base / name).resolve()
        # Path Traversal 방지
        if path.parent != base:
            raise FileStorageError("invalid_filename", "잘못된 파일명입니다.")
        return path

    async def write(self, content: bytes, name: str) -> Path:
        """파일 내용을 업로드 디렉토리에 저장합니다.

        임시 파일에 먼저 기록한 뒤 os.replace로 교체하므로
        실패 시 부분적으로 기록된 파일이 보이지 않습니다.

        Args:
            content: 파일 바이너리.
            name: generate_unique_filename으로 생성된 파일명.

        Returns:
            저장된 파일 경로.

        Raises:
            FileStorageError: 파일 쓰기에 실패한 경우.
        """
        path = self.path_for(name)
        try:
            return await asyncio.to_thread(self._write_sync, path, content)
        except OSError as e:
            logger.error("파일 저장 실패: %s (%s)", name, e)
            raise FileStorageError(
                "file_save_error", "파일 저장 중 오류가 발생했습니다."
            ) from e

    def _write_sync(self, path: Path, content: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        return path

    async def delete(self, name: str, missing_ok: bool = False) -> bool:
        """업로드 디렉토리에서 파일을 삭제합니다.

        Args:
            name: 삭제할 파일명.
            missing_ok: True이면 파일이 없어도 에러를 발생시키지 않습니다.

        Returns:
            실제로 파일을 삭제했으면 True, 없어서 건너뛰었으면 False.

        Raises:
            FileStorageError: 파일이 없거나(missing_ok=False) 삭제할 수 없는 경우.
        """
        path = self.path_for(name)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as e:
            if missing_ok:
                return False
            raise FileStorageError(
                "file_not_found", "삭제할 파일이 존재하지 않습니다."
            ) from e
        except OSError as e:
            logger.error("파일 삭제 실패: %s (%s)", name, e)
            raise FileStorageError(
                "file_delete_error", "파일 삭제 중 오류가 발생했습니다."
            ) from e
        return True

    async def stage_delete(self, name: str) -> StagedDeletion:
        """파일을 삭제 대기 이름으로 변경합니다.

        레코드 삭제가 확정된 뒤 discard()로 실제 삭제하고,
        실패하면 restore()로 원래 이름으로 되돌립니다.
        파일이 없으면 staged_path가 None인 StagedDeletion을 반환합니다.

        Raises:
            FileStorageError: 이름 변경에 실패한 경우.
        """
        path = self.path_for(name)
        staged = path.with_name(f".{path.name}{_STAGED_SUFFIX}")
        try:
            await asyncio.to_thread(os.replace, path, staged)
        except FileNotFoundError:
            logger.warning("삭제할 파일이 이미 없습니다: %s", name)
            return StagedDeletion(name=name, staged_path=None)
        except OSError as e:
            logger.error("파일 삭제 준비 실패: %s (%s)", name, e)
            raise FileStorageError(
                "file_delete_error", "파일 삭제 중 오류가 발생했습니다."
            ) from e
        return StagedDeletion(name=name, staged_path=staged)

    async def restore(self, staged: StagedDeletion) -> None:
        """stage_delete로 이름이 바뀐 파일을 원래 이름으로 되돌립니다."""
        if staged.staged_path is None:
            return
        try:
            await asyncio.to_thread(os.replace, staged.staged_path, self.path_for(staged.name))
        except OSError as e:
            raise FileStorageError(
                "file_restore_error", "파일 복구 중 오류가 발생했습니다."
            ) from e

    async def discard(self, staged: StagedDeletion) -> None:
        """삭제 대기 파일을 실제로 삭제합니다."""
        if staged.staged_path is None:
            return
        try:
            await asyncio.to_thread(staged.staged_path.unlink, missing_ok=True)
        except OSError as e:
            raise FileStorageError(
                "file_delete_error", "파일 삭제 중 오류가 발생했습니다."
            ) from e

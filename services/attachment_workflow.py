"""attachment_workflow: 첨부 파일 업로드-변경-저장 워크플로우.

게시글 썸네일 생성/삭제와 아바타 교체는 모두 파일 I/O와 DB 작업을 순서대로
수행합니다. 각 단계는 선택적으로 보상 작업을 등록하며, 이후 단계가 실패하면
완료된 단계의 보상 작업을 역순으로 실행한 뒤 원래 예외를 그대로 전파합니다.

사용 예시:
    async with AttachmentWorkflow("create_post") as wf:
        await wf.step(
            WorkflowState.WRITING_FILE,
            lambda: store.write(content, name),
            compensate=lambda _: store.delete(name, missing_ok=True),
        )
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from pymysql.err import MySQLError

from utils.exceptions import FileStorageError, persistence_error

logger = logging.getLogger("api")

T = TypeVar("T")


class WorkflowState(str, Enum):
    """워크플로우 상태."""

    VALIDATING = "validating"
    LOCATING_ENTITY = "locating_entity"
    WRITING_FILE = "writing_file"
    PERSISTING_ENTITY = "persisting_entity"
    UPDATING_OWNER_COUNTER = "updating_owner_counter"
    DELETING_FILE = "deleting_file"
    DELETING_OLD_FILE = "deleting_old_file"
    DELETING_ENTITY = "deleting_entity"
    COMPENSATING = "compensating"
    DONE = "done"
    FAILED = "failed"


async def persist(operation: str, awaitable: Awaitable[T], timestamp: str | None = None) -> T:
    """DB 작업을 실행하고 드라이버 예외를 PersistenceError로 변환합니다.

    Args:
        operation: 로그/메시지에 사용할 작업 이름.
        awaitable: 실행할 모델 함수 호출.
        timestamp: 요청 타임스탬프.
    """
    try:
        return await awaitable
    except MySQLError as e:
        logger.error("DB 작업 실패 (%s): %s", operation, e)
        raise persistence_error(operation, timestamp) from e


class AttachmentWorkflow:
    """보상 작업을 지원하는 순차 워크플로우.

    Attributes:
        name: 로그에 표시할 워크플로우 이름.
        state: 현재 상태.
        history: 지나온 상태 목록.
        failed_state: 실패가 발생한 상태 (성공 시 None).
    """

    def __init__(self, name: str, initial: WorkflowState = WorkflowState.VALIDATING):
        self.name = name
        self.state = initial
        self.history: list[WorkflowState] = [initial]
        self.failed_state: WorkflowState | None = None
        self._compensations: list[tuple[WorkflowState, Callable[[], Awaitable[Any]]]] = []

    def _enter(self, state: WorkflowState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug("[%s] -> %s", self.name, state.value)

    async def step(
        self,
        state: WorkflowState,
        action: Callable[[], Awaitable[T]],
        compensate: Callable[[T], Awaitable[Any]] | None = None,
    ) -> T:
        """단계를 실행하고, 성공하면 보상 작업을 등록합니다.

        Args:
            state: 이 단계의 상태.
            action: 실행할 비동기 작업.
            compensate: 작업 결과를 받아 되돌리는 비동기 작업 (선택).

        Returns:
            action의 결과.
        """
        self._enter(state)
        result = await action()
        if compensate is not None:
            self._compensations.append((state, lambda: compensate(result)))
        return result

    async def best_effort(
        self, state: WorkflowState, action: Callable[[], Awaitable[Any]]
    ) -> bool:
        """실패해도 워크플로우를 중단하지 않는 파일 정리 단계를 실행합니다.

        Returns:
            성공 여부. FileStorageError는 경고 로그만 남깁니다.
        """
        self._enter(state)
        try:
            await action()
        except FileStorageError as e:
            logger.warning("[%s] %s 단계 실패, 계속 진행: %s", self.name, state.value, e.detail)
            return False
        return True

    async def _compensate(self) -> None:
        self._enter(WorkflowState.COMPENSATING)
        while self._compensations:
            state, undo = self._compensations.pop()
            try:
                await undo()
            except Exception:
                # 보상 실패는 원래 예외를 가리지 않도록 기록만 한다
                logger.exception("[%s] %s 단계 보상 작업 실패", self.name, state.value)

    async def __aenter__(self) -> "AttachmentWorkflow":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self._compensations.clear()
            self._enter(WorkflowState.DONE)
            return False

        self.failed_state = self.state
        if self._compensations:
            logger.warning(
                "[%s] %s 단계에서 실패하여 보상 작업을 실행합니다: %r",
                self.name,
                self.failed_state.value,
                exc,
            )
            await self._compensate()
        self._enter(WorkflowState.FAILED)
        return False

"""post_schemas: 게시글 관련 Pydantic 모델 모듈.

게시글 생성, 수정 요청 스키마를 정의합니다.
"""

from pydantic import BaseModel, Field, field_validator

MIN_DESCRIPTION_LENGTH = 12


class CreatePostRequest(BaseModel):
    """게시글 생성 요청 모델.

    썸네일 파일은 multipart 요청에서 따로 전달되어 file_validators에서 검증합니다.

    Attributes:
        title: 게시글 제목.
        category: 카테고리.
        description: 본문 (12자 이상).
    """

    title: str = Field(..., max_length=255)
    category: str = Field(..., max_length=50)
    description: str

    @field_validator("title", "category")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """공백만 있는 값은 누락으로 간주합니다. 저장 값은 입력 그대로 유지합니다."""
        if not v.strip():
            raise ValueError("모든 항목을 입력해 주세요.")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        """본문 길이를 앞뒤 공백을 제외하고 검증합니다.

        Raises:
            ValueError: 본문이 12자 미만인 경우.
        """
        if len(v.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValueError(
                f"본문은 최소 {MIN_DESCRIPTION_LENGTH}자 이상이어야 합니다."
            )
        return v


class UpdatePostRequest(CreatePostRequest):
    """게시글 수정 요청 모델.

    제목, 카테고리, 본문을 모두 전달해야 합니다.
    썸네일은 선택이며, 전달되면 기존 파일을 교체합니다.
    """

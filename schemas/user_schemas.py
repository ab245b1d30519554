"""user_schemas: 사용자 관련 Pydantic 모델 모듈.

회원가입, 로그인, 정보 수정 요청 스키마를 정의합니다.
비밀번호 길이/일치 여부는 상태 코드(400/422)가 엔드포인트마다 다르므로 서비스에서 검증합니다.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("모든 항목을 입력해 주세요.")
    return v


class RegisterRequest(BaseModel):
    """회원가입 요청 모델.

    누락되거나 공백뿐인 항목은 None으로 받아 서비스에서 400으로 처리합니다.

    Attributes:
        username: 표시 이름.
        email: 이메일 주소 (소문자로 정규화).
        password: 비밀번호.
        password2: 비밀번호 확인.
    """

    username: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    password: str | None = None
    password2: str | None = None

    @field_validator("username", "email", "password", "password2", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else None

    @property
    def is_complete(self) -> bool:
        return all((self.username, self.email, self.password, self.password2))


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UpdateUserRequest(BaseModel):
    """사용자 정보 수정 요청 모델.

    Attributes:
        username: 새 표시 이름.
        email: 새 이메일 주소.
        current_password: 현재 비밀번호.
        new_password: 새 비밀번호.
        new_password_confirm: 새 비밀번호 확인.
    """

    username: str = Field(..., max_length=50)
    email: EmailStr
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
    new_password_confirm: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """애플리케이션 설정을 관리하는 클래스.

    환경 변수에서 설정을 로드하며, 기본값을 제공합니다.

    Attributes:
        SECRET_KEY: JWT 토큰 서명 키.
        ALLOWED_ORIGINS: CORS 허용 오리진 목록.
        DB_HOST: MySQL 호스트 주소.
        DB_PORT: MySQL 포트 번호.
        DB_USER: MySQL 사용자명.
        DB_PASSWORD: MySQL 비밀번호.
        DB_NAME: MySQL 데이터베이스 이름.
        UPLOAD_DIR: 썸네일/아바타 파일이 저장되는 디렉토리.
        THUMBNAIL_MAX_BYTES: 게시글 썸네일 최대 크기 (바이트).
        AVATAR_MAX_BYTES: 프로필 아바타 최대 크기 (바이트).
    """

    SECRET_KEY: str
    ALLOWED_ORIGINS: list[str] = [
        "http://127.0.0.1:3000",  # 로컬 개발 (프론트엔드)
        "http://localhost:3000",  # 로컬 개발 (프론트엔드)
    ]

    DB_HOST: str
    DB_PORT: int = 3306
    DB_USER: str
    DB_PASSWORD: str
    DB_NAME: str

    # Access Token 유효 기간 (하루)
    JWT_ACCESS_EXPIRE_MINUTES: int = 60 * 24

    # 프로덕션에서는 False로 설정하여 상세 에러 메시지 노출 방지
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    UPLOAD_DIR: str = "uploads"
    THUMBNAIL_MAX_BYTES: int = 2_000_000
    AVATAR_MAX_BYTES: int = 500_000

    TRUSTED_PROXIES: set[str] = set()  # 프로덕션에서 nginx 등의 프록시 IP 설정 필요

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()  # type: ignore[call-arg]  # pydantic-settings는 .env에서 환경 변수를 불러옴.

"""file_validators: 업로드 첨부 파일 검증 모듈.

썸네일/아바타 업로드의 존재 여부, 크기, 확장자, 파일 시그니처를 검증합니다.
검증은 파일을 디스크에 쓰기 전에 수행되며 부수 효과가 없습니다.
"""

import os
from dataclasses import dataclass

from fastapi import UploadFile

from utils.exceptions import validation_error

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

# 지원하는 이미지 포맷의 매직 넘버 (파일 시그니처)
MAGIC_NUMBERS = {
    "jpg": [b"\xFF\xD8\xFF"],
    "png": [b"\x89\x50\x4E\x47\x0D\x0A\x1A\x0A"],
    "gif": [b"\x47\x49\x46\x38\x37\x61", b"\x47\x49\x46\x38\x39\x61"],
    "webp": [b"\x52\x49\x46\x46"],  # WEBP (RIFF 헤더)
}


@dataclass(frozen=True)
class Attachment:
    """검증을 통과한 업로드 파일."""

    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def validate_image_signature(data: bytes) -> bool:
    """파일 내용이 알려진 이미지 시그니처로 시작하는지 확인합니다."""
    for signatures in MAGIC_NUMBERS.values():
        for signature in signatures:
            if data.startswith(signature):
                return True
    return False


def format_size_limit(max_bytes: int) -> str:
    """크기 제한을 사람이 읽을 수 있는 바이트 단위 문자열로 변환합니다."""
    return f"{max_bytes:,} bytes"


def validate_attachment(
    filename: str | None,
    content: bytes | None,
    slot: str,
    max_bytes: int,
    timestamp: str | None = None,
) -> Attachment:
    """첨부 파일의 존재, 크기, 형식을 검증합니다.

    Args:
        filename: 업로드된 원본 파일명.
        content: 업로드된 파일 내용.
        slot: 첨부 슬롯 이름 ('thumbnail' 또는 'avatar').
        max_bytes: 허용되는 최대 크기 (바이트, 경계값 포함).
        timestamp: 요청 타임스탬프.

    Returns:
        검증된 Attachment.

    Raises:
        ValidationError: 파일이 없거나, 너무 크거나, 이미지가 아닌 경우 (422).
    """
    if not filename or not content:
        raise validation_error(
            "missing_attachment",
            f"{slot} 이미지를 업로드해 주세요.",
            timestamp,
        )

    if len(content) > max_bytes:
        raise validation_error(
            "file_too_large",
            f"{slot} 이미지가 너무 큽니다. {format_size_limit(max_bytes)} 이하여야 합니다.",
            timestamp,
        )

    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise validation_error(
            "invalid_file_type",
            f"허용된 이미지 형식: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}",
            timestamp,
        )

    # 확장자 위변조 방지
    if not validate_image_signature(content):
        raise validation_error(
            "invalid_file_content",
            "파일의 내용이 유효한 이미지 형식이 아닙니다.",
            timestamp,
        )

    return Attachment(filename=filename, content=content)


async def read_attachment(
    file: UploadFile | None,
    slot: str,
    max_bytes: int,
    timestamp: str | None = None,
) -> Attachment:
    """UploadFile을 읽어 validate_attachment로 검증합니다.

    최대 크기보다 1바이트만 더 읽어 초과 여부를 판단하므로
    큰 파일 전체를 메모리에 올리지 않습니다.
    """
    if file is None:
        return validate_attachment(None, None, slot, max_bytes, timestamp)
    content = await file.read(max_bytes + 1)
    return validate_attachment(file.filename, content, slot, max_bytes, timestamp)

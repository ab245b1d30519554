"""password: 비밀번호 해싱 및 검증 유틸리티 모듈.

bcrypt를 사용하며, 비용이 큰 해싱 연산은 이벤트 루프를 막지 않도록
스레드에서 실행하는 비동기 래퍼를 함께 제공합니다.
"""

import asyncio

import bcrypt

MIN_PASSWORD_LENGTH = 8

# 타이밍 공격 방지: 존재하지 않는 사용자에 대해서도 bcrypt 비교를 수행하여
# 응답 시간 차이로 사용자 존재 여부가 노출되지 않도록 함
DUMMY_PASSWORD_HASH = "$2b$12$EixZaYVK1fsbw1ZfbX3OXePaWxwKc.60VF.wdz.xGto8.H82o.f2y"


def hash_password(password: str) -> str:
    """비밀번호를 bcrypt로 해싱합니다.

    Args:
        password: 평문 비밀번호.

    Returns:
        해싱된 비밀번호 문자열.
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호가 해싱된 비밀번호와 일치하는지 확인합니다.

    해시 형식이 잘못된 경우에도 예외 대신 False를 반환합니다.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


async def hash_password_async(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    """verify_password의 비동기 버전.

    hashed_password가 None이면 더미 해시와 비교한 뒤 항상 False를 반환합니다.
    """
    if hashed_password is None:
        await asyncio.to_thread(verify_password, plain_password, DUMMY_PASSWORD_HASH)
        return False
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)

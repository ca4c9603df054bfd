"""비밀번호 해시 유틸리티 (bcrypt)"""

import bcrypt


def hash_password(password: str) -> str:
    """비밀번호를 bcrypt 해시로 변환"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """평문 비밀번호와 bcrypt 해시 비교

    해시 형식이 올바르지 않으면 False를 반환합니다.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"), password_hash.encode("utf-8")
        )
    except ValueError:
        return False

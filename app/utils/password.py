"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification for user accounts, using bcrypt
directly. Temporary passwords set by admins and passwords changed on the
profile page go through the same hash.
"""

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password with a fresh bcrypt salt.

    Args:
        password: 평문 비밀번호 (Plain text password)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 해시를 비교합니다.

    Check a login attempt against the stored hash. A malformed stored hash
    counts as a mismatch.

    Args:
        plain_password: 입력 비밀번호 (Password from the login form)
        hashed_password: 저장된 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치 여부 (True if the password matches)
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False

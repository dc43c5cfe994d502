"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error taxonomy
used across services: validation (400), unauthorized (401), forbidden (403),
not found (404) and conflict (409).

Ownership mismatches are raised as NotFoundError so that the existence of
another staff member's records is not revealed.

Usage:
    from app.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("Workcheck not found")
    raise ConflictError("Today's workcheck already exists")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 리소스가 없거나 소유자가 아닐 때 사용.

    404 Not Found exception.
    Raised when a requested resource does not exist, or when it exists
    but belongs to another staff member.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 상태 충돌 또는 중복 시 사용.

    409 Conflict exception.
    Raised on uniqueness violations (duplicate check item code, username)
    and on state conflicts (double review, unit already claimed today,
    item already has an image, workcheck locked for editing).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised on role mismatch (staff calling admin routes and vice versa)
    and on forbidden self-actions such as deactivating one's own account.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 검증 실패 시 사용.

    400 Bad Request exception.
    Raised when the request data fails business validation beyond what
    Pydantic catches (incomplete checklist, missing hours meter, wrong file
    type, oversized upload, malformed action list).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

"""UUID 파싱 유틸리티 모듈.

Parse identifiers that arrive in request bodies and query strings. A
malformed id cannot name an existing record, so it is reported the same
way as a missing one.
"""

from uuid import UUID

from app.utils.exceptions import NotFoundError


def parse_uuid(value: str | UUID | None, not_found_detail: str) -> UUID:
    """문자열 ID를 UUID로 변환합니다. 형식이 잘못되면 404.

    Convert a string id to UUID, raising NotFoundError with
    ``not_found_detail`` when it is missing or malformed.
    """
    if isinstance(value, UUID):
        return value
    if not value:
        raise NotFoundError(not_found_detail)
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(not_found_detail)

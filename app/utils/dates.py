"""날짜/시간대 유틸리티 모듈.

Date and timezone utility module.
The "calendar day" of a workcheck is decided in the configured timezone
(settings.TIMEZONE), not in UTC, so that a staff member inspecting at
06:00 local time lands on the right day.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from app.config import settings


def local_now() -> datetime:
    """설정된 시간대의 현재 시각을 반환합니다.

    Return the current time in the configured timezone.
    """
    return datetime.now(ZoneInfo(settings.TIMEZONE))


def local_today() -> date:
    """설정된 시간대 기준 오늘 날짜 — Today's calendar day in settings.TIMEZONE."""
    return local_now().date()


def days_back(today: date, count: int) -> list[date]:
    """오늘 포함 최근 N일을 오래된 순으로 반환합니다.

    Return the last ``count`` calendar days ending at ``today``, oldest first.

    Args:
        today: 기준일 (Anchor day, included)
        count: 일 수 (Number of days)

    Returns:
        list[date]: 날짜 목록 (Days, oldest first)
    """
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def as_utc(value: datetime) -> datetime:
    """naive datetime을 UTC로 간주하여 aware로 변환합니다.

    Normalize a datetime to UTC-aware. Naive values (as returned by some
    drivers) are taken to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

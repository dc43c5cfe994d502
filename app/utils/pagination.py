"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Used by the staff history and the admin workcheck listing.
"""

import math
from typing import Any, Sequence
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def page_count(total: int, per_page: int) -> int:
    """전체 페이지 수 — ceil(total / per_page), 최소 1."""
    return max(1, math.ceil(total / per_page)) if per_page > 0 else 1


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated query, returning the page of items and the total.
    Filters must already be applied to ``query`` so that the total and the
    page agree.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Filtered base query)
        page: 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수)
    """
    # 전체 개수 — Count over the filtered query (order_by dropped)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().unique().all()

    return items, total

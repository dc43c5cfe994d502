"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared by several routers.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마.

    Generic message response for operations without a richer payload
    (submission, decision, deletion).

    Attributes:
        message: 결과 메시지 (Human-readable result message)
    """

    message: str  # 결과 메시지 (Result message)


class PageMeta(BaseModel):
    """페이지네이션 메타데이터 — Pagination metadata attached to list responses."""

    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)
    pages: int  # 전체 페이지 수 (Total pages)

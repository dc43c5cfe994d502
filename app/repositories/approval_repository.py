"""검토 레포지토리 — 점검별 단일 검토 레코드.

Approval Repository — The single approval row of a workcheck. Reads go
through the workcheck graph, so only the generic writes are needed here.
"""

from app.models.workcheck import Approval
from app.repositories.base import BaseRepository


class ApprovalRepository(BaseRepository[Approval]):
    """검토 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database writes for the approvals table.
    """

    def __init__(self) -> None:
        super().__init__(Approval)


# 싱글턴 인스턴스 — Singleton instance
approval_repository: ApprovalRepository = ApprovalRepository()

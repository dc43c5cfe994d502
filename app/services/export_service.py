"""내보내기 서비스 — 제출된 점검 기록을 CSV/Excel/PDF로 변환.

Export Service — Renders submitted workchecks as CSV, Excel or PDF.
Uses the same search/status/date filters as the admin listing, without
pagination.
"""

import csv
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO, StringIO
from zoneinfo import ZoneInfo

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.workcheck import APPROVAL_APPROVED, APPROVAL_PENDING, APPROVAL_REJECTED, Workcheck
from app.repositories.workcheck_repository import STATUS_FILTERS, workcheck_repository
from app.utils.dates import as_utc
from app.utils.exceptions import BadRequestError

EXPORT_COLUMNS: list[str] = [
    "Date",
    "Staff Name",
    "Username",
    "Unit",
    "Unit Type",
    "Hours Meter",
    "Status",
    "Approved By",
    "Approved Date",
]

# 형식별 MIME/확장자 — Media type and extension per export format
EXPORT_FORMATS: dict[str, tuple[str, str]] = {
    "csv": ("text/csv", "csv"),
    "excel": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx"),
    "pdf": ("application/pdf", "pdf"),
}

_STATUS_LABELS: dict[str, str] = {
    APPROVAL_APPROVED: "Approved",
    APPROVAL_REJECTED: "Rejected",
    APPROVAL_PENDING: "Pending",
}

# PDF 열 너비(mm) — Column widths on a landscape A4 page
_PDF_COLUMN_WIDTHS: list[float] = [24, 42, 30, 32, 30, 24, 22, 38, 32]


@dataclass
class ExportFile:
    """내보내기 결과 파일 — Rendered file ready for download."""

    content: bytes
    media_type: str
    filename: str


def _format_datetime(value: datetime | None) -> str:
    if value is None:
        return ""
    return as_utc(value).astimezone(ZoneInfo(settings.TIMEZONE)).strftime("%Y-%m-%d %H:%M")


def build_rows(workchecks: list[Workcheck]) -> list[list[str]]:
    """점검 목록을 내보내기 행으로 변환합니다.

    Flatten workchecks into rows matching EXPORT_COLUMNS.
    """
    rows: list[list[str]] = []
    for w in workchecks:
        approval = w.approval
        status: str = _STATUS_LABELS.get(approval.status, "Pending") if approval else "Pending"
        decided: bool = approval is not None and approval.status != APPROVAL_PENDING
        approver = approval.approver if decided else None
        rows.append([
            w.work_date.isoformat(),
            w.checker.full_name,
            w.checker.username,
            w.unit.name,
            w.unit.type,
            "" if w.hours_meter is None else f"{w.hours_meter:g}",
            status,
            approver.full_name if approver is not None else "",
            _format_datetime(approval.approved_at) if decided else "",
        ])
    return rows


def render_csv(rows: list[list[str]]) -> bytes:
    """CSV 생성 — UTF-8 with BOM so spreadsheet apps detect the encoding."""
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8-sig")


def render_excel(rows: list[list[str]]) -> bytes:
    """Excel 생성 — Single sheet with a bold shaded header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Workcheck Records"

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")
    for col_idx, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for row in rows:
        ws.append(row)

    for i, width in enumerate([12, 24, 16, 16, 16, 12, 12, 24, 18], 1):
        ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = width

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def render_pdf(rows: list[list[str]], generated_on: date) -> bytes:
    """PDF 생성 — Landscape A4 table, header repeated on every page."""
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)
    left: float = 12 * mm
    row_height: float = 7 * mm
    y: float = height - 18 * mm

    def draw_row(values: list[str], bold: bool = False) -> None:
        nonlocal y
        c.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
        x: float = left
        for value, col_width in zip(values, _PDF_COLUMN_WIDTHS):
            limit: int = int(col_width / 1.9)
            text: str = value if len(value) <= limit else value[: limit - 3] + "..."
            c.drawString(x, y, text)
            x += col_width * mm
        y -= row_height

    def draw_header() -> None:
        nonlocal y
        c.setFont("Helvetica-Bold", 14)
        c.drawString(left, y, "Workcheck Records")
        c.setFont("Helvetica", 9)
        c.drawRightString(width - left, y, f"Generated {generated_on.isoformat()}")
        y -= 10 * mm
        draw_row(EXPORT_COLUMNS, bold=True)
        c.line(left, y + row_height - 2 * mm, width - left, y + row_height - 2 * mm)

    draw_header()
    for row in rows:
        if y < 15 * mm:
            c.showPage()
            y = height - 18 * mm
            draw_header()
        draw_row(row)

    c.save()
    return buffer.getvalue()


class ExportService:
    """점검 기록 내보내기 서비스.

    Service exporting submitted workcheck records.
    """

    async def export_workchecks(
        self,
        db: AsyncSession,
        export_type: str,
        today: date,
        search: str | None = None,
        status: str | None = None,
        day: date | None = None,
    ) -> ExportFile:
        """필터에 맞는 제출 점검을 파일로 내보냅니다.

        Render every submitted workcheck matching the filters.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            export_type: "csv" | "excel" | "pdf"
            today: 파일명 날짜 (Day used in the filename)
            search: 점검자 검색어 (Checker search text)
            status: 검토 상태 필터 (Approval status filter)
            day: 점검일 필터 (Work date filter)

        Returns:
            ExportFile: 내보내기 파일 (Rendered file)

        Raises:
            BadRequestError: 알 수 없는 형식/필터 또는 데이터 없음
                             (Unknown format or filter, or nothing to export)
        """
        if export_type not in EXPORT_FORMATS:
            raise BadRequestError(f"Invalid export type: {export_type}. Allowed: csv, excel, pdf")
        if status is not None and status not in STATUS_FILTERS:
            raise BadRequestError(f"Invalid status filter: {status}")

        query = workcheck_repository.admin_query(search=search, status=status, day=day)
        workchecks: list[Workcheck] = await workcheck_repository.list_all(db, query)
        if not workchecks:
            raise BadRequestError("No data to export")

        rows: list[list[str]] = build_rows(workchecks)
        media_type, extension = EXPORT_FORMATS[export_type]
        if export_type == "csv":
            content: bytes = render_csv(rows)
        elif export_type == "excel":
            content = render_excel(rows)
        else:
            content = render_pdf(rows, today)

        return ExportFile(
            content=content,
            media_type=media_type,
            filename=f"workcheck-records-{today.isoformat()}.{extension}",
        )


# 싱글턴 인스턴스 — Singleton instance
export_service: ExportService = ExportService()

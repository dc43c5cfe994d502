"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API request to Axiom: method, path, query
and path params, JSON body, status code, duration, acting user and the
error detail of 4xx/5xx responses. Credentials in bodies and params are
masked, and multipart uploads (inspection photos, profile images) are
never read.
"""

import json
import logging
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.utils.jwt import decode_token

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and params
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

_MAX_BODY_CHARS: int = 2000
_MAX_ERROR_CHARS: int = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask credential fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


def _actor(request: Request) -> str | None:
    """요청자 ID 추출 — User id from a valid bearer token, if any."""
    header: str = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        return None
    try:
        return decode_token(header[7:]).get("sub")
    except jwt.InvalidTokenError:
        return None


async def _read_json_body(request: Request) -> Any:
    content_type: str = request.headers.get("content-type", "")
    if content_type.startswith("multipart/"):
        return "(multipart body)"
    body_bytes: bytes = await request.body()
    if not body_bytes:
        return None
    try:
        body: Any = mask_sensitive(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"
    text: str = json.dumps(body, default=str)
    return body if len(text) <= _MAX_BODY_CHARS else text[:_MAX_BODY_CHARS] + "...(truncated)"


def _error_detail(body: bytes) -> str:
    try:
        detail: Any = json.loads(body).get("detail", "")
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        detail = body.decode("utf-8", errors="replace")
    if not isinstance(detail, str):
        detail = json.dumps(detail, default=str)
    return detail if len(detail) <= _MAX_ERROR_CHARS else detail[:_MAX_ERROR_CHARS] + "..."


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs API requests and responses to Axiom. A no-op
    pass-through when AXIOM_API_TOKEN or AXIOM_DATASET is unset.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path: str = request.url.path
        if not self._client or path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES):
            return await call_next(request)

        start_time: float = time.time()
        event: dict[str, Any] = {"method": request.method, "path": path, "status_code": 500}
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        actor: str | None = _actor(request)
        if actor:
            event["user_id"] = actor
        if request.method in ("POST", "PUT", "PATCH"):
            body: Any = await _read_json_body(request)
            if body is not None:
                event["request_body"] = body

        try:
            response: Response = await call_next(request)
            event["status_code"] = response.status_code
            if request.path_params:
                event["path_params"] = dict(request.path_params)

            # 에러 응답 본문에서 사유 추출 후 재구성 — Read the error body, then re-wrap it
            if response.status_code >= 400:
                resp_body: bytes = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_detail(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            self._ingest(event)

        return response

    def _ingest(self, event: dict[str, Any]) -> None:
        """Axiom 전송 — 실패는 경고 로그만 남김 (Ingest failures are logged, never raised)."""
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:  # noqa: BLE001
            logger.warning("Axiom ingest failed for %s %s: %s", event["method"], event["path"], exc)

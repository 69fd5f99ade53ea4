"""Starlette application: point read/write, report, and the command stream.

Routes:
    GET  /tracker/{subject}          hour total as plain text (404 if unknown)
    POST /tracker/{subject}?hours=N  add N hours (202 on success)
    GET  /report                     ``[{"subject", "hours"}, ...]`` ranked
    WS   /ws                         JSON command stream (see ``stream``)

Plain ``def`` endpoints run in Starlette's worker threadpool, so a slow
ledger write never blocks the event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route, WebSocketRoute

from studyhours.config.settings import StudySettings
from studyhours.server.stream import stream_endpoint
from studyhours.services.result import ServiceResult

if TYPE_CHECKING:
    from starlette.requests import Request

    from studyhours.services.study import StudyService

log = structlog.get_logger(__name__)

_STATUS_FOR_CODE: dict[str, int] = {
    "INVALID_AMOUNT": 400,
    "INVALID_SUBJECT": 400,
    "INVALID_COMMAND": 400,
    "SUBJECT_NOT_FOUND": 404,
    "STORAGE_UNAVAILABLE": 500,
}


def status_for(result: ServiceResult) -> int:
    """HTTP status for a failed result. Unknown codes are server faults."""
    code = result.error.code if result.error else ""
    return _STATUS_FOR_CODE.get(code, 500)


def _error_response(result: ServiceResult) -> Response:
    return JSONResponse(result.model_dump(mode="json"), status_code=status_for(result))


def _service(request: Request) -> StudyService:
    return request.app.state.service


# ── Endpoints ─────────────────────────────────────────────────────────


def tracker_endpoint(request: Request) -> Response:
    subject: str = request.path_params["subject"]
    if not subject.strip():
        return _error_response(
            ServiceResult.failure("tracker", "INVALID_SUBJECT", "subject must not be blank")
        )
    if request.method == "POST":
        return _record(request, subject)
    return _read(request, subject)


def _read(request: Request, subject: str) -> Response:
    result = _service(request).get_hours(subject)
    if not result.ok:
        return _error_response(result)
    return PlainTextResponse(str(result.data["hours"]))


def _record(request: Request, subject: str) -> Response:
    raw = request.query_params.get("hours", "")
    # ASCII digits only: int() also accepts underscores and padding.
    hours = int(raw) if raw.isascii() and raw.isdigit() else 0
    if hours <= 0:
        log.debug("tracker.rejected", subject=subject, hours=raw)
        return _error_response(
            ServiceResult.failure(
                "record_manual",
                "INVALID_AMOUNT",
                f"hours must be a positive integer, got {raw!r}",
            )
        )

    result = _service(request).record_manual(subject, hours)
    if not result.ok:
        return _error_response(result)
    return JSONResponse(result.model_dump(mode="json"), status_code=202)


def report_endpoint(request: Request) -> Response:
    result = _service(request).get_report()
    if not result.ok:
        return _error_response(result)
    return JSONResponse(result.data["items"])


# ── Factories ─────────────────────────────────────────────────────────


def create_app(service: StudyService) -> Starlette:
    """Build the application around an injected service."""
    app = Starlette(
        routes=[
            Route("/report", report_endpoint, methods=["GET"]),
            Route("/tracker/{subject:path}", tracker_endpoint, methods=["GET", "POST"]),
            WebSocketRoute("/ws", stream_endpoint),
        ]
    )
    app.state.service = service
    return app


def create_app_from_settings(settings: StudySettings | None = None) -> Starlette:
    """Open the configured store and build the application.

    With no argument, settings are discovered as for the CLI, which makes
    this usable as ``uvicorn --factory studyhours.server:create_app_from_settings``.
    """
    from studyhours.services.study import build_study_service

    settings = settings or StudySettings.from_cli()

    return create_app(build_study_service(settings))

"""WebSocket command stream.

Each inbound frame (text, or UTF-8 bytes) is one JSON command::

    {"command": "record_manual", "subject": "tdd", "hours": 2}
    {"command": "start_pomodoro", "subject": "tdd"}

Every command gets exactly one ``{"type": "result", ...}`` reply (a
serialized ServiceResult). Pomodoro alerts are pushed as ``{"type":
"alert", "subject", "message"}`` while the session runs. A bad command
is answered with an error result; the connection stays open.

Commands on one connection are handled in order. Blocking service calls
run in the worker threadpool so other connections keep going.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, StrictInt, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.websockets import WebSocket, WebSocketDisconnect

from studyhours.services.result import ServiceResult

if TYPE_CHECKING:
    from starlette.types import Message

    from studyhours.domain.pomodoro import AlertSink
    from studyhours.services.study import StudyService

log = structlog.get_logger(__name__)

RECORD_MANUAL = "record_manual"
START_POMODORO = "start_pomodoro"
_OP = "stream_command"
ALERT_SEND_TIMEOUT = 10.0


class StreamCommand(BaseModel):
    """One decoded stream message."""

    model_config = {"frozen": True}

    command: str
    subject: str = ""
    hours: StrictInt | None = None


def decode_command(raw: str) -> StreamCommand | ServiceResult:
    """Parse *raw* JSON, or return the error result to send back."""
    try:
        return StreamCommand.model_validate_json(raw)
    except ValidationError as exc:
        bad_hours = any(err["loc"][:1] == ("hours",) for err in exc.errors())
        code = "INVALID_AMOUNT" if bad_hours else "INVALID_COMMAND"
        return ServiceResult.failure(_OP, code, f"malformed command: {exc.error_count()} error(s)")


class CommandStream:
    """Dispatches decoded commands for one WebSocket connection."""

    def __init__(self, websocket: WebSocket, service: StudyService) -> None:
        self._ws = websocket
        self._service = service
        self._loop = asyncio.get_running_loop()

    async def handle(self, raw: str) -> ServiceResult:
        decoded = decode_command(raw)
        if isinstance(decoded, ServiceResult):
            return decoded

        if decoded.command == RECORD_MANUAL:
            if decoded.hours is None:
                return ServiceResult.failure(
                    RECORD_MANUAL, "INVALID_AMOUNT", "hours is required for record_manual"
                )
            return await run_in_threadpool(
                self._service.record_manual, decoded.subject, decoded.hours
            )
        if decoded.command == START_POMODORO:
            return await run_in_threadpool(
                self._service.record_pomodoro, decoded.subject, self._alert_sink(decoded.subject)
            )
        return ServiceResult.failure(
            _OP,
            "INVALID_COMMAND",
            f"unknown command {decoded.command!r}",
            data={"command": decoded.command},
        )

    async def reply(self, result: ServiceResult) -> bool:
        """Send *result*; False when the peer has already gone away."""
        try:
            await self._ws.send_json({"type": "result", **result.model_dump(mode="json")})
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            log.debug("stream.reply_dropped", op=result.op, error=str(exc))
            return False
        return True

    def _alert_sink(self, subject: str) -> AlertSink:
        """Sink for worker and timer threads; blocks until the alert is sent.

        Waiting on the send keeps every alert ahead of the result frame.
        Never call it from the event loop thread.
        """

        def notify(message: str) -> None:
            payload = {"type": "alert", "subject": subject, "message": message}
            future = asyncio.run_coroutine_threadsafe(self._ws.send_json(payload), self._loop)
            try:
                future.result(timeout=ALERT_SEND_TIMEOUT)
            except Exception as exc:
                future.cancel()
                log.debug("stream.alert_dropped", subject=subject, error=str(exc))

        return notify


def frame_text(message: Message) -> str | None:
    """Text payload of a receive message; binary frames are decoded as UTF-8."""
    if message.get("text") is not None:
        return message["text"]
    data = message.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


async def stream_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    stream = CommandStream(websocket, websocket.app.state.service)
    log.debug("stream.opened", client=str(websocket.client))
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            break
        raw = frame_text(message)
        if raw is None:
            result = ServiceResult.failure(
                _OP, "INVALID_COMMAND", "frame is neither text nor UTF-8 bytes"
            )
        else:
            result = await stream.handle(raw)
        if not result.ok:
            log.info("stream.command_failed", code=result.error.code if result.error else None)
        if not await stream.reply(result):
            break
    log.debug("stream.closed", client=str(websocket.client))

"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from studyhours.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from studyhours.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)

    if verbose:
        _render_meta(console, result)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "get_hours":
        return str(result.data.get("hours", ""))
    if result.op == "report":
        return "\n".join(f"{item['subject']} {item['hours']}" for item in result.data["items"])
    return f"OK: {result.op}"


def render_alert(subject: str, message: str) -> str:
    """One-line pomodoro alert."""
    console = create_console()
    console.print(Text(f"[{subject}] ", style="study.subject"), Text(message, style="study.alert"))
    return get_output(console).rstrip("\n")


def render_warning(message: str) -> str:
    """One-line warning for stderr."""
    console = create_console()
    console.print(Text("WARNING", style="study.warning"), Text(f": {message}"), sep="")
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="study.ok"), Text(f"  {result.op}", style="study.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = {"subject": "study.subject", "hours": "study.hours"}.get(key, "")
    console.print(Text(f"  {key}: ", style="study.key"), Text(str(value), style=style))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block including the telemetry span tree."""
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    prefix = " " * indent
    console.print(f"{prefix}{span.get('name', '?')}  {span.get('duration_ms', 0.0):.2f}ms")
    for child in span.get("children", []):
        _render_span(console, child, indent + 2)


# ── Operation renderers ───────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_hours(result: ServiceResult, console: Console) -> None:
    data = result.data
    console.print(
        Text(data["subject"], style="study.subject"),
        Text(f"{data['hours']} hours", style="study.hours"),
    )


def _render_report(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print(Text("No study hours recorded yet.", style="dim"))
        return
    table = Table(title="Study report", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Subject", style="study.subject")
    table.add_column("Hours", justify="right", style="study.hours")
    for rank, item in enumerate(items, start=1):
        table.add_row(str(rank), item["subject"], str(item["hours"]))
    console.print(table)


def _render_error(result: ServiceResult, console: Console) -> None:
    error = result.error
    code = error.code if error else "ERROR"
    message = error.message if error else "Unknown error"
    console.print(
        Text("ERROR", style="study.error"),
        Text(f"  {result.op}", style="study.op"),
        Text(f"  [{code}] {message}"),
    )


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "get_hours": _render_hours,
    "report": _render_report,
}

"""Tests for result formatting and Rich renderers."""

from __future__ import annotations

import json

from studyhours.output.formatters import OutputSettings, format_result
from studyhours.output.renderers import render_alert, render_quiet, render_result, render_warning
from studyhours.services.result import ServiceResult

_REPORT = ServiceResult(
    ok=True,
    op="report",
    data={"items": [{"subject": "TDD", "hours": 6}, {"subject": "Docker", "hours": 4}], "count": 2},
)


class TestFormatResult:
    def test_json_mode(self) -> None:
        out = format_result(_REPORT, settings=OutputSettings(json_output=True))
        assert json.loads(out)["data"]["count"] == 2

    def test_json_wins_over_quiet(self) -> None:
        out = format_result(_REPORT, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["op"] == "report"

    def test_default_is_rich(self) -> None:
        out = format_result(_REPORT)
        assert "Study report" in out


class TestRenderers:
    def test_report_table_ranks(self) -> None:
        out = render_result(_REPORT)
        assert out.index("TDD") < out.index("Docker")

    def test_generic_fields(self) -> None:
        out = render_result(
            ServiceResult(ok=True, op="record_manual", data={"subject": "bash", "hours": 2})
        )
        assert "OK" in out
        assert "record_manual" in out
        assert "subject: bash" in out

    def test_error_line(self) -> None:
        result = ServiceResult.failure("get_hours", "SUBJECT_NOT_FOUND", "subject not found: 'x'")
        out = render_result(result)
        assert "ERROR" in out
        assert "[SUBJECT_NOT_FOUND]" in out

    def test_verbose_renders_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="record_manual",
            meta={"telemetry": {"name": "StudyService.record_manual", "duration_ms": 1.5}},
        )
        out = render_result(result, verbose=True)
        assert "StudyService.record_manual" in out
        assert "1.50ms" in out

    def test_quiet_hours(self) -> None:
        result = ServiceResult(ok=True, op="get_hours", data={"subject": "x", "hours": 7})
        assert render_quiet(result) == "7"

    def test_quiet_report(self) -> None:
        assert render_quiet(_REPORT) == "TDD 6\nDocker 4"

    def test_quiet_error(self) -> None:
        result = ServiceResult.failure("report", "STORAGE_UNAVAILABLE", "down")
        assert render_quiet(result) == "ERROR: report — down"

    def test_alert(self) -> None:
        assert render_alert("tdd", "Halfway there") == "[tdd] Halfway there"

    def test_warning(self) -> None:
        assert render_warning("slow disk") == "WARNING: slow disk"

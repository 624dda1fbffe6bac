from __future__ import annotations

import json
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import typer

if TYPE_CHECKING:
    from ..data.sample import ExtractionError


@dataclass(frozen=True)
class ErrorReport:
    error_type: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    exception: str | None = None
    traceback: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, object]:
        return {
            "created_at": self.created_at.isoformat(),
            "error_type": self.error_type,
            "message": self.message,
            "exception": self.exception,
            "traceback": self.traceback,
            "context": self.context,
        }


class ErrorSink(Protocol):
    def record(self, report: ErrorReport) -> None: ...


def report_from_error(error: ExtractionError) -> ErrorReport:
    cause = error.cause
    return ErrorReport(
        error_type=error.kind.value,
        message=error.message,
        context=dict(error.context),
        exception=f"{type(cause).__name__}: {cause}" if cause is not None else None,
        traceback=(
            "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
            if cause is not None
            else None
        ),
    )


class JsonErrorLog:
    """Writes each report to its own ``error_<timestamp>.json`` file."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _next_path(self, created_at: datetime) -> Path:
        stem = f"error_{created_at:%Y%m%d_%H%M%S}"
        path = self.directory / f"{stem}.json"
        n = 1
        while path.exists():
            path = self.directory / f"{stem}_{n}.json"
            n += 1
        return path

    def record(self, report: ErrorReport) -> Path | None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path = self._next_path(report.created_at)
            with path.open("w", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, indent=2, ensure_ascii=False, default=str)
                f.write("\n")
        except OSError as exc:
            typer.echo(f"Could not write error log to '{self.directory}': {exc}", err=True)
            return None
        return path

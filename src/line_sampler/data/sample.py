from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable

from ..utils.error_log import ErrorSink, report_from_error

RESULT_LABEL = "Random extraction result"
COUNT_LABEL = "Extracted lines"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

ProgressSink = Callable[[str], None]


class ErrorKind(str, Enum):
    INVALID_PATH = "invalid_path"
    FILE_NOT_FOUND = "file_not_found"
    INVALID_COUNT = "invalid_count"
    READ_ERROR = "read_error"
    EMPTY_FILE = "empty_file"
    COUNT_EXCEEDS_AVAILABLE = "count_exceeds_available"
    DIRECTORY_CREATE_ERROR = "directory_create_error"
    WRITE_ERROR = "write_error"


class ExtractionError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        context: dict[str, object] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context = dict(context or {})
        self.cause = cause


@dataclass(frozen=True)
class ExtractionRequest:
    input_path: Path | str
    output_path: Path | str
    count: int
    include_timestamp: bool = True


@dataclass(frozen=True)
class ExtractionResult:
    success: bool
    error: ExtractionError | None = None
    lines: tuple[str, ...] = field(default_factory=tuple)
    source_indices: tuple[int, ...] = field(default_factory=tuple)

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None


def _validate_input(request: ExtractionRequest) -> Path:
    raw = str(request.input_path) if request.input_path is not None else ""
    if not raw.strip():
        raise ExtractionError(
            ErrorKind.INVALID_PATH,
            "No input file path was given.",
            {"input_path": raw},
        )

    input_path = Path(raw)
    try:
        found = input_path.is_file()
    except (OSError, ValueError) as exc:
        raise ExtractionError(
            ErrorKind.FILE_NOT_FOUND,
            f"Input file cannot be accessed: {input_path} ({exc})",
            {"input_path": str(input_path)},
            cause=exc,
        ) from exc
    if not found:
        raise ExtractionError(
            ErrorKind.FILE_NOT_FOUND,
            f"Input file does not exist: {input_path}",
            {"input_path": str(input_path)},
        )

    if not isinstance(request.count, int) or isinstance(request.count, bool) or request.count < 1:
        raise ExtractionError(
            ErrorKind.INVALID_COUNT,
            f"Line count must be a positive integer, got {request.count!r}.",
            {"requested_count": request.count, "input_path": str(input_path)},
        )

    if request.output_path is None or not str(request.output_path).strip():
        raise ExtractionError(
            ErrorKind.INVALID_PATH,
            "No output file path was given.",
            {"input_path": str(input_path), "output_path": str(request.output_path or "")},
        )
    return input_path


def read_lines(path: Path) -> list[str]:
    """Read a text file into lines without their terminators.

    Accepts ``\\n``, ``\\r\\n`` and ``\\r`` line endings. A trailing terminator
    does not produce an extra empty line, so an empty file yields ``[]``.
    """
    with path.open("r", encoding="utf-8-sig", errors="replace") as f:
        text = f.read()

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _read_input(path: Path) -> list[str]:
    try:
        return read_lines(path)
    except (OSError, ValueError) as exc:
        raise ExtractionError(
            ErrorKind.READ_ERROR,
            f"Could not read '{path}': {exc}",
            {"input_path": str(path)},
            cause=exc,
        ) from exc


def sample_lines(
    lines: list[str], count: int, rng: random.Random
) -> tuple[list[str], list[int]]:
    """Pick ``count`` distinct positions uniformly, keeping the draw order."""
    indices = list(range(len(lines)))
    rng.shuffle(indices)
    chosen = indices[:count]
    return [lines[i] for i in chosen], chosen


def format_output(lines: list[str], include_timestamp: bool, now: datetime | None = None) -> str:
    out: list[str] = []
    if include_timestamp:
        stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        out.append(f"# {RESULT_LABEL} - {stamp}")
        out.append(f"# {COUNT_LABEL}: {len(lines)}")
        out.append("")
    out.extend(lines)
    return "".join(line + "\n" for line in out)


def _ensure_output_dir(output_path: Path) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, ValueError) as exc:
        raise ExtractionError(
            ErrorKind.DIRECTORY_CREATE_ERROR,
            f"Could not create output directory '{output_path.parent}': {exc}",
            {"output_path": str(output_path)},
            cause=exc,
        ) from exc


def _write_output(output_path: Path, payload: str, line_count: int, include_timestamp: bool) -> None:
    try:
        with output_path.open("w", encoding="utf-8", newline="\n") as out:
            out.write(payload)
    except (OSError, ValueError) as exc:
        raise ExtractionError(
            ErrorKind.WRITE_ERROR,
            f"Could not write '{output_path}': {exc}",
            {
                "output_path": str(output_path),
                "line_count": line_count,
                "include_timestamp": include_timestamp,
            },
            cause=exc,
        ) from exc


def _run(request: ExtractionRequest, emit: ProgressSink, rng: random.Random) -> ExtractionResult:
    emit("Validating input file...")
    input_path = _validate_input(request)

    emit("Reading file...")
    lines = _read_input(input_path)
    if not lines:
        raise ExtractionError(
            ErrorKind.EMPTY_FILE,
            "The input file contains no lines.",
            {"input_path": str(input_path)},
        )

    emit("Checking line count...")
    if request.count > len(lines):
        raise ExtractionError(
            ErrorKind.COUNT_EXCEEDS_AVAILABLE,
            f"Requested line count ({request.count}) exceeds the lines in the file ({len(lines)}).",
            {
                "requested_count": request.count,
                "available_lines": len(lines),
                "input_path": str(input_path),
            },
        )

    emit(f"Extracting {request.count} random lines...")
    sampled, indices = sample_lines(lines, request.count, rng)
    payload = format_output(sampled, request.include_timestamp)

    output_path = Path(request.output_path)
    emit("Preparing output directory...")
    _ensure_output_dir(output_path)

    emit("Writing results to file...")
    _write_output(output_path, payload, len(sampled), request.include_timestamp)

    emit(f"Done: extracted {request.count} lines.")
    return ExtractionResult(success=True, lines=tuple(sampled), source_indices=tuple(indices))


def extract(
    request: ExtractionRequest,
    on_progress: ProgressSink | None = None,
    error_log: ErrorSink | None = None,
    seed: int | None = None,
) -> ExtractionResult:
    """Write ``request.count`` randomly chosen lines of the input to the output file.

    Never raises for expected failures: the outcome is returned as an
    ``ExtractionResult``, an ``"Error: ..."`` message goes to ``on_progress``
    and a report goes to ``error_log``. The output file is only opened once
    every validation has passed and the sample is complete.

    ``seed`` fixes the random draw; by default every call draws fresh entropy.
    """

    def emit(message: str) -> None:
        if on_progress is not None:
            on_progress(message)

    rng = random.Random(seed)
    try:
        return _run(request, emit, rng)
    except ExtractionError as exc:
        if error_log is not None:
            error_log.record(report_from_error(exc))
        emit(f"Error: {exc.message}")
        return ExtractionResult(success=False, error=exc)

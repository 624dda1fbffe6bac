from __future__ import annotations

from pathlib import Path


def _count_token(count: int | None) -> str:
    if count is None:
        return "random"
    return f"random{count}"


def default_output_filename(input_path: Path, count: int | None) -> str:
    return f"{input_path.stem}_{_count_token(count)}.txt"


def default_output_path(input_path: Path, count: int | None) -> Path:
    return input_path.parent / default_output_filename(input_path, count)


def list_text_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")
    return sorted(p for p in directory.glob("*.txt") if p.is_file())

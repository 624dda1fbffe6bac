from dataclasses import replace
from pathlib import Path
import sys

import typer

from .config import DEFAULT_SETTINGS_PATH, SamplerSettings, load_settings, save_settings

app = typer.Typer(help="Extract random lines from a text file")


PICKER_PROMPT = "Select input file (Up/Down, Enter, q to cancel):"


def _stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


def _handle_picker_key(key: int, selected: int, total: int) -> tuple[int | None, bool]:
    """Apply one key press to the picker cursor.

    Returns the new cursor and whether the picker is done. A finished picker
    with a ``None`` cursor means the user cancelled.
    """
    import curses

    if key in (curses.KEY_UP, ord("k")):
        return max(0, selected - 1), False
    if key in (curses.KEY_DOWN, ord("j")):
        return min(total - 1, selected + 1), False
    if key in (10, 13, curses.KEY_ENTER):
        return selected, True
    if key in (27, ord("q")):
        return None, True
    return selected, False


def _scroll_top(selected: int, top: int, rows: int) -> int:
    if selected < top:
        return selected
    if selected >= top + rows:
        return selected - rows + 1
    return top


def _interactive_select_file(directory: Path = Path(".")) -> Path | None:
    import curses

    from .data.paths import list_text_files

    options = list_text_files(directory)
    if not options:
        raise FileNotFoundError(f"No .txt files found in '{directory}'.")
    if len(options) == 1:
        return options[0]

    def _draw(stdscr, selected: int, top: int) -> int:
        height, width = stdscr.getmaxyx()
        rows = max(1, height - 3)
        top = _scroll_top(selected, top, rows)
        stdscr.erase()
        stdscr.addstr(0, 0, PICKER_PROMPT[: max(1, width - 1)])
        for offset, path in enumerate(options[top : top + rows]):
            attr = curses.A_REVERSE if top + offset == selected else curses.A_NORMAL
            stdscr.addstr(offset + 2, 0, str(path)[: max(1, width - 1)], attr)
        stdscr.refresh()
        return top

    def _pick(stdscr) -> int | None:
        curses.curs_set(0)
        selected: int | None = 0
        top = 0
        done = False
        while not done:
            top = _draw(stdscr, selected, top)
            selected, done = _handle_picker_key(stdscr.getch(), selected, len(options))
        return selected

    idx = curses.wrapper(_pick)
    return options[idx] if idx is not None else None


def _load_settings_or_exit(settings_path: Path) -> SamplerSettings:
    try:
        return load_settings(settings_path)
    except (ValueError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("extract")
def extract_command(
    input_path: Path | None = typer.Argument(
        None, help="Text file to sample from (defaults to the saved input path)"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (defaults to the saved output path)"
    ),
    count: int | None = typer.Option(None, "--count", "-n", help="Number of lines to extract"),
    timestamp: bool | None = typer.Option(
        None, "--timestamp/--no-timestamp", help="Prepend a date/time header to the output"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Fix the random draw (for reproducible runs)"),
    settings: Path = typer.Option(
        DEFAULT_SETTINGS_PATH, "--settings", help="Path to the persisted settings YAML"
    ),
    error_dir: Path = typer.Option(
        Path("."), "--error-dir", help="Directory for JSON error reports"
    ),
    save: bool = typer.Option(
        True, "--save/--no-save", help="Remember the used values for the next run"
    ),
) -> None:
    from .data.paths import default_output_path
    from .data.sample import ExtractionRequest, extract
    from .utils.error_log import JsonErrorLog

    current = _load_settings_or_exit(settings)

    selected_input = input_path
    if selected_input is None and current.input_path:
        selected_input = Path(current.input_path)
    if selected_input is None and _stdin_is_interactive():
        typer.echo("Selecting input file...")
        try:
            selected_input = _interactive_select_file()
        except FileNotFoundError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        if selected_input is None:
            typer.echo("File selection was cancelled.")
            raise typer.Exit(code=1)

    selected_count = count if count is not None else current.count
    include_timestamp = timestamp if timestamp is not None else current.include_timestamp

    selected_output = output
    if selected_output is None and current.output_path:
        selected_output = Path(current.output_path)
    if selected_output is None and selected_input is not None:
        selected_output = default_output_path(selected_input, selected_count)

    request = ExtractionRequest(
        input_path=selected_input if selected_input is not None else "",
        output_path=selected_output if selected_output is not None else "",
        count=selected_count,
        include_timestamp=include_timestamp,
    )

    typer.echo("Starting random line extraction...")
    result = extract(
        request,
        on_progress=typer.echo,
        error_log=JsonErrorLog(error_dir),
        seed=seed,
    )
    if not result.success:
        raise typer.Exit(code=1)

    typer.echo(f"Wrote output: {request.output_path}")
    if save:
        save_settings(
            SamplerSettings(
                input_path=str(request.input_path),
                output_path=str(request.output_path),
                count=request.count,
                include_timestamp=request.include_timestamp,
            ),
            settings,
        )


@app.command("settings")
def settings_command(
    settings: Path = typer.Option(
        DEFAULT_SETTINGS_PATH, "--settings", help="Path to the persisted settings YAML"
    ),
) -> None:
    current = _load_settings_or_exit(settings)
    typer.echo(f"input_path: {current.input_path}")
    typer.echo(f"output_path: {current.output_path}")
    typer.echo(f"count: {current.count}")
    typer.echo(f"include_timestamp: {current.include_timestamp}")


@app.command("settings-set")
def settings_set_command(
    input_path: Path | None = typer.Option(None, "--input", "-i", help="Input text file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
    count: int | None = typer.Option(None, "--count", "-n", min=1, help="Number of lines"),
    timestamp: bool | None = typer.Option(
        None, "--timestamp/--no-timestamp", help="Prepend a date/time header"
    ),
    settings: Path = typer.Option(
        DEFAULT_SETTINGS_PATH, "--settings", help="Path to the persisted settings YAML"
    ),
) -> None:
    current = _load_settings_or_exit(settings)
    changes: dict[str, object] = {}
    if input_path is not None:
        changes["input_path"] = str(input_path)
    if output is not None:
        changes["output_path"] = str(output)
    if count is not None:
        changes["count"] = count
    if timestamp is not None:
        changes["include_timestamp"] = timestamp

    if not changes:
        typer.echo("Nothing to update.")
        return

    save_settings(replace(current, **changes), settings)
    typer.echo(f"Updated settings: {settings}")


def main() -> None:
    app()

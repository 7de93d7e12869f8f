"""Command line interface for checking saved server payloads."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import typer

from comfywire.config import get_config
from comfywire.reader import read_history, read_node_defs, read_queue
from comfywire.validation import validate_settings, validate_ws_message

app = typer.Typer(help="CLI for comfywire contracts")

# Command groups
check_app = typer.Typer(help="Validate saved payloads against the wire contracts")

app.add_typer(check_app, name="check")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, help="Logging level (defaults to the configured level)"
    ),
) -> None:
    """comfywire CLI entry point."""
    config = get_config()
    logging.basicConfig(level=(log_level or config.logging.level).upper())


def _load_json(path: Path) -> Any:
    if not path.exists():
        typer.secho(f"File not found: {path}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        typer.secho(f"Not valid JSON: {path}: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _collector() -> Tuple[List[str], Callable[[str], None]]:
    messages: List[str] = []
    return messages, messages.append


def _report(
    kind: str, accepted: int, errors: List[str], strict: bool, verbose: bool
) -> None:
    typer.echo(f"{kind}: {accepted} accepted, {len(errors)} rejected")
    for message in errors:
        # First line names the record; the rest is the validator's detail.
        typer.secho(message if verbose else message.splitlines()[0][:200], fg=typer.colors.YELLOW)
    if strict and errors:
        raise typer.Exit(code=1)


@check_app.command("node-defs")
def check_node_defs(
    path: Path,
    strict: bool = typer.Option(False, help="Exit with code 1 if any entry is rejected"),
    verbose: bool = typer.Option(False, help="Print full validation errors"),
) -> None:
    """
    Validate an ``/object_info`` dump.

    Example:
        comfywire check node-defs object_info.json --strict
    """
    errors, sink = _collector()
    registry = read_node_defs(_load_json(path), on_error=sink)
    _report("Node definitions", len(registry), errors, strict, verbose)


@check_app.command("queue")
def check_queue(
    path: Path,
    strict: bool = typer.Option(False, help="Exit with code 1 if any entry is rejected"),
    verbose: bool = typer.Option(False, help="Print full validation errors"),
) -> None:
    """Validate a ``/queue`` dump."""
    errors, sink = _collector()
    snapshot = read_queue(_load_json(path), on_error=sink)
    typer.echo(f"Running: {len(snapshot.running)}\tPending: {len(snapshot.pending)}")
    _report("Queue items", snapshot.size, errors, strict, verbose)


@check_app.command("history")
def check_history(
    path: Path,
    strict: bool = typer.Option(False, help="Exit with code 1 if any entry is rejected"),
    verbose: bool = typer.Option(False, help="Print full validation errors"),
) -> None:
    """Validate a ``/history`` dump and list each prompt's outcome."""
    errors, sink = _collector()
    items = read_history(_load_json(path), on_error=sink)
    for item in items:
        outcome = item.status.status_str if item.status else "unknown"
        typer.echo(f"{item.prompt_id}\t{outcome}\t{len(item.outputs)} outputs")
    _report("History items", len(items), errors, strict, verbose)


@check_app.command("events")
def check_events(
    path: Path,
    strict: bool = typer.Option(False, help="Exit with code 1 if any frame is rejected"),
    verbose: bool = typer.Option(False, help="Print full validation errors"),
) -> None:
    """
    Validate a capture of WebSocket frames, one JSON object per line.

    Example:
        comfywire check events ws_capture.jsonl
    """
    if not path.exists():
        typer.secho(f"File not found: {path}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    errors, sink = _collector()
    accepted = 0
    for lineno, line in enumerate(path.read_text().splitlines(), start=1):
        if not line.strip():
            continue
        try:
            frame = json.loads(line)
        except json.JSONDecodeError as e:
            sink(f"Line {lineno} is not valid JSON: {e}")
            continue
        if validate_ws_message(frame, on_error=sink).success:
            accepted += 1
    _report("Frames", accepted, errors, strict, verbose)


@check_app.command("settings")
def check_settings(
    path: Path,
    strict: bool = typer.Option(False, help="Exit with code 1 if the settings are rejected"),
    verbose: bool = typer.Option(False, help="Print full validation errors"),
) -> None:
    """Validate a stored settings file."""
    errors, sink = _collector()
    result = validate_settings(_load_json(path), on_error=sink)
    if result.success:
        unknown = sorted(result.data.extra_fields)
        if unknown:
            typer.echo(f"Unrecognized keys kept: {', '.join(unknown)}")
    _report("Settings", 1 if result.success else 0, errors, strict, verbose)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()

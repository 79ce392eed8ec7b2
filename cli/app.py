from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_report
from models.errors import LogEvaluationError
from services.evaluation import detect_format, evaluate_log_file_with_report
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Evaluate sensor logs locally or through the evaluation service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Evaluation API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the API before giving up.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("evaluate")
def evaluate_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a .json or .txt log."),
    log_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Declared format (json or txt); defaults to the file extension.",
    ),
) -> None:
    """Evaluate a log file in-process and print each sensor's classification."""
    declared = (log_format or detect_format(file.name) or get_settings().default_log_format).lower()
    try:
        content = file.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        typer.secho(f"Error: {file} is not valid UTF-8 text.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    try:
        report = evaluate_log_file_with_report(content, declared)
    except LogEvaluationError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    render_report(
        {
            "file_name": file.name,
            "format": declared,
            "sensor_count": report.sensor_count,
            "results": report.results,
            "processing_ms": report.processing_ms,
            "diagnostics": [
                {"line_number": item.line_number, "line": item.line, "reason": item.reason}
                for item in report.diagnostics
            ],
        }
    )


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a .json or .txt log."),
    log_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Declared format sent to the API instead of the file extension.",
    ),
) -> None:
    """Send a log file to the evaluation service and print the response."""
    state = _get_state(ctx)
    typer.echo(f"Uploading {file} to {state.config.base_url} ...")
    payload = state.client.evaluate_file(file, log_format)
    typer.echo()
    render_report(payload)

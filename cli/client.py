from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig

_CONTENT_TYPES = {".json": "application/json", ".txt": "text/plain"}


class ApiClient:
    """Minimal HTTP client for the evaluation service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def evaluate_file(self, path: Path, log_format: Optional[str] = None) -> Dict[str, Any]:
        if not path.is_file():
            raise typer.BadParameter(f"Path {path} is not a file.")

        params = {"format": log_format} if log_format else None
        content_type = _CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream")
        try:
            with path.open("rb") as handle:
                response = self._client.post(
                    "/evaluations",
                    params=params,
                    files={"file": (path.name, handle, content_type)},
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc

        payload = response.json()
        if not isinstance(payload.get("results"), dict):
            raise typer.BadParameter("Unexpected response payload when evaluating file.")
        return payload

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

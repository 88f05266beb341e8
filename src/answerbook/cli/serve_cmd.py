"""CLI command for hosting the HTTP API."""

from __future__ import annotations

from typing import Optional

import typer


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: api.host)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default: api.port)."),
) -> None:
    """Serve the answer API; the browser starts and stops with the server."""
    import uvicorn

    from answerbook.api.app import create_app
    from answerbook.settings import get_settings

    api = get_settings().api
    uvicorn.run(create_app(), host=host or api.host, port=port or api.port)


def register_serve_command(app: typer.Typer) -> None:
    app.command("serve")(serve_command)

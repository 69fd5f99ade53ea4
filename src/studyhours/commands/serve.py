"""serve — run the HTTP/WebSocket server under uvicorn."""

from __future__ import annotations

import click

from studyhours.commands._base import StudyCommand


@click.command(
    cls=StudyCommand,
    examples="""\
  # Serve on the configured address (default 127.0.0.1:5000)
  studyhours serve

  # Listen on all interfaces
  studyhours serve --host 0.0.0.0 --port 9000""",
)
@click.option("--host", default=None, help="Bind address (default from [server] host).")
@click.option("--port", default=None, type=int, help="Listen port (default from [server] port).")
@click.pass_obj
def serve(app: object, host: str | None, port: int | None) -> None:
    """Start the HTTP and WebSocket server."""
    import uvicorn

    from studyhours.commands._context import AppContext
    from studyhours.server import create_app

    assert isinstance(app, AppContext)
    server_cfg = app.settings.server
    asgi_app = create_app(app.service)
    uvicorn.run(
        asgi_app,
        host=host or server_cfg.host,
        port=port or server_cfg.port,
        log_config=None,
    )

"""This module defines the 'serve' command, which runs the web API."""

import click
import uvicorn


@click.command("serve")
@click.option("--host", default="0.0.0.0", help="Host to bind the server to.")
@click.option("--port", default=8000, type=int, help="Port to bind the server to.")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def serve(host: str, port: int, reload: bool) -> None:
    """Start the LicitaSaaS web server.

    Args:
        host: The interface to bind.
        port: The port to bind.
        reload: Whether to reload on code changes.
    """
    click.echo(f"Starting server at http://{host}:{port}")
    uvicorn.run("licitasaas.web.main:app", host=host, port=port, reload=reload, log_level="info")

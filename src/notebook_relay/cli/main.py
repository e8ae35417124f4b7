#!/usr/bin/env python3
"""
CLI interface for the Notebook Relay service.
"""

import sys

import click
import uvicorn
from loguru import logger
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config.settings import ENV_VAR_NAMES, get_settings
from ..core.logging import setup_logging
from ..utils.urls import is_valid_url

console = Console()

# Settings each handler cannot run without
REQUIRED_BY_HANDLER = {
    "process-document": ["document_processing_webhook_url"],
    "send-chat-message": ["notebook_chat_url", "notebook_generation_auth"],
}
URL_FIELDS = ["supabase_url", "document_processing_webhook_url", "notebook_chat_url"]


@click.group()
@click.version_option(version=__version__)
def app():
    """Notebook Relay CLI."""
    pass


@app.command()
@click.option("--host", default=None, help="Host to bind to (defaults to RELAY_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to RELAY_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host, port, reload: bool):
    """Start the relay server."""
    settings = get_settings()
    setup_logging("notebook-relay", settings.log_level, settings.log_json)
    logger.info("Starting Notebook Relay server")

    uvicorn.run(
        "notebook_relay.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("check-config")
def check_config():
    """Report which relay settings are present and well-formed."""
    settings = get_settings()
    problems = []

    table = Table(title="Relay configuration")
    table.add_column("Variable")
    table.add_column("Set")
    table.add_column("Format")

    for field_name, env_name in ENV_VAR_NAMES.items():
        value = getattr(settings, field_name)
        if field_name in URL_FIELDS and value:
            valid = is_valid_url(value)
            fmt = "✅ valid URL" if valid else "❌ invalid URL"
            if not valid:
                problems.append(f"{env_name} is not a valid URL")
        else:
            fmt = "-"
        table.add_row(env_name, "✅" if value else "❌", fmt)

    console.print(table)

    for handler, fields in REQUIRED_BY_HANDLER.items():
        for field_name in fields:
            if not getattr(settings, field_name):
                problems.append(f"{handler}: {ENV_VAR_NAMES[field_name]} is not set")

    if problems:
        for problem in problems:
            console.print(f"[red]• {problem}[/red]")
        sys.exit(1)

    console.print("[green]Configuration looks good[/green]")


if __name__ == "__main__":
    app()

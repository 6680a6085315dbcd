"""CLI entry point for running the forwarding function locally."""

import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.console import ConsoleLogger
from ui.log_utils import write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            source = CONFIG_FILE if CONFIG_FILE.exists() else "(defaults, no file)"
            console.print(f"[bold]Config:[/bold] {source}")
            console.print_json(config.model_dump_json())
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        _print_help()
        sys.exit(2)

    if not config.forward.verify_tls:
        console.print("[yellow]Warning:[/yellow] TLS certificate verification is disabled")

    request_logger = ConsoleLogger(config.logging)

    import uvicorn

    app = create_app(config, request_logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    log_root = Path(config.logging.log_root)
    console.print(
        f"[bold cyan]Forwarding function[/bold cyan] on http://{config.server.host}:{config.server.port}"
        f"  direct={config.server.direct_path}  event={config.server.event_path}"
    )
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", log_root=log_root, port=config.server.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", log_root=log_root, duration=str(duration))
        request_logger.print_summary()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]HTTP Forwarding Function[/bold cyan]

Forwards HTTP requests described in a JSON envelope to any origin and returns
the origin's response in the matching envelope.

[bold]Usage:[/bold]
    fc-proxy              Start a local server
    fc-proxy --config     Show config location and effective settings
    fc-proxy --help       Show this help

[bold]Endpoints:[/bold]
    POST /         Direct envelope {method, url, body, headers}
    POST /event    API gateway event {httpMethod, path, queryString, ...}
"""
    console.print(help_text)


if __name__ == "__main__":
    main()

"""Console request log for the forwarding function."""

import logging
from datetime import datetime
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.config import LoggingSettings
from ui.log_utils import write_cli_log, write_forward_log

logger = logging.getLogger(__name__)


class ConsoleLogger:
    """Print one line per invocation and keep per-transport counters."""

    def __init__(self, settings: LoggingSettings, console: Console | None = None):
        self.settings = settings
        self.console = console or Console(stderr=True)
        self._lock = Lock()
        self._forwarded: dict[str, int] = {}
        self._errors: dict[str, int] = {}
        self._log_root = Path(settings.log_root)

    def log_forward(
        self,
        transport: str,
        method: str,
        target: str,
        status: int,
        elapsed_ms: float,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Log a request forwarded to its origin."""
        with self._lock:
            self._forwarded[transport] = self._forwarded.get(transport, 0) + 1
            if self.settings.console:
                style = "green" if status < 400 else "yellow"
                self.console.print(
                    f"[dim]{_now()}[/dim] [cyan]{transport}[/cyan] {escape(method)} {escape(target)} "
                    f"[{style}]{status}[/{style}] [dim]{elapsed_ms:.0f}ms[/dim]",
                    highlight=False,
                )
            if self.settings.cli_log:
                self._write_cli("FORWARD", f"{method} {target}", transport=transport, status=status)
            if self.settings.request_logs:
                try:
                    write_forward_log(
                        transport,
                        method,
                        target,
                        status,
                        elapsed_ms,
                        headers,
                        log_root=self._log_root,
                    )
                except OSError as e:
                    logger.warning("Could not write request log: %s", e)

    def log_error(self, transport: str, status: int, message: str) -> None:
        """Log a failed invocation."""
        with self._lock:
            self._errors[transport] = self._errors.get(transport, 0) + 1
            if self.settings.console:
                truncated = message[:120] + "..." if len(message) > 120 else message
                self.console.print(
                    f"[dim]{_now()}[/dim] [cyan]{transport}[/cyan] [red bold]{status}[/red bold] "
                    f"[red]{escape(truncated)}[/red]",
                    highlight=False,
                )
            if self.settings.cli_log:
                self._write_cli("ERROR", message[:200], transport=transport, status=status)

    def counts(self) -> dict[str, tuple[int, int]]:
        """Return ``transport -> (forwarded, errors)``."""
        with self._lock:
            names = sorted(set(self._forwarded) | set(self._errors))
            return {n: (self._forwarded.get(n, 0), self._errors.get(n, 0)) for n in names}

    def print_summary(self) -> None:
        """Print a table of invocation counts per transport."""
        table = Table(title="Invocations", header_style="bold", box=None)
        table.add_column("Transport", style="cyan")
        table.add_column("Forwarded", justify="right", style="green")
        table.add_column("Errors", justify="right", style="red")
        for name, (forwarded, errors) in self.counts().items():
            table.add_row(name, str(forwarded), str(errors))
        self.console.print(table)

    def _write_cli(self, level: str, message: str, **extra: object) -> None:
        try:
            write_cli_log(level, message, log_root=self._log_root, **extra)
        except OSError as e:
            logger.warning("Could not write CLI log: %s", e)


def _now() -> str:
    return datetime.now().strftime("%H:%M:%S")

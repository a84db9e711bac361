import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from rich.box import HEAVY, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from filecache.domain.interfaces.user_interface import UserInterface
from filecache.domain.models.metadata import CacheItemMetadata

logger = logging.getLogger(__name__)


def _format_unixtime(value: int) -> str:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (OverflowError, OSError, ValueError):
        return str(value)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output.

    Values go to stdout so they can be piped; messages go to stderr.
    """

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    @property
    def error_console(self) -> Console:
        return self._error_console

    def display_value(self, value: Any) -> None:
        """Prints a value as indented JSON."""
        self.console.print_json(json.dumps(value, ensure_ascii=False))

    def display_metadata(self, namespace: str, name: str, metadata: CacheItemMetadata, now: int) -> None:
        table = Table(title=f"{namespace}/{name}", box=SIMPLE, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Created", _format_unixtime(metadata.created_unixtime))
        if metadata.is_immortal:
            table.add_row("TTL", "never expires")
        else:
            table.add_row("TTL", f"{metadata.ttl_secs}s")
            table.add_row("Expires", _format_unixtime(metadata.expires_unixtime))
            if metadata.is_expired(now):
                table.add_row("Status", "[red]expired[/red]")
            else:
                remaining = max(metadata.expires_unixtime - now, 0)
                table.add_row("Status", f"[green]fresh[/green] ({remaining}s left)")
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.error_console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.error_console.print(f"[blue]Info:[/blue] {info_message}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.debug(f"Display warning: {warning_message}")
        self.error_console.print(f"[bold yellow]Warning:[/bold yellow] {warning_message}")

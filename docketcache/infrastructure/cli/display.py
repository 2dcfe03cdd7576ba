import logging
import time
from datetime import datetime
from typing import Any, Mapping

from rich.console import Console
from rich.panel import Panel
from rich.box import ROUNDED, HEAVY, SIMPLE
from rich.text import Text
from rich.table import Table
from rich.align import Align

from docketcache.domain.interfaces.user_interface import UserInterface
from docketcache.domain.models.common import PromptText, ProcessedOutput, CacheStats

logger = logging.getLogger(__name__)

class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Console = None):
        """Initializes the rich Console."""
        self.console = console or Console()
        self.session_start_time = time.time()
        self.command_count = 0

    def display_output(self, output: ProcessedOutput, **kwargs: Any) -> None:
        """Displays a value returned by the cache inside a titled panel.

        Args:
            output: The text to display.
            **kwargs: Additional arguments including:
                - title: Panel title (default: "Result")
        """
        title = kwargs.get("title", "Result")
        timestamp = datetime.now().strftime("%H:%M:%S")
        header = f"[bold white]{title}[/bold white] [dim]·[/dim] [dim white]{timestamp}[/dim white]"
        panel = Panel(
            Text(str(output)),
            title=header,
            title_align="left",
            border_style="blue",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)

    def get_prompt(self, prompt_message: str = "> ") -> PromptText:
        """Reads one console line from the user.

        Args:
            prompt_message: The message to display before the input cursor.

        Returns:
            The text input by the user.
        """
        user_input = self.console.input(f"[bold green]{prompt_message}[/bold green]")
        self.command_count += 1
        return PromptText(user_input)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message."""
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message."""
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_stats(self, stats: CacheStats, limits: Mapping[str, Any]) -> None:
        """Renders cache statistics and configured limits as a table."""
        table = Table(title="Query Cache", box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="bold")

        table.add_row("Hits", str(stats["hits"]))
        table.add_row("Misses", str(stats["misses"]))
        table.add_row("Hit rate", f"{stats['hit_rate']:.2f}%")
        table.add_row("Entries", f"{stats['size']} / {limits.get('max_size', '?')}")
        for name, value in limits.items():
            if name == "max_size":
                continue
            table.add_row(name.replace("_", " ").capitalize(), str(value))

        self.console.print(table)

    def display_session_header(self) -> None:
        """Displays a header for a new console session."""
        table = Table(show_header=False, box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Content", style="cyan")
        table.add_row("[bold cyan]docketcache console[/bold cyan]")
        table.add_row(f"Session started at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        table.add_row("Type 'help' for commands, 'exit' or 'quit' to end the session")
        self.console.print("")
        self.console.print(Align.center(table))
        self.console.print("")

    def display_session_footer(self, command_count: int, session_duration_secs: float) -> None:
        """Displays a summary at the end of a console session."""
        minutes, seconds = divmod(int(session_duration_secs), 60)
        hours, minutes = divmod(minutes, 60)
        duration_str = f"{hours}h {minutes}m {seconds}s" if hours else f"{minutes}m {seconds}s"

        table = Table(show_header=False, box=SIMPLE, border_style="cyan", padding=(0, 1))
        table.add_column("Content", style="cyan")
        table.add_row("[bold cyan]Session Summary[/bold cyan]")
        table.add_row(f"Commands executed: [bold]{command_count}[/bold]")
        table.add_row(f"Session duration: [bold]{duration_str}[/bold]")
        self.console.print("")
        self.console.print(Align.center(table))
        self.console.print("")

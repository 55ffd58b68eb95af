"""Rich console output: diagnostics on stderr, results on stdout"""

from datetime import datetime
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text
from rich import box

from .models import ProcessRef
from .config import Config


# Everything a human reads goes to stderr so stdout can be captured
err_console = Console(stderr=True)
console = Console(highlight=False)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
PROCESS_COLUMNS = ["#", "UID", "PID", "PPID", "C", "STIME", "TTY", "TIME", "CMD"]


def print_error(message: str):
    """Print error message"""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str):
    """Print success message"""
    err_console.print(f"[bold green]✓[/bold green] {escape(message)}")


def print_info(message: str):
    """Print info message"""
    err_console.print(f"[cyan]ℹ[/cyan] {escape(message)}")


def print_warning(message: str):
    """Print warning message"""
    err_console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_hint(message: str):
    err_console.print(f"[dim]{escape(message)}[/dim]")


def timestamp(now: datetime = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def print_event(message: str, now: datetime = None):
    """Print a timestamped progress line"""
    err_console.print(f"{timestamp(now)} — {escape(message)}")


def format_elapsed(seconds: float) -> str:
    """Human readable elapsed time, e.g. '1h 05m' or '3m'"""
    minutes = int(seconds // 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def display_process_table(term: str, matches: List[ProcessRef]):
    """Show the numbered list of processes matching a search term"""
    print_warning(f"Found {len(matches)} processes matching '{term}':")

    table = Table(show_header=True, box=box.SIMPLE)
    for column in PROCESS_COLUMNS:
        if column == "#":
            table.add_column(column, style="cyan", no_wrap=True)
        elif column == "CMD":
            table.add_column(column, style="white", overflow="fold")
        else:
            table.add_column(column, style="dim", no_wrap=True)

    for idx, ref in enumerate(matches, 1):
        table.add_row(*(Text(cell) for cell in ref.table_row(idx)))

    err_console.print(table)


def ask_selection(count: int) -> str:
    """
    Prompt for a row number or a new search term

    Raises:
        EOFError: input was closed
        KeyboardInterrupt: user pressed Ctrl+C
    """
    return Prompt.ask(
        f"Select process (1-{count}) or enter new search term",
        console=err_console,
        default="",
        show_default=False
    )


def emit_result(value):
    """Write a result to stdout, the only thing that ever goes there"""
    console.print(str(value), markup=False, soft_wrap=True)


def display_config(cfg: Config):
    """Show configuration"""
    err_console.print("[bold]Configuration:[/bold]")
    err_console.print(f"Poll interval: {cfg.poll_interval_seconds} seconds")
    err_console.print(f"Timer interval: {cfg.timer_interval_seconds} seconds")
    err_console.print(f"Prevent display sleep: {'yes' if cfg.prevent_display_sleep else 'no'}")
    err_console.print(f"Case-insensitive search: {'yes' if cfg.ignore_case else 'no'}")
    err_console.print(f"Inhibitor stop timeout: {cfg.stop_timeout_seconds} seconds")

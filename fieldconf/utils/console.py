"""Rich-based console output utilities."""

from rich.console import Console
from rich.theme import Theme

from fieldconf import __version__

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "info": "bold blue",
        "key": "bold cyan",
        "masked": "dim",
    }
)

# Global console instances
console = Console(theme=custom_theme)
console_err = Console(theme=custom_theme, stderr=True)


def print_error(message: str) -> None:
    """Print error message in red."""
    from fieldconf.utils.logging import log_message

    console_err.print(f"[error][[ERROR]][/error] [red]{message}[/red]", highlight=False)
    log_message(f"ERROR: {message}")


def print_success(message: str) -> None:
    """Print success message in green."""
    from fieldconf.utils.logging import log_message

    console.print(f"[success][[SUCCESS]][/success] [green]{message}[/green]", highlight=False)
    log_message(f"SUCCESS: {message}")


def print_info(message: str) -> None:
    """Print info message in blue/cyan."""
    from fieldconf.utils.logging import log_message

    console.print(f"[info][[INFO]][/info] [cyan]{message}[/cyan]")
    log_message(f"INFO: {message}")


def show_version() -> None:
    """Display version information."""
    console.print(f"[bold]fieldconf[/bold] v{__version__}")


__all__ = [
    "console",
    "console_err",
    "custom_theme",
    "print_error",
    "print_success",
    "print_info",
    "show_version",
]

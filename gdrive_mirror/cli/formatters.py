"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gdrive_mirror.models.config import MirrorConfig


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "CredentialError": [
            "• Download an OAuth client secrets file from the Google Cloud console.",
            "• Point --credentials at it, or save it as ~/.credentials.json.",
            "• Your cached token may be revoked. Delete it and run "
            "`gdrive-mirror login` again.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `gdrive-mirror init --force` to write a fresh one.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config: MirrorConfig, console: Console | None = None):
    """Displays the effective configuration."""
    console = console or Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Credentials File:", f"[dim]{config.credentials_file}[/dim]")
    table.add_row("Token File:", f"[dim]{config.token_file}[/dim]")
    table.add_row("Output Directory:", f"[dim]{config.output_dir}[/dim]")
    table.add_row("Max Workers:", str(config.max_workers))
    table.add_row("Request Timeout:", f"{config.request_timeout:g}s")

    source = config_path if config_path.is_file() else "defaults"
    console.print(
        Panel(
            table,
            title=f"Configuration ([dim]{source}[/dim])",
            border_style="cyan",
        )
    )

"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from gdrive_mirror import __version__
from gdrive_mirror.api.auth import DriveAuthenticator
from gdrive_mirror.api.client import DriveAPIClient
from gdrive_mirror.core.mirror_manager import MirrorManager
from gdrive_mirror.models.config import MirrorConfig
from gdrive_mirror.storage.config_manager import ConfigManager
from gdrive_mirror.utils.input import read_lines
from gdrive_mirror.utils.signals import AdvisorySignalListener

from .formatters import print_config

console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("gdrive_mirror")

app = typer.Typer(
    name="gdrive-mirror",
    help=(
        "Mirror Google Drive files into a local folder tree. File ids are read"
        " from stdin, one per line. Use 'gdrive-mirror <command> --help' for more"
        " info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "gdrive-mirror"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the effective configuration."
    ),
):
    """Google Drive Mirror CLI"""
    if version:
        console.print(f"[bold]gdrive-mirror[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("gdrive_mirror").setLevel(log_level)

    if show_config:
        config = ConfigManager(CONFIG_FILE).load_config()
        print_config(CONFIG_FILE, config, console)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    credentials: str | None = typer.Option(
        None, "--credentials", "-c", help="Path to the OAuth client secrets file."
    ),
    token: str | None = typer.Option(
        None, "--token", "-t", help="Where to cache the authorized user token."
    ),
    workers: int | None = typer.Option(
        None, "-w", "--workers", help="Number of files mirrored concurrently."
    ),
    output: str | None = typer.Option(
        None, "-o", "--output", help="Root folder of the local mirror."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a configuration file with the given settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    ConfigManager(CONFIG_FILE).save_new_config(
        {
            "credentials_file": credentials,
            "token_file": token,
            "max_workers": workers,
            "output_dir": output,
        }
    )
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command()
def login(
    credentials: str | None = typer.Option(
        None, "--credentials", "-c", help="Path to the OAuth client secrets file."
    ),
    token: str | None = typer.Option(
        None, "--token", "-t", help="Where to cache the authorized user token."
    ),
):
    """Authorize read-only Drive access and cache the token."""
    config = ConfigManager(CONFIG_FILE).load_config(
        {"credentials_file": credentials, "token_file": token}
    )
    _build_authenticator(config).get_credentials()
    console.print("[green]✓ Authenticated with Google Drive.[/green]")


def _build_authenticator(config: MirrorConfig) -> DriveAuthenticator:
    return DriveAuthenticator(Path(config.credentials_file), Path(config.token_file))


@app.command(name="mirror")
def mirror_command(
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of files mirrored concurrently (default 10).",
    ),
    output: str | None = typer.Option(
        None, "-o", "--output", help="Root folder of the local mirror."
    ),
    credentials: str | None = typer.Option(
        None, "--credentials", "-c", help="Path to the OAuth client secrets file."
    ),
    token: str | None = typer.Option(
        None, "--token", "-t", help="Where to cache the authorized user token."
    ),
):
    """Mirror the files whose ids are read from stdin until end of input."""
    config = ConfigManager(CONFIG_FILE).load_config(
        {
            "max_workers": workers,
            "output_dir": output,
            "credentials_file": credentials,
            "token_file": token,
        }
    )
    authenticator = _build_authenticator(config)
    authenticator.get_credentials()

    async def _mirror_async():
        async with DriveAPIClient(
            authenticator.access_token,
            max_workers=config.max_workers,
            request_timeout=config.request_timeout,
        ) as client:
            manager = MirrorManager(config, client)
            async with AdvisorySignalListener():
                log.info(
                    f"Reading file ids from stdin ({config.max_workers} workers)."
                    " Close the input (Ctrl+D) to finish."
                )
                await manager.run(read_lines(sys.stdin.buffer))

    asyncio.run(_mirror_async())

"""Command-line interface commands for oscbridge."""

import json
import sys
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..config import Config
from ..devices import GameDevice
from ..logger import get_logger
from ..osc import OscValue

console = Console()


class ReplayError(Exception):
    """Raised when a recording cannot be replayed."""


def read_recording(path: Path) -> Iterator[dict]:
    """Yield channel update events from a JSON-lines recording."""
    with open(path, "r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError as e:
                raise ReplayError(f"line {line_no}: invalid JSON ({e.msg})") from e
            missing = [field for field in ("type", "id", "key") if field not in event]
            if missing:
                raise ReplayError(f"line {line_no}: missing {', '.join(missing)}")
            yield event


def replay_recording(
    path: Path,
    is_tps: bool,
    config: Config
) -> Dict[Tuple[str, str], GameDevice]:
    """Apply every update in a recording to freshly created devices."""
    devices: Dict[Tuple[str, str], GameDevice] = {}
    channels: Dict[Tuple[str, str, str], OscValue] = {}

    for event in read_recording(path):
        device_key = (event["type"], event["id"])
        device = devices.get(device_key)
        if device is None:
            device = GameDevice(event["type"], event["id"], is_tps, config.detector)
            devices[device_key] = device

        channel_key = (event["type"], event["id"], event["key"])
        channel = channels.get(channel_key)
        if channel is None:
            channel = OscValue()
            channels[channel_key] = channel
            device.add_key(event["key"], channel)
        channel.set(event.get("value"))

    return devices


@click.group()
@click.version_option(version=__version__, prog_name="oscbridge")
@click.option(
    "--env-file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .env configuration file"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging"
)
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path], verbose: bool) -> None:
    """oscbridge: game device length detection and feature extraction."""
    ctx.ensure_object(dict)

    try:
        config = Config.load_from_env(str(env_file) if env_file else None)
    except ValueError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    if verbose:
        config.logging.level = "DEBUG"

    ctx.obj["config"] = config
    ctx.obj["logger"] = get_logger(
        "oscbridge",
        level=config.logging.level,
        log_file=config.logging.file_path,
        max_size=config.logging.max_size,
        backup_count=config.logging.backup_count
    )


@cli.command()
@click.argument("recording", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tps", is_flag=True, help="Treat devices as using the TPS parameter set")
@click.option("--status", "show_status", is_flag=True, help="Print the device status text")
@click.pass_context
def replay(ctx: click.Context, recording: Path, tps: bool, show_status: bool) -> None:
    """Replay recorded channel updates and show the resulting features."""
    config: Config = ctx.obj["config"]
    logger = ctx.obj["logger"]

    try:
        devices = replay_recording(recording, tps, config)
    except ReplayError as e:
        console.print(f"[red]✗[/red] Replay failed: {e}")
        sys.exit(1)

    logger.debug(f"Replayed {recording} into {len(devices)} device(s)")

    if not devices:
        console.print("[yellow]No devices found in recording[/yellow]")
        return

    table = Table(title="Device Features", show_header=True)
    table.add_column("Device", style="cyan")
    table.add_column("Feature")
    table.add_column("Value", justify="right", style="green")

    for device in devices.values():
        for source in device.get_sources():
            table.add_row(f"{source.device_type.value}:{source.device_id}",
                          source.feature_name, f"{source.value:.3f}")

    console.print(table)

    if show_status:
        for device in devices.values():
            console.print(device.get_status(), markup=False, highlight=False)


@cli.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective length detector configuration."""
    config: Config = ctx.obj["config"]

    table = Table(title="Length Detector", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in config.detector.model_dump().items():
        table.add_row(name, str(value))
    table.add_row("log level", config.logging.level)

    console.print(table)

"""CLI entry point for the box scanner.

Usage:
    boxscan estimate 2.0 1.0 1.0 3.0                 # Box from two faces' extents
    boxscan replay configs/scripts/two_faces.yaml    # Drive a recorded scan
    boxscan info                                     # Show scanner config
"""

from __future__ import annotations

import math
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from boxscan.core.config import ScannerConfig
from boxscan.core.contracts import FLOAT32_MAX, ScanSession
from boxscan.core.logging import setup_logging

app = typer.Typer(name="boxscan", help="Estimate box dimensions from two detected planar faces")
console = Console()

DEFAULT_CONFIG = Path("configs/scanner.yaml")


def _load_config_or_exit(config: Path) -> ScannerConfig:
    """Load ``config``; a missing default config falls back to built-in defaults."""
    from boxscan.core.config import load_config
    from boxscan.core.errors import ConfigurationError

    if config == DEFAULT_CONFIG and not config.exists():
        return ScannerConfig()
    try:
        return load_config(config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _observations_table(session: ScanSession) -> Table:
    from boxscan.scan.collector import describe_extent

    table = Table(title=f"Collected surfaces (generation {session.generation})")
    table.add_column("#", style="dim")
    table.add_column("Id", style="cyan")
    table.add_column("Extent", style="green")
    table.add_column("Used", style="yellow")
    for i, obs in enumerate(session.observations, 1):
        table.add_row(str(i), obs.id, describe_extent(obs), "Y" if i <= 2 else "N")
    return table


@app.command()
def estimate(
    h1: float = typer.Argument(..., help="Height extent of the first face"),
    w1: float = typer.Argument(..., help="Width extent of the first face"),
    h2: float = typer.Argument(..., help="Height extent of the second face"),
    w2: float = typer.Argument(..., help="Width extent of the second face"),
) -> None:
    """Estimate a box from the extents of two faces."""
    from boxscan.scan.estimator import estimate_from_extents, match_shared_edge

    for value in (h1, w1, h2, w2):
        if not math.isfinite(value) or not 0 <= value <= FLOAT32_MAX:
            console.print(f"[red]Extents must be finite, non-negative single-precision values, got {value}[/red]")
            raise typer.Exit(1)

    pairing = match_shared_edge(h1, w1, h2, w2)
    box = estimate_from_extents(h1, w1, h2, w2)

    table = Table(title="Estimated box")
    table.add_column("Width", style="cyan")
    table.add_column("Height", style="cyan")
    table.add_column("Length", style="cyan")
    table.add_column("Shared edge", style="dim")
    table.add_row(f"{box.width:.3f}", f"{box.height:.3f}", f"{box.length:.3f}", pairing.name)
    console.print(table)


@app.command()
def replay(
    script: Path = typer.Argument(..., help="Scan script (YAML)"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Scanner config path"),
    report_url: str = typer.Option(None, "--report-url", "-u", help="Override the collector endpoint"),
) -> None:
    """Replay a recorded scan script through the session state machine."""
    from boxscan.core.errors import ConfigurationError
    from boxscan.replay_runner import run_scan_script
    from boxscan.scan.controller import ScanController
    from boxscan.scan.detector import RecordingDetector

    cfg = _load_config_or_exit(config)
    if report_url:
        cfg = cfg.model_copy(update={"report_url": report_url})
    setup_logging(cfg.log_level)

    controller = ScanController.from_config(
        cfg,
        RecordingDetector(),
        on_status=lambda s: console.print(f"[dim]{s.state.value:>11}[/dim] {s.status}"),
    )
    try:
        session = run_scan_script(script, controller)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(_observations_table(session))
    if session.last_box is None:
        console.print(f"[yellow]No box: {session.last_error or session.status}[/yellow]")
        raise typer.Exit(2)
    box = session.last_box
    console.print(f"[green]Box:[/green] {box.width:.3f} x {box.height:.3f} x {box.length:.3f}")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Scanner config path")) -> None:
    """Show the scanner configuration."""
    cfg = _load_config_or_exit(config)
    table = Table(title="Scanner config")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Description", style="dim")

    for name, field in ScannerConfig.model_fields.items():
        table.add_row(name, str(getattr(cfg, name)), field.description or "")
    table.add_row("reporting_enabled", "Y" if cfg.reporting_enabled else "N", "auto_report and report_url both set")
    console.print(table)


if __name__ == "__main__":
    app()

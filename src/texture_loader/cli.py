# 🖥️ texture_loader/cli.py
"""
🖥️ Командний рядок `texture-loader`.

🔹 `fetch URL` — завантажує одне зображення (кеш або мережа) і друкує його параметри.
🔹 `memory [--trace-heap]` — друкує знімок пам'яті з урахуванням запасу (і купу Python).
🔹 `batch URL N` — завантажує URL N разів під контролем пам'яті.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import typer															# 🖥️ CLI

# 🔠 Системні імпорти
import asyncio
import logging
import tracemalloc
from pathlib import Path
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from texture_loader.config import ConfigService, Container, bootstrap_logging
from texture_loader.domain.textures.interfaces import DecodedImage, FetchFailure, FetchRequest
from texture_loader.shared.metrics import maybe_start_prometheus
from texture_loader.shared.utils.logger import LOG_NAME

app = typer.Typer(help="Load images from a local cache or the network", no_args_is_help=True)
logger = logging.getLogger(f"{LOG_NAME}.cli")


def _build_container(ctx: typer.Context) -> Container:
    config: ConfigService = ctx.obj["config"]
    return Container(config)


def _describe(image: DecodedImage) -> str:
    orientation = image.orientation
    return (
        f"{image.name or image.source_path}: {image.pixel_width}x{image.pixel_height} "
        f"flip_h={orientation.flipped_horizontally} flip_v={orientation.flipped_vertically}\n"
        f"  source: {image.source_path}\n"
        f"  cache:  {image.cache_path or '-'}"
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Extra YAML config file"),
    metrics_port: Optional[int] = typer.Option(None, "--metrics-port", help="Expose Prometheus metrics on this port"),
) -> None:
    """Texture loader utilities."""
    config = ConfigService(config_path)
    bootstrap_logging(config)
    if metrics_port:
        maybe_start_prometheus(metrics_port)
    ctx.obj = {"config": config}


@app.command()
def fetch(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Image URL or local path"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the local cache probe"),
) -> None:
    """Fetch one image and print its size and origin."""
    container = _build_container(ctx)

    def _progress(value: float) -> None:
        logger.debug("📶 %s: %.0f%%", url, value * 100)

    outcome = asyncio.run(
        container.orchestrator.load(FetchRequest(url=url, use_cache=not no_cache), on_progress=_progress)
    )
    if outcome is None or isinstance(outcome, FetchFailure):
        reason = "cancelled" if outcome is None else f"[{outcome.kind.value}] {outcome.reason}"
        typer.echo(f"error: {reason}", err=True)
        raise typer.Exit(code=1)
    origin = "cache" if outcome.from_cache else "network"
    typer.echo(f"{_describe(outcome.image)}\n  from:   {origin}")


@app.command()
def memory(
    ctx: typer.Context,
    trace_heap: bool = typer.Option(False, "--trace-heap", help="Trace Python heap while building services"),
) -> None:
    """Print the current memory snapshot."""
    if trace_heap:
        tracemalloc.start()
    try:
        container = _build_container(ctx)
        display = container.memory_gate.snapshot().as_display()
    finally:
        if trace_heap:
            tracemalloc.stop()
    for key, value in display.items():
        typer.echo(f"{key:>12}: {value}")
    typer.echo(f"{'safe':>12}: {container.memory_gate.safe_to_allocate()}")


@app.command()
def batch(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Image URL or local path"),
    count: int = typer.Argument(..., min=1, help="How many times to load the image"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the local cache probe"),
) -> None:
    """Load one URL N times and print the batch report."""
    container = _build_container(ctx)
    report = asyncio.run(container.batch_loader.load_many(url, count, use_cache=not no_cache))
    typer.echo(
        f"requested={report.requested} workers={report.concurrency} "
        f"issued={report.issued} succeeded={report.succeeded} "
        f"failed={report.failed} skipped_by_memory={report.skipped_by_memory}"
    )
    if report.first is not None:
        typer.echo(_describe(report.first))
    for failure in report.errors[:5]:
        typer.echo(f"error: [{failure.kind.value}] {failure.reason}", err=True)
    if report.succeeded == 0:
        raise typer.Exit(code=1)


__all__ = ["app"]

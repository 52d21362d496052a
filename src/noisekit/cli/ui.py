from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import typer

from noisekit.core.noise.base import NoiseGenerator, serialize_noise
from noisekit.orchestrator.config import FieldConfig


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def _truncate(value: str, max_len: int = 60) -> str:
    if len(value) <= max_len:
        return value
    return f"{value[:max_len]}..."


def print_run_header(
    command: str,
    *,
    noise: NoiseGenerator | None,
    field: FieldConfig | None = None,
    config_path: Path | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    if config_path is not None:
        typer.echo(f"[config] path={_abs_path(config_path)}")
    if noise is not None:
        typer.echo(
            f"[noise] tag={noise.tag} dims={noise.min_dimension}-{noise.max_dimension} seed={noise.seed} "
            f"record={_truncate(serialize_noise(noise))}"
        )
    if field is not None:
        extra = ",".join(str(e) for e in field.extra) or "none"
        typer.echo(
            f"[field] size={field.size} scale={field.scale} offset={field.offset[0]},{field.offset[1]} extra={extra}"
        )


def print_field_summary(fingerprint: str, minimum: float, maximum: float, mean: float) -> None:
    typer.echo(f"[result] min={minimum:.6f} max={maximum:.6f} mean={mean:.6f}")
    typer.echo(f"[result] field_fingerprint={fingerprint}")

from __future__ import annotations

import json
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import typer

from noisekit.core import constants
from noisekit.core.noise.base import (
    NoiseDimensionError,
    NoiseGenerator,
    deserialize_noise,
    get_noise,
    list_noise_tags,
    serialize_noise,
)
from noisekit.core.noise.catalog import NAMES, describe, resolve_tag
from noisekit.core.serial.codec import SerializationError
from noisekit.io.formats import save_field, write_json
from noisekit.orchestrator.config import ConfigError, FieldConfig, parse_config
from noisekit.orchestrator.pipeline import (
    build_noise_field,
    load_generator,
    roundtrip as roundtrip_noise,
    save_generator,
    selftest_failures,
)
from noisekit.render.preview import render_field, render_histogram
from noisekit.cli.ui import print_field_summary, print_run_header
from noisekit.utils.logging import resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help="noisekit: composable, seedable 2D-6D noise generators")


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress at INFO level"),
    debug: bool = typer.Option(False, "--debug", help="Log details at DEBUG level"),
):
    setup_logging(resolve_log_level(verbose, debug))
    set_command_context(ctx.invoked_subcommand or "noisekit")


def parse_coords(coords: str) -> Tuple[float, ...]:
    try:
        parts = coords.split(",") if "," in coords else coords.split()
        values = tuple(float(p.strip()) for p in parts)
    except ValueError as exc:
        raise typer.BadParameter("coords must be given as 'x,y[,z...]'") from exc
    if not 2 <= len(values) <= constants.MAX_DIMENSION:
        raise typer.BadParameter(f"coords need 2 to {constants.MAX_DIMENSION} values, got {len(values)}")
    return values


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _resolve_noise(
    noise_type: Optional[str],
    record: Optional[str],
    config: Optional[Path],
    record_file: Optional[Path] = None,
) -> Tuple[NoiseGenerator, Optional[FieldConfig]]:
    sources = [noise_type is not None, record is not None, config is not None, record_file is not None]
    if sum(sources) != 1:
        _fail("Choose exactly one of --noise, --record, --config or --in.")
    try:
        if config is not None:
            cfg = parse_config(config)
            return cfg.noise, cfg.field
        if record is not None:
            return deserialize_noise(record), None
        if record_file is not None:
            return load_generator(record_file), None
        return get_noise(resolve_tag(noise_type)), None
    except ConfigError as exc:
        _fail(f"Config error: {exc}")
    except (SerializationError, ValueError) as exc:
        _fail(str(exc))


@app.command()
def tags():
    """List every registered noise tag."""
    by_tag = {tag: name for name, tag in NAMES.items()}
    for tag in list_noise_tags():
        noise = get_noise(tag)
        typer.echo(f"{tag}  {type(noise).__name__:<20} {by_tag.get(tag, '-'):<9} dims={noise.min_dimension}-{noise.max_dimension}")


@app.command("describe")
def describe_cmd(
    noise_type: Optional[str] = typer.Option(None, "--noise", "-n", help="Noise type name or tag"),
    record: Optional[str] = typer.Option(None, "--record", "-r", help="Serialized tagged record"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML noise config"),
):
    """Print a generator's capabilities as JSON."""
    noise, _ = _resolve_noise(noise_type, record, config)
    typer.echo(json.dumps(describe(noise), indent=2))


@app.command()
def sample(
    coords: str = typer.Option(..., "--coords", "-x", help="Coordinates as 'x,y[,z...]'"),
    noise_type: Optional[str] = typer.Option(None, "--noise", "-n", help="Noise type name or tag"),
    record: Optional[str] = typer.Option(None, "--record", "-r", help="Serialized tagged record"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML noise config"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Evaluate with this seed instead of the stored one"),
):
    """Evaluate noise at one point."""
    point = parse_coords(coords)
    noise, _ = _resolve_noise(noise_type, record, config)
    try:
        value = noise.get_noise(*point) if seed is None else noise.get_noise_with_seed(*point, seed=seed)
    except NoiseDimensionError as exc:
        _fail(str(exc))
    typer.echo(repr(value))


@app.command()
def render(
    out: Path = typer.Option(..., "--out", "-o", help="PNG output path"),
    noise_type: Optional[str] = typer.Option(None, "--noise", "-n", help="Noise type name or tag"),
    record: Optional[str] = typer.Option(None, "--record", "-r", help="Serialized tagged record"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML noise config"),
    size: Optional[int] = typer.Option(None, "--size", help="Field size (NxN)"),
    scale: Optional[float] = typer.Option(None, "--scale", help="Distance between samples"),
    extra: List[float] = typer.Option([], "--extra", "-e", help="Fixed value for each coordinate past y"),
    npy: Optional[Path] = typer.Option(None, "--npy", help="Also save the raw field as .npy"),
    histogram: Optional[Path] = typer.Option(None, "--hist", help="Also save a value histogram PNG"),
    out_json: Optional[Path] = typer.Option(None, "--out-json", help="Write a JSON summary"),
):
    """Sample a 2D slice of noise and save it as a grayscale PNG."""
    noise, field_cfg = _resolve_noise(noise_type, record, config)
    if field_cfg is None:
        field_cfg = FieldConfig(
            size=constants.DEFAULT_FIELD_SIZE,
            scale=constants.DEFAULT_FIELD_SCALE,
            offset=(0.0, 0.0),
            extra=(),
        )
    field_cfg = FieldConfig(
        size=size if size is not None else field_cfg.size,
        scale=scale if scale is not None else field_cfg.scale,
        offset=field_cfg.offset,
        extra=tuple(extra) if extra else field_cfg.extra,
    )
    if field_cfg.size <= 0:
        _fail("size must be positive")
    print_run_header("render", noise=noise, field=field_cfg, config_path=config)

    try:
        field, fingerprint = build_noise_field(
            noise, size=field_cfg.size, scale=field_cfg.scale, offset=field_cfg.offset, extra=field_cfg.extra
        )
    except NoiseDimensionError as exc:
        _fail(str(exc))

    try:
        render_field(field, out, title=f"{noise.tag} seed={noise.seed}")
        if npy:
            save_field(npy, field)
        if histogram:
            render_histogram(field, histogram, title=noise.tag)
        if out_json:
            write_json(
                out_json,
                {
                    "tag": noise.tag,
                    "record": serialize_noise(noise),
                    "size": field_cfg.size,
                    "scale": field_cfg.scale,
                    "offset": list(field_cfg.offset),
                    "extra": list(field_cfg.extra),
                    "min": float(field.min()),
                    "max": float(field.max()),
                    "mean": float(field.mean()),
                    "field_fingerprint": fingerprint,
                },
            )
    except OSError as exc:
        _fail(f"Failed to write outputs: {exc}")

    print_field_summary(fingerprint, float(field.min()), float(field.max()), float(field.mean()))
    typer.secho(f"Rendered → {out}", fg=typer.colors.GREEN)


@app.command()
def roundtrip(
    noise_type: Optional[str] = typer.Option(None, "--noise", "-n", help="Noise type name or tag"),
    record: Optional[str] = typer.Option(None, "--record", "-r", help="Serialized tagged record"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML noise config"),
    input_path: Optional[Path] = typer.Option(None, "--in", "-i", exists=True, readable=True, help="Record file"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the record to this file"),
):
    """Serialize a generator, read it back and check that nothing changed."""
    noise, _ = _resolve_noise(noise_type, record, config, input_path)
    probe = [0.5] * noise.min_dimension
    text, _, matches = roundtrip_noise(noise, probe=probe)
    typer.echo(text)
    if out:
        save_generator(noise, out)
        typer.secho(f"Record → {out}", fg=typer.colors.GREEN)
    if not matches:
        _fail("Round trip FAILED: the restored generator differs.")
    typer.secho("Round trip OK.", fg=typer.colors.GREEN)


@app.command()
def selftest():
    """
    Run the built-in known-answer checks (no filesystem writes).
    """
    failures = selftest_failures()
    if failures:
        for failure in failures:
            typer.secho(failure, fg=typer.colors.RED)
        typer.secho("Selftest FAILED.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho(f"Selftest passed ({len(list_noise_tags())} generators).", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

"""Click CLI for the OpenSky client.

Entry point registered in ``pyproject.toml`` as ``opensky-client``.

Subcommands::

    opensky-client states [--time T] [--icao24 A ...] [--bbox ...]   # /states
    opensky-client flights --begin B --end E [--aircraft|--arrival|--departure X]
    opensky-client track ICAO24 [--time T]                           # /tracks
    opensky-client decode {states|flights|track} FILE                # offline

Every command prints canonical JSON (or writes a snapshot with
``-o snapshot``).
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click
import httpx
import orjson

from opensky_client import __version__
from opensky_client.client import BoundingBox, OpenSkyClient
from opensky_client.config import AppConfig, LogFileConfig, resolve_config
from opensky_client.decoder import decode_flights, decode_states, decode_track
from opensky_client.errors import OpenSkyError
from opensky_client.output import SnapshotSink, StdoutSink
from opensky_client.redactor import SecretRedactingFilter, collect_secret_values
from opensky_client.report import DecodeReport
from opensky_client.serializer import (
    encode_flights_canonical,
    encode_states_canonical,
    encode_track_canonical,
)

logger = logging.getLogger("opensky_client")


# ── structured JSON log formatter ───────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON to stderr."""

    def format(self, record: logging.LogRecord) -> str:
        obj = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            obj["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(obj).decode()


_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _setup_logging(
    level: str,
    fmt: str = "json",
    secret_values: list[str] | None = None,
    log_file_config: Optional[LogFileConfig] = None,
) -> None:
    """Configure the root logger with stderr output, optional file, and redaction."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Replace handlers from a previous invocation in the same process.
    for handler in list(root.handlers):
        if getattr(handler, "_opensky_cli", False):
            root.removeHandler(handler)

    formatter = _JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    redactor = SecretRedactingFilter(secret_values)

    stderr_handler = logging.StreamHandler(sys.stderr)
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file_config and log_file_config.enabled:
        from logging.handlers import RotatingFileHandler

        log_dir = Path(log_file_config.path).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=log_file_config.path,
            maxBytes=log_file_config.max_size_bytes,
            backupCount=log_file_config.backup_count,
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        # Handler-level so records from child loggers are scrubbed too.
        handler.addFilter(redactor)
        handler._opensky_cli = True
        root.addHandler(handler)


# ── main CLI group ──────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.option("-c", "--config", "config_path", default=None,
              help="Config file path (default: $OPENSKY_CONFIG, else built-in defaults).")
@click.option("--log-level", default=None,
              type=click.Choice(["debug", "info", "warn", "error"]),
              help="Log verbosity.")
@click.option("--username", default=None, help="Override OpenSky username.")
@click.option("--password", default=None, help="Override OpenSky password.")
@click.option("-o", "--output", "output_mode", type=click.Choice(["stdout", "snapshot"]),
              default="stdout", show_default=True, help="Where canonical JSON goes.")
@click.option("-d", "--snapshot-dir", default=None, help="Override snapshot directory.")
@click.option("--validate-config", "validate_only", is_flag=True,
              help="Validate config and exit.")
@click.version_option(__version__)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Optional[str],
    log_level: Optional[str],
    username: Optional[str],
    password: Optional[str],
    output_mode: str,
    snapshot_dir: Optional[str],
    validate_only: bool,
) -> None:
    """OpenSky Network client: fetch or decode states, flights and tracks."""
    cfg_path = config_path or os.environ.get("OPENSKY_CONFIG")

    overrides: dict[str, str] = {}
    if username:
        overrides["OPENSKY_USERNAME"] = username
    if password:
        overrides["OPENSKY_PASSWORD"] = password

    try:
        cfg = resolve_config(cfg_path, overrides=overrides)
    except Exception as exc:
        click.echo(f"Config error: {exc}", err=True)
        raise SystemExit(1) from exc

    # Explicit flags win over whatever the config file says.
    if username:
        cfg.api.username = username
    if password:
        cfg.api.password = password
    if snapshot_dir:
        cfg.output.snapshot_dir = snapshot_dir

    effective_level = (
        log_level
        or os.environ.get("OPENSKY_LOG_LEVEL")
        or cfg.logging.level
    )
    secret_values = collect_secret_values(asdict(cfg), cfg.logging.redact_patterns)
    _setup_logging(effective_level, cfg.logging.format, secret_values, cfg.logging.file)

    if validate_only:
        click.echo("Configuration is valid.", err=True)
        raise SystemExit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    ctx.obj = {"config": cfg, "output_mode": output_mode}


def _emit(ctx: click.Context, kind: str, data: bytes) -> None:
    cfg: AppConfig = ctx.obj["config"]
    if ctx.obj["output_mode"] == "snapshot":
        sink = SnapshotSink(cfg.output.snapshot_dir, cfg.output.file_prefix)
    else:
        sink = StdoutSink()
    try:
        sink.write(kind, data)
    finally:
        sink.close()


def _log_report(report: DecodeReport) -> None:
    if report.variant is not None:
        logger.info("Schema variant used: %s", report.variant.value)
    for anomaly in report.anomalies:
        logger.info("Decode anomaly %s at %s: %s",
                    anomaly.code, anomaly.location or "<root>", anomaly.message)


def _client(ctx: click.Context) -> OpenSkyClient:
    return OpenSkyClient(ctx.obj["config"].api)


# ── online commands ─────────────────────────────────────────────────


@main.command()
@click.option("--time", "at_time", type=int, default=None,
              help="Seconds since epoch; omit for the current states.")
@click.option("--icao24", multiple=True, help="Transponder address (repeatable).")
@click.option("--bbox", type=(float, float, float, float), default=None,
              metavar="LAT_MIN LAT_MAX LON_MIN LON_MAX", help="Bounding box.")
@click.option("--serial", "serials", type=int, multiple=True,
              help="Own receiver serial (repeatable).")
@click.pass_context
def states(
    ctx: click.Context,
    at_time: Optional[int],
    icao24: tuple[str, ...],
    bbox: Optional[tuple[float, float, float, float]],
    serials: tuple[int, ...],
) -> None:
    """Fetch state vectors."""
    report = DecodeReport()
    box = BoundingBox(*bbox) if bbox else None
    with _client(ctx) as client:
        response = _run(lambda: client.get_states(
            time=at_time, icao24=icao24, bbox=box, serials=serials, report=report,
        ))
    _log_report(report)
    logger.info("Received %d state vectors", len(response.states))
    _emit(ctx, "states", encode_states_canonical(response, newline=True))


@main.command()
@click.option("--begin", type=int, required=True, help="Interval start (epoch seconds).")
@click.option("--end", type=int, required=True, help="Interval end (epoch seconds).")
@click.option("--aircraft", default=None, help="Filter by ICAO24 address.")
@click.option("--arrival", default=None, help="Filter by arrival airport ICAO code.")
@click.option("--departure", default=None, help="Filter by departure airport ICAO code.")
@click.pass_context
def flights(
    ctx: click.Context,
    begin: int,
    end: int,
    aircraft: Optional[str],
    arrival: Optional[str],
    departure: Optional[str],
) -> None:
    """Fetch historical flights."""
    if sum(x is not None for x in (aircraft, arrival, departure)) > 1:
        raise click.UsageError("use at most one of --aircraft, --arrival, --departure")
    if end < begin:
        raise click.BadParameter(
            f"{end} is before --begin {begin}", param_hint="'--end'"
        )

    with _client(ctx) as client:
        if aircraft:
            result = _run(lambda: client.get_flights_by_aircraft(aircraft, begin, end))
        elif arrival:
            result = _run(lambda: client.get_arrivals(arrival, begin, end))
        elif departure:
            result = _run(lambda: client.get_departures(departure, begin, end))
        else:
            result = _run(lambda: client.get_flights(begin, end))
    logger.info("Received %d flights", len(result))
    _emit(ctx, "flights", encode_flights_canonical(result, newline=True))


@main.command()
@click.argument("icao24")
@click.option("--time", "at_time", type=int, default=0, show_default=True,
              help="Any time during the flight; 0 for the live track.")
@click.pass_context
def track(ctx: click.Context, icao24: str, at_time: int) -> None:
    """Fetch the trajectory of one aircraft."""
    with _client(ctx) as client:
        result = _run(lambda: client.get_track(icao24, at_time))
    logger.info("Received %d waypoints", len(result.path))
    _emit(ctx, "track", encode_track_canonical(result, newline=True))


# ── offline decoding ────────────────────────────────────────────────


@main.command()
@click.argument("kind", type=click.Choice(["states", "flights", "track"]))
@click.argument("file", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--time", "at_time", type=int, default=None,
              help="Time the states body was requested for, if pinned.")
@click.pass_context
def decode(ctx: click.Context, kind: str, file: str, at_time: Optional[int]) -> None:
    """Decode a saved response body and print its canonical form."""
    with click.open_file(file, "rb") as fh:
        body = fh.read()
    report = DecodeReport()

    if kind == "states":
        data = encode_states_canonical(
            _run(lambda: decode_states(body, requested_time=at_time, report=report)),
            newline=True,
        )
    elif kind == "flights":
        data = encode_flights_canonical(
            _run(lambda: decode_flights(body, report=report)), newline=True
        )
    else:
        data = encode_track_canonical(
            _run(lambda: decode_track(body, report=report)), newline=True
        )

    _log_report(report)
    _emit(ctx, kind, data)


def _run(call):
    """Invoke *call*, turning package errors into a clean CLI failure."""
    try:
        return call()
    except (OpenSkyError, httpx.TransportError) as exc:
        logger.error("%s", exc)
        raise click.ClickException(str(exc)) from exc

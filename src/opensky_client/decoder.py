"""Decode whole response bodies into typed collections.

Decoding pipeline for ``/states``::

    raw bytes
      │
      ├─ JSON parse failure          → DecodeError(code="parse_error")
      ├─ top level not an object     → DecodeError(code="schema_mismatch")
      ├─ ``time`` null               → requested time substituted (anomaly)
      ├─ ``states`` null             → empty tuple (anomaly)
      └─ schema variant chain        → first variant that decodes every record

Variant chain policy (:func:`state_variant_chain`)::

    no time pinned (querying "now")  → LONG, then SHORT, then MIXED
    explicit historical time         → SHORT only

MIXED accepts 17- and 18-element records side by side and only runs once
both uniform shapes have failed.

The API schema is undocumented and has changed without notice; the chain is
a heuristic.  The variant that won is logged and stored in
``DecodeReport.variant`` so drift can be spotted, and callers can replace the
chain with ``variants=``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import orjson

from opensky_client.enums import SchemaVariant
from opensky_client.errors import DecodeError, SchemaVariantError
from opensky_client.models import FlightRecord, FlightTrack, StatesResponse
from opensky_client.records import (
    TRACK_HEADER_FIELDS,
    decode_fields,
    decode_flight,
    decode_state_vector,
    decode_waypoint,
)
from opensky_client.report import DecodeReport

logger = logging.getLogger(__name__)


def state_variant_chain(requested_time: Optional[int] = None) -> tuple[SchemaVariant, ...]:
    """Return the ordered schema variants to try for a ``/states`` body."""
    if requested_time is None:
        return (SchemaVariant.LONG, SchemaVariant.SHORT, SchemaVariant.MIXED)
    # Historical snapshots only ever use the short form.
    return (SchemaVariant.SHORT,)


def decode_states(
    body: bytes | str,
    requested_time: Optional[int] = None,
    *,
    variants: Optional[Sequence[SchemaVariant]] = None,
    report: Optional[DecodeReport] = None,
) -> StatesResponse:
    """Decode a ``/states`` response body.

    Parameters
    ----------
    body:
        Raw response body.
    requested_time:
        The ``time`` the caller asked for, or ``None`` for "now".  Selects
        the variant chain and replaces a null ``time`` in the body.
    variants:
        Override the variant chain from :func:`state_variant_chain`.
    report:
        Receives the winning variant, failed attempts and anomalies.

    Raises
    ------
    DecodeError
        If the body is malformed or the only variant tried fails.
    SchemaVariantError
        If several variants were tried and all of them failed.
    """
    report = report if report is not None else DecodeReport()
    try:
        payload = _parse_object(body)
        time = _read_time(payload, requested_time, report)
        raw_states = _read_collection(payload, "states", report)
    except DecodeError as exc:
        raise exc.attach_payload(body)

    chain = tuple(variants) if variants is not None else state_variant_chain(requested_time)
    if not chain:
        raise ValueError("variant chain must not be empty")

    for variant in chain:
        attempt = DecodeReport()
        logger.debug("Decoding %d state vectors as %s form", len(raw_states), variant.value)
        try:
            states = tuple(
                decode_state_vector(
                    item,
                    lengths=variant.lengths,
                    report=attempt,
                    path=("states", index),
                )
                for index, item in enumerate(raw_states)
            )
        except DecodeError as exc:
            logger.debug("%s form failed: %s", variant.value, exc)
            report.failures[variant] = exc
            continue

        report.variant = variant
        report.anomalies.extend(attempt.anomalies)
        _log_fallbacks(attempt)
        if report.failures:
            logger.info(
                "Decoded %d state vectors as %s form after %s failed",
                len(states),
                variant.value,
                ", ".join(v.value for v in report.failures),
            )
        else:
            logger.info("Decoded %d state vectors as %s form", len(states), variant.value)
        return StatesResponse(time=time, states=states)

    if len(report.failures) == 1:
        (only,) = report.failures.values()
        raise only.attach_payload(body)
    raise SchemaVariantError(report.failures).attach_payload(body)


def decode_flights(
    body: bytes | str,
    *,
    report: Optional[DecodeReport] = None,
) -> list[FlightRecord]:
    """Decode a ``/flights/*`` response body (a JSON array of objects)."""
    report = report if report is not None else DecodeReport()
    try:
        payload = _parse(body)
        if not isinstance(payload, list):
            raise DecodeError(
                "schema_mismatch",
                f"expected top-level array, got {type(payload).__name__}",
            )
        return [
            decode_flight(item, report=report, path=(index,))
            for index, item in enumerate(payload)
        ]
    except DecodeError as exc:
        raise exc.attach_payload(body)


def decode_track(
    body: bytes | str,
    *,
    report: Optional[DecodeReport] = None,
) -> FlightTrack:
    """Decode a ``/tracks`` response body."""
    report = report if report is not None else DecodeReport()
    try:
        payload = _parse_object(body)
        header = decode_fields(payload, TRACK_HEADER_FIELDS, report=report)
        raw_path = _read_collection(payload, "path", report)
        path = tuple(
            decode_waypoint(item, report=report, path=("path", index))
            for index, item in enumerate(raw_path)
        )
    except DecodeError as exc:
        raise exc.attach_payload(body)
    return FlightTrack(path=path, **header)


# ── helpers ─────────────────────────────────────────────────────────


def _parse(body: bytes | str) -> Any:
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise DecodeError("parse_error", str(exc)) from exc


def _parse_object(body: bytes | str) -> dict:
    payload = _parse(body)
    if not isinstance(payload, dict):
        raise DecodeError(
            "schema_mismatch",
            f"expected top-level object, got {type(payload).__name__}",
        )
    return payload


def _read_time(payload: dict, requested_time: Optional[int], report: DecodeReport) -> int:
    if "time" not in payload:
        raise DecodeError("missing_fields", "required field is missing", ("time",), "time")

    raw = payload["time"]
    if raw is None:
        if requested_time is None:
            raise DecodeError("missing_fields", "required field is null", ("time",), "time")
        logger.warning("Response time is null, using requested time %d", requested_time)
        report.add("time_substituted", f"null time replaced by {requested_time}", ("time",))
        return requested_time

    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise DecodeError(
            "invalid_type", f"expected unsigned integer, got {raw!r}", ("time",), "time"
        )
    return raw


def _read_collection(payload: dict, key: str, report: DecodeReport) -> list:
    if key not in payload:
        raise DecodeError("missing_fields", "required field is missing", (key,), key)

    raw = payload[key]
    if raw is None:
        logger.debug("%s is null, treating as empty", key)
        report.add("null_collection", f"{key} is null, treated as empty", (key,))
        return []
    if not isinstance(raw, list):
        raise DecodeError(
            "invalid_type", f"expected array, got {type(raw).__name__}", (key,), key
        )
    return raw

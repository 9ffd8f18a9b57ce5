"""Canonical object-form encoding of decoded records.

The canonical form uses field names (never positional arrays) in field-table
order and enum names (never ordinals), so it stays stable whatever shape the
wire payload had.  Decoding the canonical bytes with
:mod:`opensky_client.decoder` yields an equal value.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Sequence

import orjson

from opensky_client.models import (
    FlightRecord,
    FlightTrack,
    StatesResponse,
    StateVector,
    Waypoint,
)
from opensky_client.records import (
    FLIGHT_FIELDS,
    STATE_VECTOR_FIELDS,
    TRACK_HEADER_FIELDS,
    WAYPOINT_FIELDS,
    FieldSpec,
)


def _to_dict(record: Any, fields: Sequence[FieldSpec]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for spec in fields:
        value = getattr(record, spec.name)
        if isinstance(value, enum.Enum):
            value = value.encode()
        elif isinstance(value, tuple):
            value = list(value)
        out[spec.name] = value
    return out


def state_vector_to_dict(state: StateVector) -> dict[str, Any]:
    return _to_dict(state, STATE_VECTOR_FIELDS)


def states_to_dict(response: StatesResponse) -> dict[str, Any]:
    return {
        "time": response.time,
        "states": [state_vector_to_dict(s) for s in response.states],
    }


def flight_to_dict(flight: FlightRecord) -> dict[str, Any]:
    return _to_dict(flight, FLIGHT_FIELDS)


def waypoint_to_dict(waypoint: Waypoint) -> dict[str, Any]:
    return _to_dict(waypoint, WAYPOINT_FIELDS)


def track_to_dict(track: FlightTrack) -> dict[str, Any]:
    out = _to_dict(track, TRACK_HEADER_FIELDS)
    out["path"] = [waypoint_to_dict(w) for w in track.path]
    return out


def _dumps(obj: Any, newline: bool) -> bytes:
    return orjson.dumps(obj, option=orjson.OPT_APPEND_NEWLINE if newline else None)


def encode_states_canonical(response: StatesResponse, *, newline: bool = False) -> bytes:
    """Serialize a :class:`StatesResponse` to compact canonical JSON.

    Parameters
    ----------
    response:
        The decoded response.
    newline:
        Append ``\\n`` so the result can be written as an NDJSON line.
    """
    return _dumps(states_to_dict(response), newline)


def encode_flights_canonical(
    flights: Iterable[FlightRecord], *, newline: bool = False
) -> bytes:
    """Serialize flight records to a canonical JSON array."""
    return _dumps([flight_to_dict(f) for f in flights], newline)


def encode_track_canonical(track: FlightTrack, *, newline: bool = False) -> bytes:
    """Serialize a :class:`FlightTrack` to canonical JSON."""
    return _dumps(track_to_dict(track), newline)

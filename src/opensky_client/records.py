"""Decode single records from positional arrays or field-named objects.

Each record type has a fixed field table: position N of the wire array maps
to entry N of the table.  The same table drives the object form (keys by
field name, then by camelCase alias) and the canonical serializer.

State vector, positional form::

    idx  field            type       required
    ---  ---------------  ---------  --------
     0   icao24           str        yes
     1   callsign         str
     2   origin_country   str        yes
     3   time_position    uint
     4   last_contact     uint       yes
     5   longitude        float
     6   latitude         float
     7   baro_altitude    float
     8   on_ground        bool       yes
     9   velocity         float
    10   true_track       float
    11   vertical_rate    float
    12   sensors          [uint]
    13   geo_altitude     float
    14   squawk           str
    15   spi              bool       yes
    16   position_source  enum       yes
    17   category         enum       (absent in 17-element arrays)

Waypoint, positional form::

    0 time (uint, required)  1 latitude  2 longitude  3 baro_altitude
    4 true_track             5 on_ground (bool, required)

Flights are only ever sent in object form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from opensky_client.enums import AircraftCategory, PositionSource
from opensky_client.errors import DecodeError, PathElement
from opensky_client.models import FlightRecord, StateVector, Waypoint
from opensky_client.report import DecodeReport

Converter = Callable[[Any, DecodeReport, tuple], Any]

MAX_U16 = 0xFFFF


@dataclass(frozen=True)
class FieldSpec:
    """One entry of a record's field table."""

    name: str
    convert: Converter
    required: bool = False
    alias: Optional[str] = None


# ── converters ──────────────────────────────────────────────────────


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _uint(value: Any, report: DecodeReport, path: tuple) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected unsigned integer, got {_json_type(value)}")
    if value < 0:
        raise ValueError(f"expected unsigned integer, got {value}")
    return value


def _u16(value: Any, report: DecodeReport, path: tuple) -> int:
    value = _uint(value, report, path)
    if value > MAX_U16:
        raise ValueError(f"value {value} exceeds {MAX_U16}")
    return value


def _float(value: Any, report: DecodeReport, path: tuple) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {_json_type(value)}")
    return float(value)


def _bool(value: Any, report: DecodeReport, path: tuple) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {_json_type(value)}")
    return value


def _str(value: Any, report: DecodeReport, path: tuple) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {_json_type(value)}")
    return value


def _icao24(value: Any, report: DecodeReport, path: tuple) -> str:
    value = _str(value, report, path)
    if not value:
        raise ValueError("icao24 must not be empty")
    return value


def _uint_list(value: Any, report: DecodeReport, path: tuple) -> tuple:
    if not isinstance(value, list):
        raise TypeError(f"expected array, got {_json_type(value)}")
    return tuple(_uint(item, report, path) for item in value)


def _position_source(value: Any, report: DecodeReport, path: tuple) -> PositionSource:
    return PositionSource.decode(value, report, path)


def _category(value: Any, report: DecodeReport, path: tuple) -> AircraftCategory:
    return AircraftCategory.decode(value, report, path)


# ── field tables ────────────────────────────────────────────────────

STATE_VECTOR_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("icao24", _icao24, required=True),
    FieldSpec("callsign", _str),
    FieldSpec("origin_country", _str, required=True),
    FieldSpec("time_position", _uint),
    FieldSpec("last_contact", _uint, required=True),
    FieldSpec("longitude", _float),
    FieldSpec("latitude", _float),
    FieldSpec("baro_altitude", _float),
    FieldSpec("on_ground", _bool, required=True),
    FieldSpec("velocity", _float),
    FieldSpec("true_track", _float),
    FieldSpec("vertical_rate", _float),
    FieldSpec("sensors", _uint_list),
    FieldSpec("geo_altitude", _float),
    FieldSpec("squawk", _str),
    FieldSpec("spi", _bool, required=True),
    FieldSpec("position_source", _position_source, required=True),
    FieldSpec("category", _category),
)

# The trailing ``category`` element is optional.
STATE_VECTOR_LENGTHS: tuple[int, ...] = (17, 18)

WAYPOINT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("time", _uint, required=True),
    FieldSpec("latitude", _float),
    FieldSpec("longitude", _float),
    FieldSpec("baro_altitude", _float),
    FieldSpec("true_track", _float),
    FieldSpec("on_ground", _bool, required=True),
)

WAYPOINT_LENGTHS: tuple[int, ...] = (6,)

FLIGHT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("icao24", _icao24, required=True),
    FieldSpec("first_seen", _uint, required=True, alias="firstSeen"),
    FieldSpec("est_departure_airport", _str, alias="estDepartureAirport"),
    FieldSpec("last_seen", _uint, required=True, alias="lastSeen"),
    FieldSpec("est_arrival_airport", _str, alias="estArrivalAirport"),
    FieldSpec("callsign", _str),
    FieldSpec("est_departure_airport_horiz_distance", _uint,
              alias="estDepartureAirportHorizDistance"),
    FieldSpec("est_departure_airport_vert_distance", _uint,
              alias="estDepartureAirportVertDistance"),
    FieldSpec("est_arrival_airport_horiz_distance", _uint,
              alias="estArrivalAirportHorizDistance"),
    FieldSpec("est_arrival_airport_vert_distance", _uint,
              alias="estArrivalAirportVertDistance"),
    FieldSpec("departure_airport_candidates_count", _u16, required=True,
              alias="departureAirportCandidatesCount"),
    FieldSpec("arrival_airport_candidates_count", _u16, required=True,
              alias="arrivalAirportCandidatesCount"),
)

# Track header; ``path`` is decoded separately by the collection decoder.
TRACK_HEADER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("icao24", _icao24, required=True),
    FieldSpec("start_time", _float, required=True, alias="startTime"),
    FieldSpec("end_time", _float, required=True, alias="endTime"),
    FieldSpec("callsign", _str),
)


# ── generic decoding ────────────────────────────────────────────────


def decode_fields(
    value: Any,
    fields: Sequence[FieldSpec],
    *,
    lengths: Optional[Sequence[int]] = None,
    report: Optional[DecodeReport] = None,
    path: Sequence[PathElement] = (),
) -> dict[str, Any]:
    """Decode *value* against *fields* and return ``{field name: value}``.

    Parameters
    ----------
    value:
        A JSON array (positional form) or object (field-named form).
    fields:
        The record's field table.
    lengths:
        Accepted array lengths.  ``None`` means the record has no
        positional form and arrays are rejected.
    report:
        Receives recoverable anomalies (enum fallbacks).
    path:
        Location of *value* inside the response, used in error messages.

    Raises
    ------
    DecodeError
        On a wrong shape, wrong length, missing required field, or any
        field failing its type conversion.
    """
    report = report if report is not None else DecodeReport()
    path = tuple(path)

    if isinstance(value, list):
        if lengths is None:
            raise DecodeError("invalid_type", "expected object, got array", path)
        if len(value) not in lengths:
            raise DecodeError(
                "invalid_length",
                f"expected {_describe_lengths(lengths)} elements, got {len(value)}",
                path,
            )
        slots = [
            (field, index < len(value), value[index] if index < len(value) else None,
             path + (index,))
            for index, field in enumerate(fields)
        ]
    elif isinstance(value, dict):
        slots = []
        for field in fields:
            key = field.name
            if key not in value and field.alias and field.alias in value:
                key = field.alias
            slots.append((field, key in value, value.get(key), path + (key,)))
    else:
        expected = "array or object" if lengths is not None else "object"
        raise DecodeError(
            "invalid_type", f"expected {expected}, got {_json_type(value)}", path
        )

    return {
        field.name: _convert(field, present, raw, report, field_path)
        for field, present, raw, field_path in slots
    }


def _convert(
    field: FieldSpec,
    present: bool,
    raw: Any,
    report: DecodeReport,
    path: tuple,
) -> Any:
    if not present or raw is None:
        if field.required:
            what = "missing" if not present else "null"
            raise DecodeError(
                "missing_fields", f"required field is {what}", path, field.name
            )
        return None
    try:
        return field.convert(raw, report, path)
    except (TypeError, ValueError) as exc:
        raise DecodeError("invalid_type", str(exc), path, field.name) from exc


def _describe_lengths(lengths: Sequence[int]) -> str:
    items = [str(n) for n in sorted(lengths)]
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + " or " + items[-1]


# ── per-record entry points ─────────────────────────────────────────


def decode_state_vector(
    value: Any,
    *,
    lengths: Sequence[int] = STATE_VECTOR_LENGTHS,
    report: Optional[DecodeReport] = None,
    path: Sequence[PathElement] = (),
) -> StateVector:
    """Decode one state vector from its 17/18-element array or object form."""
    return StateVector(
        **decode_fields(value, STATE_VECTOR_FIELDS, lengths=lengths, report=report, path=path)
    )


def decode_waypoint(
    value: Any,
    *,
    report: Optional[DecodeReport] = None,
    path: Sequence[PathElement] = (),
) -> Waypoint:
    """Decode one waypoint from its 6-element array or object form."""
    return Waypoint(
        **decode_fields(value, WAYPOINT_FIELDS, lengths=WAYPOINT_LENGTHS, report=report, path=path)
    )


def decode_flight(
    value: Any,
    *,
    report: Optional[DecodeReport] = None,
    path: Sequence[PathElement] = (),
) -> FlightRecord:
    """Decode one flight object (camelCase or snake_case keys)."""
    return FlightRecord(**decode_fields(value, FLIGHT_FIELDS, report=report, path=path))

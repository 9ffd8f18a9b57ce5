"""Immutable dataclass records decoded from OpenSky API responses.

Records are only ever built by the decoders in :mod:`opensky_client.records`
and :mod:`opensky_client.decoder`.  Sequences are tuples so equal payloads
decode to equal (and hashable) values.
"""

from dataclasses import dataclass
from typing import Optional

from opensky_client.enums import AircraftCategory, PositionSource


@dataclass(frozen=True)
class StateVector:
    """One aircraft's status snapshot.

    Timestamps are seconds since the Unix epoch, positions are WGS-84
    decimal degrees, altitudes are meters and speeds are m/s.
    """

    icao24: str
    callsign: Optional[str]
    origin_country: str
    time_position: Optional[int]
    last_contact: int
    longitude: Optional[float]
    latitude: Optional[float]
    baro_altitude: Optional[float]
    on_ground: bool
    velocity: Optional[float]
    true_track: Optional[float]
    vertical_rate: Optional[float]
    sensors: Optional[tuple]
    geo_altitude: Optional[float]
    squawk: Optional[str]
    spi: bool
    position_source: PositionSource
    category: Optional[AircraftCategory] = None


@dataclass(frozen=True)
class StatesResponse:
    """The ``/states`` payload: a timestamp and state vectors in arrival order."""

    time: int
    states: tuple = ()


@dataclass(frozen=True)
class FlightRecord:
    """Historical flight summary from the ``/flights`` endpoints."""

    icao24: str
    first_seen: int
    est_departure_airport: Optional[str]
    last_seen: int
    est_arrival_airport: Optional[str]
    callsign: Optional[str]
    est_departure_airport_horiz_distance: Optional[int]
    est_departure_airport_vert_distance: Optional[int]
    est_arrival_airport_horiz_distance: Optional[int]
    est_arrival_airport_vert_distance: Optional[int]
    departure_airport_candidates_count: int
    arrival_airport_candidates_count: int


@dataclass(frozen=True)
class Waypoint:
    """One sampled point of a reconstructed trajectory."""

    time: int
    latitude: Optional[float]
    longitude: Optional[float]
    baro_altitude: Optional[float]
    true_track: Optional[float]
    on_ground: bool


@dataclass(frozen=True)
class FlightTrack:
    """Trajectory of one aircraft.

    ``start_time`` and ``end_time`` are floats, unlike the integer
    timestamps used everywhere else in the API.
    """

    icao24: str
    start_time: float
    end_time: float
    callsign: Optional[str]
    path: tuple = ()

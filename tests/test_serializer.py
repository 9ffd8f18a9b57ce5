"""Tests for the canonical round-trip serializer."""

import orjson

from conftest import FLIGHTS_FIXTURE, STATES_CANONICAL, TRACK_FIXTURE, state_array
from opensky_client.decoder import decode_flights, decode_states, decode_track
from opensky_client.enums import AircraftCategory, PositionSource
from opensky_client.models import FlightTrack, StatesResponse, StateVector, Waypoint
from opensky_client.serializer import (
    encode_flights_canonical,
    encode_states_canonical,
    encode_track_canonical,
    state_vector_to_dict,
)


def test_observed_fixture_exact_bytes(states_fixture: bytes) -> None:
    """Re-encoding the DLH9LF body yields the exact canonical literal."""
    assert encode_states_canonical(decode_states(states_fixture)) == STATES_CANONICAL


def test_enums_encoded_by_name() -> None:
    """Ordinals on the wire come out as names."""
    response = decode_states(orjson.dumps({
        "time": 1,
        "states": [state_array(position_source=3, category=14, sensors=[5, 6])],
    }))
    record = orjson.loads(encode_states_canonical(response))["states"][0]
    assert record["position_source"] == "FLARM"
    assert record["category"] == "UnmannedAerialVehicle"
    assert record["sensors"] == [5, 6]


def test_states_round_trip() -> None:
    """decode(encode(v)) == v for a hand-built response."""
    state = StateVector(
        icao24="4b1815",
        callsign=None,
        origin_country="Switzerland",
        time_position=None,
        last_contact=1635347379,
        longitude=None,
        latitude=None,
        baro_altitude=None,
        on_ground=True,
        velocity=0.0,
        true_track=None,
        vertical_rate=-0.33,
        sensors=(1, 2, 3),
        geo_altitude=None,
        squawk=None,
        spi=True,
        position_source=PositionSource.MLAT,
        category=AircraftCategory.Glider,
    )
    response = StatesResponse(time=1635347380, states=(state, state))
    assert decode_states(encode_states_canonical(response)) == response


def test_round_trip_survives_enum_fallback() -> None:
    """A fallen-back enum re-encodes to a stable name."""
    response = decode_states(orjson.dumps({
        "time": 1, "states": [state_array(position_source=99)],
    }))
    encoded = encode_states_canonical(response)
    assert b'"position_source":"ADSB"' in encoded
    assert decode_states(encoded) == response


def test_empty_states_round_trip() -> None:
    response = StatesResponse(time=42)
    assert encode_states_canonical(response) == b'{"time":42,"states":[]}'
    assert decode_states(encode_states_canonical(response)) == response


def test_flights_round_trip() -> None:
    flights = decode_flights(FLIGHTS_FIXTURE)
    encoded = encode_flights_canonical(flights)
    assert b'"first_seen":1517220729' in encoded
    assert b"firstSeen" not in encoded
    assert decode_flights(encoded) == flights


def test_track_round_trip() -> None:
    track = decode_track(TRACK_FIXTURE)
    encoded = encode_track_canonical(track)
    document = orjson.loads(encoded)
    assert list(document) == ["icao24", "start_time", "end_time", "callsign", "path"]
    assert document["path"][0] == {
        "time": 1569390420,
        "latitude": 50.0334,
        "longitude": 8.5578,
        "baro_altitude": 0.0,
        "true_track": 248.0,
        "on_ground": True,
    }
    assert decode_track(encoded) == track


def test_hand_built_track_round_trip() -> None:
    track = FlightTrack(
        icao24="abc9f3",
        start_time=1.5,
        end_time=2.25,
        callsign=None,
        path=(Waypoint(1, None, None, None, None, False),),
    )
    assert decode_track(encode_track_canonical(track)) == track


def test_newline_option() -> None:
    """``newline=True`` produces one NDJSON line."""
    data = encode_states_canonical(StatesResponse(time=1), newline=True)
    assert data.endswith(b"\n")
    assert data.count(b"\n") == 1


def test_state_vector_dict_key_order() -> None:
    """Keys follow positional order."""
    state = decode_states(orjson.dumps({"time": 1, "states": [state_array()]})).states[0]
    assert list(state_vector_to_dict(state))[:3] == ["icao24", "callsign", "origin_country"]
    assert list(state_vector_to_dict(state))[-2:] == ["position_source", "category"]

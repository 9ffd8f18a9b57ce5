"""Tests for the positional record decoder."""

import pytest

from conftest import state_array
from opensky_client.enums import AircraftCategory, PositionSource
from opensky_client.errors import DecodeError
from opensky_client.records import (
    STATE_VECTOR_FIELDS,
    decode_flight,
    decode_state_vector,
    decode_waypoint,
)
from opensky_client.report import DecodeReport


def _as_object(array: list) -> dict:
    return {spec.name: value for spec, value in zip(STATE_VECTOR_FIELDS, array)}


class TestStateVectorArray:
    """Positional (array) form of a state vector."""

    def test_full_length(self) -> None:
        """18 elements populate every field, category from element 17."""
        state = decode_state_vector(state_array(category=6, position_source=2))
        assert state.icao24 == "3c6444"
        assert state.callsign == "DLH9LF  "
        assert state.time_position == 1458564120
        assert state.longitude == pytest.approx(6.1546)
        assert state.on_ground is False
        assert state.position_source is PositionSource.MLAT
        assert state.category is AircraftCategory.Heavy

    def test_short_form_has_no_category(self) -> None:
        """17 elements decode with ``category`` set to None."""
        state = decode_state_vector(state_array()[:17])
        assert state.category is None
        assert state.squawk == "1000"

    @pytest.mark.parametrize("length", [0, 16, 19])
    def test_other_lengths_rejected(self, length: int) -> None:
        """Any length but 17/18 fails and reports the observed length."""
        array = (state_array() + [None])[:length]
        with pytest.raises(DecodeError) as excinfo:
            decode_state_vector(array)
        assert excinfo.value.code == "invalid_length"
        assert f"got {length}" in str(excinfo.value)

    def test_optional_nulls(self) -> None:
        """Wire nulls in optional positions become None."""
        state = decode_state_vector(state_array(
            callsign=None, time_position=None, longitude=None, latitude=None,
            baro_altitude=None, velocity=None, true_track=None,
            vertical_rate=None, geo_altitude=None, squawk=None,
        ))
        assert state.callsign is None
        assert state.time_position is None
        assert state.latitude is None
        assert state.squawk is None

    def test_integer_coordinates_become_floats(self) -> None:
        """JSON integers are accepted for float fields."""
        state = decode_state_vector(state_array(longitude=7, baro_altitude=0))
        assert isinstance(state.longitude, float)
        assert state.longitude == 7.0
        assert state.baro_altitude == 0.0

    def test_sensors_list(self) -> None:
        """Receiver IDs decode to a tuple of ints."""
        state = decode_state_vector(state_array(sensors=[1, 42]))
        assert state.sensors == (1, 42)

    def test_required_null_fails(self) -> None:
        """A null in a required position is a missing-field error."""
        with pytest.raises(DecodeError) as excinfo:
            decode_state_vector(state_array(last_contact=None), path=("states", 3))
        err = excinfo.value
        assert err.code == "missing_fields"
        assert err.field == "last_contact"
        assert err.path == ("states", 3, 4)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("icao24", 123),
            ("icao24", ""),
            ("on_ground", 0),
            ("time_position", 1.5),
            ("time_position", -1),
            ("last_contact", True),
            ("longitude", "6.1"),
            ("velocity", False),
            ("sensors", [1, "2"]),
            ("position_source", 2.0),
        ],
    )
    def test_wrong_type_aborts_record(self, field: str, value) -> None:
        """A bad element fails the whole record with field context."""
        with pytest.raises(DecodeError) as excinfo:
            decode_state_vector(state_array(**{field: value}))
        assert excinfo.value.code == "invalid_type"
        assert excinfo.value.field == field

    def test_unknown_position_source_is_recovered(self) -> None:
        """An unknown ordinal decodes to ADSB and is reported."""
        report = DecodeReport()
        state = decode_state_vector(state_array(position_source=99), report=report)
        assert state.position_source is PositionSource.ADSB
        assert report.codes() == ["enum_fallback"]
        assert report.anomalies[0].path == (16,)

    def test_allowed_lengths_override(self) -> None:
        """Callers can narrow the accepted lengths."""
        with pytest.raises(DecodeError, match="expected 18 elements, got 17"):
            decode_state_vector(state_array()[:17], lengths=(18,))


class TestStateVectorObject:
    """Field-named (object) form of a state vector."""

    def test_object_equals_array(self) -> None:
        """Array and object forms of the same data decode identically."""
        array = state_array(category=3, sensors=[7], position_source=1)
        obj = _as_object(array)
        obj["position_source"] = "ASTERIX"
        obj["category"] = "Small"
        assert decode_state_vector(array) == decode_state_vector(obj)

    def test_missing_optional_key(self) -> None:
        """Absent optional keys decode to None."""
        obj = _as_object(state_array())
        del obj["category"]
        del obj["squawk"]
        state = decode_state_vector(obj)
        assert state.category is None
        assert state.squawk is None

    def test_missing_required_key(self) -> None:
        """Absent required keys fail with the key in the path."""
        obj = _as_object(state_array())
        del obj["spi"]
        with pytest.raises(DecodeError) as excinfo:
            decode_state_vector(obj)
        assert excinfo.value.code == "missing_fields"
        assert excinfo.value.path == ("spi",)

    def test_unknown_keys_ignored(self) -> None:
        """Extra keys do not affect decoding."""
        obj = _as_object(state_array())
        obj["future_field"] = {"x": 1}
        assert decode_state_vector(obj) == decode_state_vector(state_array())

    @pytest.mark.parametrize("value", ["3c6444", 42, None, True])
    def test_scalar_rejected(self, value) -> None:
        """Neither an array nor an object is a type error."""
        with pytest.raises(DecodeError) as excinfo:
            decode_state_vector(value)
        assert excinfo.value.code == "invalid_type"


class TestWaypoint:
    """Waypoint decoding."""

    def test_array_and_object_agree(self) -> None:
        array = [1569390420, 50.0334, 8.5578, None, 248.0, True]
        obj = {
            "time": 1569390420,
            "latitude": 50.0334,
            "longitude": 8.5578,
            "baro_altitude": None,
            "true_track": 248.0,
            "on_ground": True,
        }
        waypoint = decode_waypoint(array)
        assert waypoint == decode_waypoint(obj)
        assert waypoint.baro_altitude is None
        assert waypoint.on_ground is True

    def test_wrong_length(self) -> None:
        with pytest.raises(DecodeError, match="expected 6 elements, got 5"):
            decode_waypoint([1569390420, 50.0, 8.5, 0.0, 248.0])

    def test_on_ground_required(self) -> None:
        with pytest.raises(DecodeError) as excinfo:
            decode_waypoint([1569390420, 50.0, 8.5, 0.0, 248.0, None])
        assert excinfo.value.field == "on_ground"


class TestFlight:
    """Flight objects."""

    FLIGHT = {
        "icao24": "8990ed",
        "firstSeen": 1517220729,
        "estDepartureAirport": "RCTP",
        "lastSeen": 1517230737,
        "estArrivalAirport": None,
        "callsign": "CAL639  ",
        "estDepartureAirportHorizDistance": 1543,
        "estDepartureAirportVertDistance": 104,
        "estArrivalAirportHorizDistance": None,
        "estArrivalAirportVertDistance": None,
        "departureAirportCandidatesCount": 1,
        "arrivalAirportCandidatesCount": 0,
    }

    def test_camel_case_keys(self) -> None:
        flight = decode_flight(self.FLIGHT)
        assert flight.first_seen == 1517220729
        assert flight.est_departure_airport == "RCTP"
        assert flight.est_arrival_airport is None
        assert flight.departure_airport_candidates_count == 1

    def test_snake_case_keys(self) -> None:
        """Canonical snake_case keys decode to the same record."""
        snake = {
            "icao24": "8990ed",
            "first_seen": 1517220729,
            "est_departure_airport": "RCTP",
            "last_seen": 1517230737,
            "est_arrival_airport": None,
            "callsign": "CAL639  ",
            "est_departure_airport_horiz_distance": 1543,
            "est_departure_airport_vert_distance": 104,
            "est_arrival_airport_horiz_distance": None,
            "est_arrival_airport_vert_distance": None,
            "departure_airport_candidates_count": 1,
            "arrival_airport_candidates_count": 0,
        }
        assert decode_flight(snake) == decode_flight(self.FLIGHT)

    def test_array_form_rejected(self) -> None:
        with pytest.raises(DecodeError, match="expected object, got array"):
            decode_flight(list(self.FLIGHT.values()))

    def test_candidate_count_range(self) -> None:
        flight = dict(self.FLIGHT, arrivalAirportCandidatesCount=70000)
        with pytest.raises(DecodeError) as excinfo:
            decode_flight(flight)
        assert excinfo.value.field == "arrival_airport_candidates_count"

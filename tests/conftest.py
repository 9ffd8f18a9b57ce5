"""Shared payloads for the test-suite."""

import pytest

# /states body observed for DLH9LF on 2016-03-21 (18 elements, null category).
STATES_FIXTURE = (
    b'{"time":1458564121,"states":[["3c6444","DLH9LF  ","Germany",1458564120,'
    b'1458564120,6.1546,50.1964,9639.3,false,232.88,98.26,4.55,null,9547.86,'
    b'"1000",false,0,null]]}'
)

STATES_CANONICAL = (
    b'{"time":1458564121,"states":[{"icao24":"3c6444","callsign":"DLH9LF  ",'
    b'"origin_country":"Germany","time_position":1458564120,"last_contact":1458564120,'
    b'"longitude":6.1546,"latitude":50.1964,"baro_altitude":9639.3,"on_ground":false,'
    b'"velocity":232.88,"true_track":98.26,"vertical_rate":4.55,"sensors":null,'
    b'"geo_altitude":9547.86,"squawk":"1000","spi":false,"position_source":"ADSB",'
    b'"category":null}]}'
)

FLIGHTS_FIXTURE = (
    b'[{"icao24":"8990ed","firstSeen":1517220729,"estDepartureAirport":"RCTP",'
    b'"lastSeen":1517230737,"estArrivalAirport":"VHHH","callsign":"CAL639  ",'
    b'"estDepartureAirportHorizDistance":1543,"estDepartureAirportVertDistance":104,'
    b'"estArrivalAirportHorizDistance":3196,"estArrivalAirportVertDistance":13,'
    b'"departureAirportCandidatesCount":1,"arrivalAirportCandidatesCount":3}]'
)

TRACK_FIXTURE = (
    b'{"icao24":"3c4b26","startTime":1569390420.0,"endTime":1569396600.0,'
    b'"callsign":"DLH2TA  ","path":[[1569390420,50.0334,8.5578,0.0,248.0,true],'
    b'[1569390600,50.0255,8.5202,1219.0,289.0,false]]}'
)


def state_array(**overrides) -> list:
    """Build an 18-element positional state vector, overriding by index name."""
    values = {
        "icao24": "3c6444",
        "callsign": "DLH9LF  ",
        "origin_country": "Germany",
        "time_position": 1458564120,
        "last_contact": 1458564120,
        "longitude": 6.1546,
        "latitude": 50.1964,
        "baro_altitude": 9639.3,
        "on_ground": False,
        "velocity": 232.88,
        "true_track": 98.26,
        "vertical_rate": 4.55,
        "sensors": None,
        "geo_altitude": 9547.86,
        "squawk": "1000",
        "spi": False,
        "position_source": 0,
        "category": None,
    }
    values.update(overrides)
    return list(values.values())


@pytest.fixture
def states_fixture() -> bytes:
    return STATES_FIXTURE

"""Synchronous HTTP access to the OpenSky REST API.

Every query follows the same path::

    URL assembly (credentials as userinfo) → fetch → status check → decoder

Status handling:
    2xx                       → body handed to the decoder
    404 on ``/flights/*``     → no flights, ``[]``
    anything else             → :class:`~opensky_client.errors.HTTPStatusError`

Transport failures (``httpx.TransportError``) are logged and re-raised
unchanged.  There is no retry, backoff or rate limiting.
"""

from __future__ import annotations

import enum
import logging
import time as _time
from dataclasses import dataclass
from typing import Iterable, Optional

import httpx

from opensky_client.config import ApiConfig
from opensky_client.decoder import decode_flights, decode_states, decode_track
from opensky_client.errors import HTTPStatusError
from opensky_client.models import FlightRecord, FlightTrack, StatesResponse
from opensky_client.report import DecodeReport

logger = logging.getLogger(__name__)

HOUR = 60 * 60
DAY = 24 * HOUR

# Tracks older than this are outside the documented history window.
TRACK_HISTORY_LIMIT = 30 * DAY


@dataclass(frozen=True)
class BoundingBox:
    """An area bounded by WGS-84 coordinates in decimal degrees."""

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def as_params(self) -> list[tuple[str, str]]:
        return [
            ("lamin", str(self.lat_min)),
            ("lomin", str(self.lon_min)),
            ("lamax", str(self.lat_max)),
            ("lomax", str(self.lon_max)),
        ]


class FlightsQuery(enum.Enum):
    """Flights endpoints with their maximum query interval in seconds."""

    ALL = ("all", 2 * HOUR)
    AIRCRAFT = ("aircraft", 30 * DAY)
    ARRIVAL = ("arrival", 7 * DAY)
    DEPARTURE = ("departure", 7 * DAY)

    def __init__(self, endpoint: str, max_interval: int) -> None:
        self.endpoint = endpoint
        self.max_interval = max_interval


class OpenSkyClient:
    """Thin wrapper around :class:`httpx.Client` for the OpenSky API.

    Parameters
    ----------
    config:
        API settings (base URL, credentials, timeout).
    transport:
        Optional ``httpx`` transport, e.g. :class:`httpx.MockTransport` in
        tests.
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or ApiConfig()
        self._http = httpx.Client(timeout=self._config.timeout_seconds, transport=transport)

    def __enter__(self) -> "OpenSkyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ── transport ───────────────────────────────────────────────────

    def fetch(self, url: str) -> tuple[int, bytes]:
        """GET *url* and return ``(status_code, body)``."""
        logger.debug("GET %s", url)
        try:
            response = self._http.get(url)
        except httpx.TransportError as exc:
            logger.warning("Request to OpenSky failed: %s", exc)
            raise
        return response.status_code, response.content

    def build_url(self, endpoint: str, params: Iterable[tuple[str, str]] = ()) -> str:
        """Assemble ``{base_url}/{endpoint}?params`` with credentials embedded."""
        url = httpx.URL(f"{self._config.base_url.rstrip('/')}/{endpoint}")
        if self._config.username:
            url = url.copy_with(
                username=self._config.username,
                password=self._config.password,
            )
        params = list(params)
        if params:
            url = url.copy_with(params=params)
        return str(url)

    def _get(self, url: str, not_found_means_empty: bool = False) -> Optional[bytes]:
        status, body = self.fetch(url)
        if 200 <= status < 300:
            return body
        if status == 404 and not_found_means_empty:
            logger.debug("HTTP 404 for %s, no data", url)
            return None
        logger.warning("OpenSky returned HTTP %d", status)
        raise HTTPStatusError(status, url)

    # ── states ──────────────────────────────────────────────────────

    def get_states(
        self,
        time: Optional[int] = None,
        icao24: Iterable[str] = (),
        bbox: Optional[BoundingBox] = None,
        serials: Iterable[int] = (),
        report: Optional[DecodeReport] = None,
    ) -> StatesResponse:
        """Fetch state vectors.

        Parameters
        ----------
        time:
            Seconds since epoch to query history; ``None`` for "now".
        icao24:
            Transponder addresses to filter by.
        bbox:
            Area to restrict the query to.
        serials:
            Serial numbers of your own receivers; selects ``/states/own``.
        report:
            Receives decode anomalies and the schema variant used.
        """
        params: list[tuple[str, str]] = []
        if time is not None:
            params.append(("time", str(time)))
        if bbox is not None:
            params.extend(bbox.as_params())
        params.extend(("icao24", address) for address in icao24)
        serial_params = [("serials", str(serial)) for serial in serials]
        params.extend(serial_params)

        endpoint = "states/own" if serial_params else "states/all"
        body = self._get(self.build_url(endpoint, params))
        return decode_states(body, requested_time=time, report=report)

    # ── flights ─────────────────────────────────────────────────────

    def get_flights(self, begin: int, end: int) -> list[FlightRecord]:
        """All flights in ``[begin, end]`` (at most two hours)."""
        return self._flights(FlightsQuery.ALL, begin, end)

    def get_flights_by_aircraft(self, icao24: str, begin: int, end: int) -> list[FlightRecord]:
        return self._flights(FlightsQuery.AIRCRAFT, begin, end, ("icao24", icao24))

    def get_arrivals(self, airport: str, begin: int, end: int) -> list[FlightRecord]:
        return self._flights(FlightsQuery.ARRIVAL, begin, end, ("airport", airport))

    def get_departures(self, airport: str, begin: int, end: int) -> list[FlightRecord]:
        return self._flights(FlightsQuery.DEPARTURE, begin, end, ("airport", airport))

    def _flights(
        self,
        query: FlightsQuery,
        begin: int,
        end: int,
        extra: Optional[tuple[str, str]] = None,
    ) -> list[FlightRecord]:
        if end < begin:
            raise ValueError(f"end ({end}) must not be before begin ({begin})")
        interval = end - begin
        if interval > query.max_interval:
            logger.warning(
                "Interval (%d secs) is larger than limits (%d secs)",
                interval,
                query.max_interval,
            )

        params = [("begin", str(begin)), ("end", str(end))]
        if extra is not None:
            params.append(extra)

        body = self._get(
            self.build_url(f"flights/{query.endpoint}", params),
            not_found_means_empty=True,
        )
        if body is None:
            return []
        return decode_flights(body)

    # ── tracks ──────────────────────────────────────────────────────

    def get_track(self, icao24: str, time: int = 0) -> FlightTrack:
        """Trajectory of *icao24* at *time* (``0`` for the live track)."""
        if time:
            age = int(_time.time()) - time
            if age > TRACK_HISTORY_LIMIT:
                logger.warning(
                    "Interval (%d secs) is larger than limits (%d secs)",
                    age,
                    TRACK_HISTORY_LIMIT,
                )

        url = self.build_url("tracks/all", [("icao24", icao24), ("time", str(time))])
        return decode_track(self._get(url))

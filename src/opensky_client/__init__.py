"""Client library for the OpenSky Network REST API."""

__version__ = "0.1.0"

from opensky_client.client import BoundingBox, FlightsQuery, OpenSkyClient
from opensky_client.decoder import (
    decode_flights,
    decode_states,
    decode_track,
    state_variant_chain,
)
from opensky_client.enums import AircraftCategory, PositionSource, SchemaVariant
from opensky_client.errors import (
    DecodeError,
    HTTPStatusError,
    OpenSkyError,
    SchemaVariantError,
)
from opensky_client.models import (
    FlightRecord,
    FlightTrack,
    StatesResponse,
    StateVector,
    Waypoint,
)
from opensky_client.report import Anomaly, DecodeReport
from opensky_client.serializer import (
    encode_flights_canonical,
    encode_states_canonical,
    encode_track_canonical,
)

__all__ = [
    "__version__",
    "AircraftCategory",
    "Anomaly",
    "BoundingBox",
    "DecodeError",
    "DecodeReport",
    "FlightRecord",
    "FlightTrack",
    "FlightsQuery",
    "HTTPStatusError",
    "OpenSkyClient",
    "OpenSkyError",
    "PositionSource",
    "SchemaVariant",
    "SchemaVariantError",
    "StateVector",
    "StatesResponse",
    "Waypoint",
    "decode_flights",
    "decode_states",
    "decode_track",
    "encode_flights_canonical",
    "encode_states_canonical",
    "encode_track_canonical",
    "state_variant_chain",
]

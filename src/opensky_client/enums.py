"""Enumerated wire fields and schema variants.

``position_source`` and ``category`` arrive either as an integer ordinal
(positional wire form) or as the member name (object form).  Unknown values
are not errors: the server adds new codes without notice, so decoding falls
back to a documented default and records an ``enum_fallback`` anomaly.

=====================  =========================  ==================
Enum                   Accepted input             Fallback
=====================  =========================  ==================
PositionSource         0..3 or ``"ADSB"`` …       ``ADSB``
AircraftCategory       0..20 or ``"Light"`` …     ``NoInformation``
=====================  =========================  ==================
"""

from __future__ import annotations

import enum
import logging
from typing import Optional, Sequence

from opensky_client.errors import PathElement, format_path
from opensky_client.report import DecodeReport

logger = logging.getLogger(__name__)


class _WireEnum(enum.Enum):
    """Ordinal-backed enum whose member name is the canonical string alias.

    Subclasses must define a ``default()`` classmethod returning the member
    used for unknown wire values.

    When a *report* is passed to :meth:`decode`, a fallback is only recorded
    there and its owner decides whether to log it; the collection decoder
    logs the fallbacks of the schema variant that won.  Without a report the
    fallback is logged here.
    """

    @classmethod
    def decode(
        cls,
        raw: int | str,
        report: Optional[DecodeReport] = None,
        path: Sequence[PathElement] = (),
    ) -> "_WireEnum":
        """Map an ordinal or canonical name to a member.

        Raises
        ------
        TypeError
            If *raw* is neither ``int`` nor ``str``.
        """
        if isinstance(raw, bool) or not isinstance(raw, (int, str)):
            raise TypeError(
                f"expected integer ordinal or string name, got {type(raw).__name__}"
            )

        if isinstance(raw, str):
            member = cls.__members__.get(raw)
        else:
            try:
                member = cls(raw)
            except ValueError:
                member = None

        if member is not None:
            return member

        fallback = cls.default()
        message = f"unknown {cls.__name__} value {raw!r}, using {fallback.name}"
        if report is not None:
            report.add("enum_fallback", message, path)
        else:
            logger.warning("%s at %s", message, format_path(path) or "<root>")
        return fallback

    def encode(self) -> str:
        """Return the canonical string name (never the ordinal)."""
        return self.name


class PositionSource(_WireEnum):
    """Origin of a state vector's position."""

    ADSB = 0
    ASTERIX = 1
    MLAT = 2
    FLARM = 3

    @classmethod
    def default(cls) -> "PositionSource":
        return cls.ADSB


class AircraftCategory(_WireEnum):
    """ADS-B emitter category."""

    NoInformation = 0
    NoADSBEmitterCategory = 1
    Light = 2                      # < 15500 lbs
    Small = 3                      # 15500 to 75000 lbs
    Large = 4                      # 75000 to 300000 lbs
    HighVortexLarge = 5            # e.g. B-757
    Heavy = 6                      # > 300000 lbs
    HighPerformance = 7            # > 5g acceleration and 400 kts
    Rotorcraft = 8
    Glider = 9
    LighterThanAir = 10
    Parachutist = 11
    Ultralight = 12
    Reserved = 13
    UnmannedAerialVehicle = 14
    SpaceVehicle = 15
    EmergencyVehicle = 16
    ServiceVehicle = 17
    PointObstacle = 18             # includes tethered balloons
    ClusterObstacle = 19
    LineObstacle = 20

    @classmethod
    def default(cls) -> "AircraftCategory":
        return cls.NoInformation


class SchemaVariant(enum.Enum):
    """Known wire shapes of a positional state vector.

    ``LONG`` carries the trailing ``category`` element; ``SHORT`` predates it.
    ``MIXED`` accepts either length record by record, for bodies that
    combine both shapes.
    """

    LONG = "long"
    SHORT = "short"
    MIXED = "mixed"

    @property
    def lengths(self) -> tuple[int, ...]:
        return _VARIANT_LENGTHS[self]


_VARIANT_LENGTHS = {
    SchemaVariant.LONG: (18,),
    SchemaVariant.SHORT: (17,),
    # Either length, decided per record.
    SchemaVariant.MIXED: (17, 18),
}

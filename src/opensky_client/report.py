"""Caller-visible outcome channel for recoverable decode conditions.

A :class:`DecodeReport` is threaded through every decoder call.  Conditions
the decoders recover from on their own (an unknown enum value, a null
collection, a substituted timestamp) are recorded here as :class:`Anomaly`
entries in addition to being logged, so callers and tests can observe them
without inspecting log output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from opensky_client.errors import PathElement, format_path


@dataclass(frozen=True)
class Anomaly:
    """One recoverable condition met while decoding."""

    code: str
    message: str
    path: tuple = ()

    @property
    def location(self) -> str:
        return format_path(self.path)


@dataclass
class DecodeReport:
    """What happened during one decode call.

    Attributes
    ----------
    variant:
        The schema variant that produced the result (states only).
    anomalies:
        Recoverable conditions, in the order they were met.
    failures:
        Variant → error for attempts that failed before the winning one.
    """

    variant: Optional[Any] = None
    anomalies: list[Anomaly] = field(default_factory=list)
    failures: dict = field(default_factory=dict)

    def add(self, code: str, message: str, path: Sequence[PathElement] = ()) -> None:
        self.anomalies.append(Anomaly(code=code, message=message, path=tuple(path)))

    def codes(self) -> list[str]:
        """Return the anomaly codes recorded so far."""
        return [a.code for a in self.anomalies]

    @property
    def fell_back(self) -> bool:
        """True when at least one schema variant failed before one succeeded."""
        return bool(self.failures) and self.variant is not None

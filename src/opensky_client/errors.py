"""Exception taxonomy for the OpenSky client.

Error codes carried by :class:`DecodeError`::

    parse_error         body is not valid JSON
    schema_mismatch     top-level shape is wrong (e.g. not an object)
    missing_fields      a required key is absent or a required value is null
    invalid_length      positional array has an unexpected element count
    invalid_type        a value has the wrong JSON type or range
    variants_exhausted  every schema variant in the attempt chain failed

Transport failures are raised by ``httpx`` and are not wrapped.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

# Maximum bytes of raw payload preserved on a decode error.
MAX_RAW_PAYLOAD_BYTES = 4096

PathElement = Union[str, int]


class OpenSkyError(Exception):
    """Base class for every error raised by this package."""


class HTTPStatusError(OpenSkyError):
    """The API answered with a non-success status code."""

    def __init__(self, status_code: int, url: str = "") -> None:
        super().__init__(f"Server returned HTTP error code: {status_code}")
        self.status_code = status_code
        self.url = url


class DecodeError(OpenSkyError):
    """A response body could not be decoded into typed records.

    Parameters
    ----------
    code:
        One of the codes listed in the module docstring.
    message:
        Human-readable description.
    path:
        Keys and indices leading to the offending value, e.g.
        ``("states", 0, 16)``.
    field:
        Name of the record field being decoded, when known.
    """

    def __init__(
        self,
        code: str,
        message: str,
        path: Sequence[PathElement] = (),
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.path = tuple(path)
        self.field = field
        self.raw_payload = ""
        self.raw_payload_truncated = False
        super().__init__(self._describe())

    @property
    def location(self) -> str:
        """Render :attr:`path` as ``states[0][16]``."""
        return format_path(self.path)

    def attach_payload(self, raw: str | bytes) -> "DecodeError":
        """Keep a (possibly truncated) copy of the offending body."""
        raw_str = raw if isinstance(raw, str) else raw.decode("utf-8", errors="replace")
        encoded = raw_str.encode("utf-8")
        truncated = len(encoded) > MAX_RAW_PAYLOAD_BYTES
        if truncated:
            # Cut on bytes; drop a multi-byte character split at the boundary.
            raw_str = encoded[:MAX_RAW_PAYLOAD_BYTES].decode("utf-8", errors="ignore")
        self.raw_payload = raw_str
        self.raw_payload_truncated = truncated
        return self

    def _describe(self) -> str:
        parts = [f"[{self.code}]"]
        if self.path:
            parts.append(self.location)
        if self.field:
            parts.append(f"({self.field})")
        return " ".join(parts) + f": {self.message}"


class SchemaVariantError(DecodeError):
    """Every schema variant tried for a collection failed.

    ``failures`` maps each attempted variant to the error it produced, in
    attempt order.
    """

    def __init__(self, failures: dict) -> None:
        self.failures = dict(failures)
        summary = "; ".join(
            f"{getattr(variant, 'value', variant)}: {exc}"
            for variant, exc in self.failures.items()
        )
        super().__init__(
            code="variants_exhausted",
            message=f"no schema variant matched ({summary})",
        )


def format_path(path: Sequence[PathElement]) -> str:
    """Format a key/index path the way it reads in JSON tooling."""
    out = ""
    for element in path:
        if isinstance(element, int):
            out += f"[{element}]"
        elif out:
            out += f".{element}"
        else:
            out = element
    return out

"""Output sinks for canonical JSON: stdout and snapshot files.

StdoutSink
    Writes raw bytes to ``sys.stdout.buffer``.

SnapshotSink
    Writes each document to ``{prefix}-{kind}-{timestamp}.json``.  The bytes
    go to a ``.active`` file first, which is flushed, ``fsync``-ed and then
    atomically renamed, so readers never see a partial snapshot.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


class StdoutSink:
    """Write canonical JSON bytes directly to stdout."""

    def write(self, kind: str, data: bytes) -> None:
        """Write *data* to ``sys.stdout.buffer``.

        Raises
        ------
        BrokenPipeError
            If the stdout consumer has gone away.
        """
        try:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        except BrokenPipeError:
            logger.warning("stdout broken, consumer likely exited")
            raise

    def close(self) -> None:
        """No-op for stdout."""


class SnapshotSink:
    """Atomic one-file-per-document snapshot writer.

    Parameters
    ----------
    output_dir:
        Directory for snapshot files; created if missing.
    prefix:
        Filename prefix (e.g. ``"opensky"``).
    """

    def __init__(self, output_dir: str, prefix: str = "opensky") -> None:
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._prefix = prefix
        self.written: list[Path] = []

    def write(self, kind: str, data: bytes) -> Path:
        """Write *data* as a new ``{kind}`` snapshot and return its path."""
        final_path = self._next_path(kind)
        active_path = final_path.with_name(final_path.name + ".active")

        with open(active_path, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.rename(active_path, final_path)

        self.written.append(final_path)
        logger.info("Wrote snapshot %s (%d bytes)", final_path.name, len(data))
        return final_path

    def close(self) -> None:
        """Nothing is held open between writes."""

    def _next_path(self, kind: str) -> Path:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        base = f"{self._prefix}-{kind}-{ts}"
        candidate = self._output_dir / f"{base}.json"
        counter = 1
        while candidate.exists():
            candidate = self._output_dir / f"{base}-{counter}.json"
            counter += 1
        return candidate

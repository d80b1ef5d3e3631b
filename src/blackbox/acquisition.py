"""Acquisition boundary: producers of complete, closed blob files."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = [
    "SEGMENT_SEPARATOR",
    "BlobSource",
    "SampleReader",
    "TelemetrySegmentWriter",
    "format_sample",
]

LOGGER = logging.getLogger(__name__)

SEGMENT_SEPARATOR = "-" * 66
SEGMENT_TIME_FORMAT = "%Y%m%d%H%M%S"

SampleReader = Callable[[], Mapping[str, object]]
"""Returns one labelled set of readings, for example from an OBD adapter."""


@runtime_checkable
class BlobSource(Protocol):
    """Anything that produces finished data files for anchoring."""

    def capture(self) -> Path:
        """Block until a blob is complete and return its path."""
        ...


def format_sample(sampled_at: datetime, readings: Mapping[str, object]) -> str:
    """Render one sample as a text block: timestamp, ``Label: value`` lines, separator."""

    lines = [sampled_at.isoformat()]
    lines.extend(f"{label}: {value}" for label, value in readings.items())
    lines.append(SEGMENT_SEPARATOR)
    return "\n".join(lines) + "\n"


class TelemetrySegmentWriter:
    """Collect telemetry samples into timestamp-named text segments.

    Samples are written to a temporary file in ``directory`` that is renamed
    to ``<YYYYmmddHHMMSS>.txt`` only once the segment is complete, so readers
    never observe a partially written segment.

    Args:
        read_sample: Callable returning one mapping of readings.
        directory: Destination directory, created if missing.
        samples_per_segment: Samples per segment file.
        interval_seconds: Pause between consecutive samples.
        clock: Returns the current local time; injectable for tests.
        sleep: Sleep function; injectable for tests.
    """

    def __init__(
        self,
        read_sample: SampleReader,
        directory: str | Path,
        *,
        samples_per_segment: int = 60,
        interval_seconds: float = 1.0,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if samples_per_segment < 1:
            raise ValueError("samples_per_segment must be at least 1")
        if interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative")
        self._read_sample = read_sample
        self._directory = Path(directory)
        self._samples = samples_per_segment
        self._interval = interval_seconds
        self._clock = clock
        self._sleep = sleep

    def capture(self) -> Path:
        """Record one full segment and return the path of the closed file."""

        self._directory.mkdir(parents=True, exist_ok=True)
        started = self._clock()
        target = self._unique_target(started)

        fd, temp_name = tempfile.mkstemp(
            dir=str(self._directory), prefix=".segment-", suffix=".tmp"
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                for index in range(self._samples):
                    readings = self._read_sample()
                    handle.write(format_sample(self._clock(), readings))
                    handle.flush()
                    if index + 1 < self._samples and self._interval:
                        self._sleep(self._interval)
                os.fsync(handle.fileno())
            os.replace(temp_path, target)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        LOGGER.info(
            "Telemetry segment closed",
            extra={"path": str(target), "samples": self._samples},
        )
        return target

    def _unique_target(self, started: datetime) -> Path:
        stem = started.strftime(SEGMENT_TIME_FORMAT)
        target = self._directory / f"{stem}.txt"
        suffix = 1
        while target.exists():
            target = self._directory / f"{stem}-{suffix}.txt"
            suffix += 1
        return target

"""GPS position reading from NMEA $GNGGA sentences over a serial stream."""

from __future__ import annotations

import logging
import re
import time
from typing import Protocol

log = logging.getLogger(__name__)

UART_BUFF_SIZE = 1024
SETTLE_TIME = 0.7
READ_TIMEOUT = 2.0
_POLL_INTERVAL = 0.0001
_MAX_FIELDS = 15
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class ByteStream(Protocol):
    def read(self, size: int) -> bytes | None: ...


def dm_to_dd(dm: float) -> float:
    """Convert degrees-minutes (ddmm.mmmm) to decimal degrees."""
    degree = float(int(dm / 100))
    minute = dm - degree * 100
    return degree + minute / 60


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(0)) if match else 0.0


def parse_gngga(text: str | bytes) -> tuple[float, float] | None:
    """Return (latitude, longitude) from a $GNGGA sentence with a valid fix, else None."""
    if isinstance(text, bytes):
        text = text.decode("latin-1")
    text = text.split("\0", 1)[0]
    start = text.find("$GNGGA")
    if start < 0:
        return None
    fields = [token for token in text[start:].split(",") if token][:_MAX_FIELDS]
    if len(fields) > 6 and fields[6] in ("1", "2"):
        lat = dm_to_dd(_atof(fields[2]))
        lon = dm_to_dd(_atof(fields[4]))
        log.info("position fix: %.5f, %.5f", lat, lon)
        return lat, lon
    return None


def read_with_timeout(stream: ByteStream, size: int, timeout: float) -> bytes:
    """Poll ``stream`` until it yields data or ``timeout`` seconds pass; b"" on timeout."""
    start = time.monotonic()
    while True:
        data = stream.read(size)
        if data:
            return bytes(data)
        time.sleep(_POLL_INTERVAL)
        if time.monotonic() - start >= timeout:
            log.warning("serial read timed out")
            return b""


class GpsReader:
    """Reads positions from a GPS receiver attached to a byte stream."""

    def __init__(
        self,
        stream: ByteStream,
        timeout: float = READ_TIMEOUT,
        settle: float = SETTLE_TIME,
    ) -> None:
        self.stream = stream
        self.timeout = timeout
        self.settle = settle
        self.position: tuple[float, float] | None = None

    def read_position(self) -> tuple[float, float] | None:
        """Read one buffer and return the fix found in it, or None."""
        if self.settle > 0:
            time.sleep(self.settle)
        data = read_with_timeout(self.stream, UART_BUFF_SIZE, self.timeout)
        if not data:
            return None
        fix = parse_gngga(data)
        if fix is not None:
            self.position = fix
        return fix
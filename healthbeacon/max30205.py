"""MAX30205 body-temperature sensor on an I2C bus."""

from __future__ import annotations

import logging
import os
import time
from types import TracebackType

try:
    import fcntl
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore[assignment]

log = logging.getLogger(__name__)

MAX30205_ADDRESS = 0x48
TEMPERATURE_REGISTER = 0x00
CONFIGURATION_REGISTER = 0x01
THYST_REGISTER = 0x02
TOS_REGISTER = 0x03

CONFIG_SHUTDOWN = 0x80
CONFIG_COMPARATOR = 0x02
CONFIG_OS_POLARITY = 0x04
CONFIG_FAULT_QUEUE_0 = 0x08
CONFIG_FAULT_QUEUE_1 = 0x10
CONFIG_DATA_FORMAT = 0x20
CONFIG_TIME_OUT = 0x40
CONFIG_ONE_SHOT = 0x80

CELSIUS_PER_LSB = 0.00390625
_I2C_SLAVE = 0x0703


class I2cError(OSError):
    """Raised when an I2C transfer fails."""


class I2cBus:
    """An I2C adapter reached through a Linux i2c-dev character device."""

    def __init__(self, path: str = "/dev/i2c-1") -> None:
        self.path = path
        if fcntl is None:
            raise I2cError("i2c-dev is not available on this platform")
        try:
            self._fd: int | None = os.open(path, os.O_RDWR)
        except OSError as exc:
            raise I2cError(f"cannot open {path}: {exc}") from exc

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> I2cBus:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _select(self, address: int) -> int:
        if self._fd is None:
            raise I2cError(f"{self.path} is closed")
        try:
            fcntl.ioctl(self._fd, _I2C_SLAVE, address)
        except OSError as exc:
            raise I2cError(f"cannot address device 0x{address:02X}: {exc}") from exc
        return self._fd

    def write(self, address: int, data: bytes) -> None:
        """Write ``data`` to the device at the 7-bit ``address``."""
        fd = self._select(address)
        payload = bytes(data)
        try:
            written = os.write(fd, payload)
        except OSError as exc:
            raise I2cError(f"write to 0x{address:02X} failed: {exc}") from exc
        if written != len(payload):
            raise I2cError(f"short write to 0x{address:02X}: {written}/{len(payload)}")

    def read(self, address: int, length: int) -> bytes:
        """Read ``length`` bytes from the device at the 7-bit ``address``."""
        fd = self._select(address)
        try:
            data = os.read(fd, length)
        except OSError as exc:
            raise I2cError(f"read from 0x{address:02X} failed: {exc}") from exc
        if len(data) != length:
            raise I2cError(f"short read from 0x{address:02X}: {len(data)}/{length}")
        return data

    def write_read(self, address: int, data: bytes, length: int) -> bytes:
        """Write ``data`` and then read ``length`` bytes back."""
        self.write(address, data)
        return self.read(address, length)


def raw_to_celsius(msb: int, lsb: int) -> float:
    """Convert the two temperature register bytes to degrees Celsius."""
    raw = ((msb & 0xFF) << 8) | (lsb & 0xFF)
    if raw & 0x8000:
        raw -= 0x10000
    return raw * CELSIUS_PER_LSB


class Max30205:
    """Driver for a MAX30205 temperature sensor."""

    def __init__(self, bus: I2cBus, address: int = MAX30205_ADDRESS) -> None:
        self.bus = bus
        self.address = address
        self.poll_interval = 0.01

    def begin(self) -> None:
        """Put the sensor in continuous mode and wait until it leaves shutdown."""
        try:
            self.bus.write(self.address, bytes([CONFIGURATION_REGISTER, 0x00]))
        except I2cError:
            log.error("failed to set the sensor mode")
            raise
        while True:
            try:
                data = self.bus.read(self.address, 1)
            except I2cError:
                log.error("failed to read the configuration register")
                raise
            if len(data) != 1:
                raise I2cError("configuration register read returned no data")
            if self.poll_interval > 0:
                time.sleep(self.poll_interval)
            if not data[0] & CONFIG_SHUTDOWN:
                break
        log.info("temperature sensor ready")

    def read_temperature(self) -> float:
        """Read the current temperature in degrees Celsius."""
        data = self.bus.write_read(self.address, bytes([TEMPERATURE_REGISTER]), 2)
        if len(data) != 2:
            raise I2cError(f"temperature read returned {len(data)} bytes")
        return raw_to_celsius(data[0], data[1])
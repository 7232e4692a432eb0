"""MAX30102 pulse-oximeter sensor on an I2C bus."""

from __future__ import annotations

import logging
import time

from healthbeacon.max30205 import I2cBus, I2cError

log = logging.getLogger(__name__)

MAX30102_ADDRESS = 0x57
FIFO_DATA_REGISTER = 0x07
SAMPLE_MASK = 0x03FFFF

_INIT_SEQUENCE = (
    (0x09, 0x03),
    (0x0A, 0x27),
    (0x0C, 0x24),
    (0x0D, 0x24),
    (0x08, 0x00),
    (0x04, 0x00),
    (0x06, 0x00),
)

_CONFIG_REGISTERS = (
    ("MODE_CONFIG", 0x09),
    ("SPO2_CONFIG", 0x0A),
    ("LED1", 0x0C),
    ("LED2", 0x0D),
    ("INT_STATUS", 0x00),
    ("INT_ENABLE", 0x01),
)


def decode_sample(data: bytes) -> tuple[int, int]:
    """Decode six FIFO bytes into an (red, infrared) pair of 18-bit samples."""
    if len(data) != 6:
        raise ValueError(f"a FIFO sample is 6 bytes, got {len(data)}")
    red = int.from_bytes(data[0:3], "big") & SAMPLE_MASK
    ir = int.from_bytes(data[3:6], "big") & SAMPLE_MASK
    return red, ir


class Max30102:
    """Driver for a MAX30102 heart-rate and SpO2 sensor."""

    def __init__(self, bus: I2cBus) -> None:
        self.bus = bus
        self.address = MAX30102_ADDRESS
        self.retry_delay = 1.0

    def read_register(self, reg: int) -> int:
        """Read one byte from register ``reg``."""
        self.bus.write(self.address, bytes([reg]))
        data = self.bus.read(self.address, 1)
        if len(data) != 1:
            raise I2cError(f"register 0x{reg:02X} read returned no data")
        return data[0]

    def write_register(self, reg: int, value: int) -> None:
        """Write one byte ``value`` to register ``reg``."""
        self.bus.write(self.address, bytes([reg, value]))

    def init(self) -> dict[str, int]:
        """Configure the sensor, clear the FIFO and return the configuration read back."""
        for reg, value in _INIT_SEQUENCE:
            try:
                self.write_register(reg, value)
            except I2cError as exc:
                log.warning("write of 0x%02X to register 0x%02X failed: %s", value, reg, exc)
        return self.check_config()

    def check_config(self) -> dict[str, int]:
        """Read the configuration and interrupt registers by name."""
        config = {name: self.read_register(reg) for name, reg in _CONFIG_REGISTERS}
        for (name, reg) in _CONFIG_REGISTERS:
            log.debug("%s (0x%02X) = 0x%02X", name, reg, config[name])
        return config

    def read_fifo(self) -> tuple[int, int]:
        """Read one (red, infrared) sample from the FIFO."""
        while True:
            try:
                self.bus.write(self.address, bytes([FIFO_DATA_REGISTER]))
                break
            except I2cError as exc:
                log.warning("FIFO pointer write failed, retrying: %s", exc)
                if self.retry_delay > 0:
                    time.sleep(self.retry_delay)
        data = self.bus.read(self.address, 6)
        return decode_sample(bytes(data))
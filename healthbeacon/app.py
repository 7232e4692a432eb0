"""Device application: command handling, property reports and the message loop."""

from __future__ import annotations

import json
import logging
import queue
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from healthbeacon.profile import package_command_response, package_property_report
from healthbeacon.types import (
    CommandResponse,
    Property,
    Service,
    UpMessageType,
    ValueType,
)

log = logging.getLogger(__name__)

MSGQUEUE_OBJECTS = 16
SERVICE_ID = "Agriculture"
TEMPERATURE_ALARM = 29.0
HEART_RATE_ALARM = 99

Publisher = Callable[[UpMessageType, "str | None", "str | None", str], object]

_COMMANDS = {
    "Agriculture_Control_light": ("paras", "Light", "led"),
    "Agriculture_Control_Motor": ("Paras", "Motor", "motor"),
}


@dataclass
class DeviceState:
    """Current state of the controlled outputs and of the fall alarm."""

    connected: bool = False
    led: bool = False
    motor: bool = False
    fallen: bool = False

    def mark_fallen(self) -> bool:
        """Record a fall; return True if the state changed."""
        if self.fallen:
            return False
        self.fallen = True
        log.warning("a fall was detected")
        return True

    def mark_standing(self) -> bool:
        """Record that the wearer stood up; return True if the state changed."""
        if not self.fallen:
            return False
        self.fallen = False
        log.info("the wearer is standing again")
        return True


@dataclass
class Report:
    """One set of sensor readings and the position to report."""

    temp: int = 0
    heart_rate: int = 0
    spo2: int = 0
    lat: float = 0.0
    lon: float = 0.0
    lum: int = 0
    hum: int = 0


class _Kind(Enum):
    COMMAND = "command"
    REPORT = "report"


class _JsonObject(list):
    """JSON object members in document order, duplicates kept."""


def _lookup(obj: object, key: str) -> object:
    """Find the first member whose name matches ``key`` ignoring ASCII case."""
    if not isinstance(obj, _JsonObject):
        return None
    wanted = key.lower()
    for name, value in obj:
        if name.lower() == wanted:
            return value
    return None


def build_report_services(report: Report, state: DeviceState) -> list[Service]:
    """Build the property-report services for ``report`` and the device ``state``."""
    properties = [
        Property("Temperature", ValueType.INT, report.temp),
        Property("Humidity", ValueType.INT, report.hum),
        Property("Luminance", ValueType.INT, report.lum),
        Property("Heart_rate", ValueType.INT, report.heart_rate),
        Property("Spo2", ValueType.INT, report.spo2),
        Property("LightStatus", ValueType.STRING, "ON" if state.led else "OFF"),
        Property("MotorStatus", ValueType.STRING, "ON" if state.motor else "OFF"),
        Property("Lat", ValueType.STRING, f"{report.lat:.6f}"),
        Property("Lon", ValueType.STRING, f"{report.lon:.6f}"),
    ]
    return [Service(service_id=SERVICE_ID, properties=properties)]


def handle_command(payload: str | bytes, state: DeviceState) -> int:
    """Apply a platform command to ``state``; return 0 on success, 1 otherwise."""
    try:
        root = json.loads(payload, object_pairs_hook=_JsonObject)
    except ValueError:
        log.warning("command payload is not valid JSON")
        return 1
    name = _lookup(root, "command_name")
    target = _COMMANDS.get(name) if isinstance(name, str) else None
    if target is None:
        return 1
    paras_key, para_key, attribute = target
    para = _lookup(_lookup(root, paras_key), para_key)
    if not isinstance(para, str):
        return 1
    setattr(state, attribute, para == "ON")
    return 0


def alarm_needed(temperature: float, heart_rate: int) -> bool:
    """Return True when the temperature or heart rate is above its alarm level."""
    return temperature > TEMPERATURE_ALARM or heart_rate > HEART_RATE_ALARM


class Application:
    """Queues commands and reports and sends the resulting messages to the cloud."""

    def __init__(self, publish: Publisher, device_id: str | None) -> None:
        self.publish = publish
        self.device_id = device_id
        self.state = DeviceState()
        self._queue: queue.Queue[tuple[_Kind, object]] = queue.Queue(
            maxsize=MSGQUEUE_OBJECTS
        )

    def _put(self, item: tuple[_Kind, object]) -> bool:
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            log.warning("message queue full, %s dropped", item[0].value)
            return False
        return True

    def submit_command(self, request_id: str | None, payload: str | bytes) -> bool:
        """Queue a command from the platform; return False if the queue is full."""
        return self._put((_Kind.COMMAND, (request_id, payload)))

    def submit_report(self, report: Report) -> bool:
        """Queue a sensor report; return False if the queue is full."""
        return self._put((_Kind.REPORT, report))

    def _deal_command(self, request_id: str | None, payload: str | bytes) -> None:
        code = handle_command(payload, self.state)
        response = CommandResponse(ret_code=code, request_id=request_id)
        self.publish(
            UpMessageType.COMMAND_RESPONSE,
            None,
            request_id,
            package_command_response(response),
        )

    def _deal_report(self, report: Report) -> None:
        text = package_property_report(build_report_services(report, self.state))
        self.publish(UpMessageType.PROPERTY_REPORT, self.device_id, None, text)

    def process_pending(self) -> int:
        """Handle every queued message in order; return how many were handled."""
        handled = 0
        while True:
            try:
                kind, item = self._queue.get_nowait()
            except queue.Empty:
                return handled
            if kind is _Kind.COMMAND:
                request_id, payload = item  # type: ignore[misc]
                self._deal_command(request_id, payload)
            else:
                self._deal_report(item)  # type: ignore[arg-type]
            handled += 1
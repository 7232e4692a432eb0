"""Data model for device-to-cloud profile messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class ValueType(IntEnum):
    """Type of a property value in a profile message."""

    INT = 0
    LONG = 1
    FLOAT = 2
    STRING = 3


class UpMessageType(IntEnum):
    """Messages the device sends to the cloud."""

    MSG_UP = 0
    PROPERTY_REPORT = 1
    SUB_PROPERTY_REPORT = 2
    PROPERTY_SET_RESPONSE = 3
    PROPERTY_GET_RESPONSE = 4
    COMMAND_RESPONSE = 5


class DownMessageType(IntEnum):
    """Messages the cloud sends to the device."""

    MSG_DOWN = 0
    COMMANDS = 1
    PROPERTY_SET = 2
    PROPERTY_GET = 3
    EVENT = 4


class Qos(IntEnum):
    """MQTT quality-of-service levels."""

    AT_MOST_ONCE = 0
    AT_LEAST_ONCE = 1
    EXACTLY_ONCE = 2


class ErrorCode(IntEnum):
    """Status codes reported by the cloud connection layer."""

    OK = 0
    PARAMETER_FORMAT = 1
    NETWORK = 2
    CONNECTION_VERSION = 3
    CONNECTION_CLIENT_ID = 4
    CONNECTION_SERVER = 5
    CONNECTION_USER_PASSWORD = 6
    CONNECTION_CLIENT = 7
    SUBSCRIBE = 8
    UNSUBSCRIBE = 9
    PUBLISH = 10
    CONFIGURED = 11
    NOT_CONFIGURED = 12
    NOT_CONNECTED = 13
    GET_HUB_ADDRESS_TIMEOUT = 14
    SYSTEM_MEMORY = 15
    SYSTEM = 16


@dataclass
class Property:
    """A single key/value pair of a service or command response."""

    key: str
    type: ValueType
    value: object

    def to_json_value(self) -> int | float | str:
        """Return the value converted to the JSON type its ``type`` demands."""
        if self.type in (ValueType.INT, ValueType.LONG):
            return int(self.value)  # type: ignore[call-overload]
        if self.type is ValueType.FLOAT:
            return float(self.value)  # type: ignore[arg-type]
        if self.type is ValueType.STRING:
            if not isinstance(self.value, str):
                raise TypeError(f"property {self.key!r} expects a string value")
            return self.value
        raise ValueError(f"unsupported value type {self.type!r}")


@dataclass
class Service:
    """A service with its properties, as reported to the cloud."""

    service_id: str
    properties: list[Property] = field(default_factory=list)
    event_time: str | None = None


@dataclass
class SubDevice:
    """A device behind a gateway together with its services."""

    subdevice_id: str
    services: list[Service] = field(default_factory=list)


@dataclass
class MessageUp:
    """A free-form message sent to the cloud without profile decoding."""

    msg: str
    device_id: str | None = None
    name: str | None = None
    id: str | None = None


@dataclass
class PropertySetResponse:
    """Response to a property-set request."""

    ret_code: int
    ret_description: str | None = None
    request_id: str | None = None


@dataclass
class PropertyGetResponse:
    """Response to a property-get request."""

    request_id: str | None = None
    services: list[Service] = field(default_factory=list)


@dataclass
class CommandResponse:
    """Response to a platform command."""

    ret_code: int
    ret_name: str | None = None
    request_id: str | None = None
    paras: list[Property] | None = None
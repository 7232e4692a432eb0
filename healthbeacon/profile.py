"""Packaging of profile messages into the compact JSON text the cloud expects."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable

from healthbeacon.types import (
    CommandResponse,
    MessageUp,
    Property,
    PropertyGetResponse,
    PropertySetResponse,
    Service,
    SubDevice,
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class ProfileError(ValueError):
    """Raised when a payload cannot be packaged into a profile message."""


class _Members(list):
    """Ordered JSON object members; duplicate keys are kept, as on the wire."""


def _format_number(number: int | float) -> str:
    if isinstance(number, int) and _INT_MIN <= number <= _INT_MAX:
        return str(number)
    value = float(number)
    if math.isnan(value) or math.isinf(value):
        return "null"
    if value.is_integer() and _INT_MIN <= value <= _INT_MAX:
        return str(int(value))
    text = "%1.15g" % value
    if float(text) != value:
        text = "%1.17g" % value
    return text


def _encode_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _encode(value: object) -> str:
    if isinstance(value, _Members):
        inner = ",".join(f"{_encode_string(key)}:{_encode(item)}" for key, item in value)
        return "{" + inner + "}"
    if isinstance(value, list):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    if isinstance(value, str):
        return _encode_string(value)
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return _format_number(value)
    raise ProfileError(f"cannot encode value of type {type(value).__name__}")


def _require_string(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise ProfileError(f"{what} must be a string")
    return value


def _make_kvs(properties: Iterable[Property] | None) -> _Members:
    members = _Members()
    for prop in properties or ():
        try:
            members.append((_require_string(prop.key, "property key"), prop.to_json_value()))
        except (TypeError, ValueError, OverflowError) as exc:
            if isinstance(exc, ProfileError):
                raise
            raise ProfileError(f"invalid property {prop.key!r}: {exc}") from exc
    return members


def _make_service(service: Service) -> _Members:
    members = _Members()
    members.append(("service_id", _require_string(service.service_id, "service_id")))
    members.append(("properties", _make_kvs(service.properties)))
    if service.event_time is not None:
        members.append(("event_time", _require_string(service.event_time, "event_time")))
    return members


def _make_services(services: Iterable[Service] | Service | None) -> list[_Members]:
    if services is None:
        return []
    if isinstance(services, Service):
        services = [services]
    return [_make_service(service) for service in services]


def package_msgup(payload: MessageUp) -> str:
    """Package a free-form upstream message."""
    members = _Members()
    if payload.device_id is not None:
        members.append(("object_device_id", _require_string(payload.device_id, "device_id")))
    if payload.name is not None:
        members.append(("name", _require_string(payload.name, "name")))
    if payload.id is not None:
        members.append(("id", _require_string(payload.id, "id")))
    members.append(("content", _require_string(payload.msg, "msg")))
    return _encode(members)


def package_property_report(services: Iterable[Service] | Service | None) -> str:
    """Package a property report for one or more services."""
    members = _Members()
    members.append(("services", _make_services(services)))
    return _encode(members)


def package_gw_property_report(devices: Iterable[SubDevice] | SubDevice | None) -> str:
    """Package a gateway report of the properties of its sub-devices."""
    if devices is None:
        devices = []
    elif isinstance(devices, SubDevice):
        devices = [devices]
    device_list = []
    for device in devices:
        entry = _Members()
        entry.append(("device_id", _require_string(device.subdevice_id, "subdevice_id")))
        entry.append(("services", _make_services(device.services)))
        device_list.append(entry)
    members = _Members()
    members.append(("devices", device_list))
    return _encode(members)


def package_property_set_response(payload: PropertySetResponse | None) -> str:
    """Package the response to a property-set request."""
    members = _Members()
    if payload is not None:
        members.append(("result_code", int(payload.ret_code)))
        if payload.ret_description is not None:
            members.append(
                ("result_desc", _require_string(payload.ret_description, "ret_description"))
            )
    return _encode(members)


def package_property_get_response(payload: PropertyGetResponse) -> str:
    """Package the response to a property-get request."""
    members = _Members()
    members.append(("services", _make_services(payload.services)))
    return _encode(members)


def package_command_response(payload: CommandResponse) -> str:
    """Package the response to a platform command."""
    members = _Members()
    members.append(("result_code", int(payload.ret_code)))
    if payload.ret_name is not None:
        members.append(("result_desc", _require_string(payload.ret_name, "ret_name")))
    if payload.paras:
        members.append(("paras", _make_kvs(payload.paras)))
    return _encode(members)
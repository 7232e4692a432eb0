import json

import pytest

from healthbeacon.profile import (
    ProfileError,
    package_command_response,
    package_gw_property_report,
    package_msgup,
    package_property_get_response,
    package_property_report,
    package_property_set_response,
)
from healthbeacon.types import (
    CommandResponse,
    MessageUp,
    Property,
    PropertyGetResponse,
    PropertySetResponse,
    Service,
    SubDevice,
    ValueType,
)


def _agriculture_service():
    return Service(
        service_id="Agriculture",
        properties=[
            Property("Temperature", ValueType.INT, 25),
            Property("LightStatus", ValueType.STRING, "ON"),
            Property("Lat", ValueType.STRING, "30.123456"),
        ],
    )


def test_msgup_content_only():
    assert package_msgup(MessageUp(msg="hello")) == '{"content":"hello"}'


def test_msgup_all_fields_in_order():
    text = package_msgup(MessageUp(msg="body", device_id="dev-1", name="n", id="7"))
    assert text == '{"object_device_id":"dev-1","name":"n","id":"7","content":"body"}'


def test_msgup_without_message_raises():
    with pytest.raises(ProfileError):
        package_msgup(MessageUp(msg=None))


def test_property_report_exact_text():
    service = Service("Agriculture", [Property("Temperature", ValueType.INT, 25)])
    assert (
        package_property_report([service])
        == '{"services":[{"service_id":"Agriculture","properties":{"Temperature":25}}]}'
    )


def test_property_report_round_trip():
    data = json.loads(package_property_report([_agriculture_service()]))
    service = data["services"][0]
    assert service["service_id"] == "Agriculture"
    assert service["properties"] == {
        "Temperature": 25,
        "LightStatus": "ON",
        "Lat": "30.123456",
    }
    assert "event_time" not in service


def test_property_report_is_compact():
    text = package_property_report([_agriculture_service()])
    assert " " not in text and "\n" not in text


def test_property_report_event_time_comes_last():
    service = Service("s", [], event_time="20250101T000000Z")
    text = package_property_report(service)
    assert text.index('"properties"') < text.index('"event_time"')
    assert json.loads(text)["services"][0]["event_time"] == "20250101T000000Z"


def test_property_report_empty_services():
    assert json.loads(package_property_report([])) == {"services": []}


def test_float_values_keep_value():
    service = Service("s", [Property("x", ValueType.FLOAT, 36.75)])
    data = json.loads(package_property_report(service))
    assert data["services"][0]["properties"]["x"] == 36.75


def test_integral_float_printed_as_integer():
    service = Service("s", [Property("x", ValueType.FLOAT, 2.0)])
    assert '"x":2}' in package_property_report(service)


def test_duplicate_keys_are_kept():
    service = Service(
        "s", [Property("k", ValueType.INT, 1), Property("k", ValueType.INT, 2)]
    )
    text = package_property_report(service)
    assert text.count('"k":') == 2


def test_string_property_with_non_string_value_raises():
    service = Service("s", [Property("x", ValueType.STRING, 5)])
    with pytest.raises(ProfileError):
        package_property_report(service)


def test_int_property_with_bad_value_raises():
    service = Service("s", [Property("x", ValueType.INT, "abc")])
    with pytest.raises(ProfileError):
        package_property_report(service)


def test_missing_service_id_raises():
    with pytest.raises(ProfileError):
        package_property_report(Service(None))


def test_non_ascii_strings_are_not_escaped():
    service = Service("s", [Property("msg", ValueType.STRING, "摔倒")])
    text = package_property_report(service)
    assert "摔倒" in text
    assert json.loads(text)["services"][0]["properties"]["msg"] == "摔倒"


def test_gw_property_report_round_trip():
    devices = [
        SubDevice("sub-a", [_agriculture_service()]),
        SubDevice("sub-b", []),
    ]
    data = json.loads(package_gw_property_report(devices))
    assert [d["device_id"] for d in data["devices"]] == ["sub-a", "sub-b"]
    assert data["devices"][0]["services"][0]["properties"]["Temperature"] == 25
    assert data["devices"][1]["services"] == []


def test_gw_property_report_missing_id_raises():
    with pytest.raises(ProfileError):
        package_gw_property_report([SubDevice(None)])


def test_property_set_response_with_description():
    text = package_property_set_response(PropertySetResponse(0, "ok"))
    assert text == '{"result_code":0,"result_desc":"ok"}'


def test_property_set_response_none_payload():
    assert package_property_set_response(None) == "{}"


def test_property_get_response_round_trip():
    payload = PropertyGetResponse(request_id="r1", services=[_agriculture_service()])
    data = json.loads(package_property_get_response(payload))
    assert data["services"][0]["service_id"] == "Agriculture"
    assert "request_id" not in data


def test_command_response_minimal():
    assert package_command_response(CommandResponse(0)) == '{"result_code":0}'


def test_command_response_full():
    payload = CommandResponse(
        1, ret_name="failed", paras=[Property("Light", ValueType.STRING, "ON")]
    )
    data = json.loads(package_command_response(payload))
    assert data == {"result_code": 1, "result_desc": "failed", "paras": {"Light": "ON"}}


def test_command_response_empty_paras_omitted():
    data = json.loads(package_command_response(CommandResponse(0, paras=[])))
    assert "paras" not in data and data["result_code"] == 0
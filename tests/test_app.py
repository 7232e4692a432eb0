import json

import pytest

from healthbeacon.app import (
    HEART_RATE_ALARM,
    MSGQUEUE_OBJECTS,
    SERVICE_ID,
    TEMPERATURE_ALARM,
    Application,
    DeviceState,
    Report,
    alarm_needed,
    build_report_services,
    handle_command,
)
from healthbeacon.types import UpMessageType


class Recorder:
    def __init__(self):
        self.sent = []

    def __call__(self, kind, device_id, request_id, payload):
        self.sent.append((kind, device_id, request_id, json.loads(payload)))


def _light(value):
    return json.dumps({"command_name": "Agriculture_Control_light", "paras": {"Light": value}})


def _motor(value):
    return json.dumps({"command_name": "Agriculture_Control_Motor", "Paras": {"Motor": value}})


def test_mark_fallen_and_standing_toggle_once():
    state = DeviceState()
    assert state.mark_fallen() is True
    assert state.mark_fallen() is False
    assert state.fallen is True
    assert state.mark_standing() is True
    assert state.mark_standing() is False
    assert state.fallen is False


def test_light_command_switches_led():
    state = DeviceState()
    assert handle_command(_light("ON"), state) == 0
    assert state.led is True
    assert handle_command(_light("OFF"), state) == 0
    assert state.led is False


def test_motor_command_switches_motor():
    state = DeviceState()
    assert handle_command(_motor("ON"), state) == 0
    assert state.motor is True
    assert state.led is False


def test_parameter_keys_are_case_insensitive():
    state = DeviceState()
    payload = json.dumps({"command_name": "Agriculture_Control_Motor", "paras": {"motor": "ON"}})
    assert handle_command(payload, state) == 0
    assert state.motor is True


def test_any_other_value_turns_output_off():
    state = DeviceState(led=True)
    assert handle_command(_light("on"), state) == 0
    assert state.led is False


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"paras": {"Light": "ON"}}),
        json.dumps({"command_name": "Unknown", "paras": {"Light": "ON"}}),
        json.dumps({"command_name": "Agriculture_Control_light"}),
        json.dumps({"command_name": "Agriculture_Control_light", "paras": {}}),
        json.dumps({"command_name": "Agriculture_Control_light", "paras": {"Light": 1}}),
        json.dumps(["command_name"]),
    ],
)
def test_bad_commands_fail_without_change(payload):
    state = DeviceState()
    assert handle_command(payload, state) != 0
    assert state == DeviceState()


def test_alarm_thresholds():
    assert alarm_needed(TEMPERATURE_ALARM, HEART_RATE_ALARM) is False
    assert alarm_needed(TEMPERATURE_ALARM + 0.5, 0) is True
    assert alarm_needed(0.0, HEART_RATE_ALARM + 1) is True


def test_build_report_services_properties():
    report = Report(temp=36, heart_rate=72, spo2=97, lat=31.25, lon=121.5)
    services = build_report_services(report, DeviceState(led=True))
    assert [s.service_id for s in services] == [SERVICE_ID]
    props = {p.key: p.to_json_value() for p in services[0].properties}
    assert props["Temperature"] == report.temp
    assert props["Heart_rate"] == report.heart_rate
    assert props["Spo2"] == report.spo2
    assert props["LightStatus"] == "ON"
    assert props["MotorStatus"] == "OFF"
    assert float(props["Lat"]) == pytest.approx(report.lat)
    assert float(props["Lon"]) == pytest.approx(report.lon)
    assert len(props["Lat"].split(".")[1]) == 6


def test_report_is_published_with_device_id():
    recorder = Recorder()
    app = Application(recorder, "device-example")
    assert app.submit_report(Report(temp=37, heart_rate=80, spo2=98)) is True
    assert app.process_pending() == 1
    kind, device_id, request_id, body = recorder.sent[0]
    assert kind is UpMessageType.PROPERTY_REPORT
    assert device_id == "device-example"
    assert request_id is None
    service = body["services"][0]
    assert service["service_id"] == SERVICE_ID
    assert service["properties"]["Temperature"] == 37
    assert service["properties"]["Heart_rate"] == 80


def test_command_is_answered_and_affects_later_reports():
    recorder = Recorder()
    app = Application(recorder, "device-example")
    app.submit_command("req-1", _light("ON"))
    app.submit_report(Report())
    assert app.process_pending() == 2
    kind, device_id, request_id, body = recorder.sent[0]
    assert kind is UpMessageType.COMMAND_RESPONSE
    assert device_id is None
    assert request_id == "req-1"
    assert body == {"result_code": 0}
    assert recorder.sent[1][3]["services"][0]["properties"]["LightStatus"] == "ON"


def test_failed_command_reports_failure_code():
    recorder = Recorder()
    app = Application(recorder, None)
    app.submit_command("req-2", b"{broken")
    app.process_pending()
    assert recorder.sent[0][3]["result_code"] != 0
    assert app.state == DeviceState()


def test_queue_limit_drops_extra_messages():
    recorder = Recorder()
    app = Application(recorder, None)
    accepted = [app.submit_report(Report()) for _ in range(MSGQUEUE_OBJECTS)]
    assert all(accepted)
    assert app.submit_command("late", _light("ON")) is False
    assert app.process_pending() == MSGQUEUE_OBJECTS
    assert app.process_pending() == 0
    assert app.state.led is False
# healthbeacon

The logic of a wearable health monitor in plain Python. It reads body
temperature, heart rate, blood oxygen and GPS position. It decides when a local
alarm is needed because readings are out of range. It builds the JSON property
reports and command responses that an IoT cloud platform expects, and it
applies the platform's light and motor commands.

The package has no dependencies outside the standard library.

## Modules

- `healthbeacon.types`: the message model.
  - Records: `Property`, `Service`, `SubDevice`, `MessageUp`,
    `PropertySetResponse`, `PropertyGetResponse` and `CommandResponse`.
  - Enums: `ValueType`, `UpMessageType`, `DownMessageType`, `Qos` and
    `ErrorCode`.
  - `Property.to_json_value()` converts a value to the JSON type its
    `ValueType` asks for.
- `healthbeacon.profile`: turns those records into compact JSON text:
  - `package_msgup`
  - `package_property_report`
  - `package_gw_property_report`
  - `package_property_set_response`
  - `package_property_get_response`
  - `package_command_response`

  Members keep their order in the output. Any function raises `ProfileError`
  when a payload cannot be encoded.
- `healthbeacon.gps`: reading NMEA `$GNGGA` sentences.
  - `parse_gngga` returns `(latitude, longitude)` for a sentence with fix
    quality 1 or 2. It returns `None` for any other sentence.
  - `dm_to_dd` converts `ddmm.mmmm` to decimal degrees.
  - `read_with_timeout` polls any object with a `read(size)` method until it
    returns data or the timeout runs out. On timeout it returns `b""`.
  - `GpsReader.read_position()` waits a settle time, reads one buffer and
    returns the fix found in it. It also keeps the last fix in `position`.
- `healthbeacon.max30205`: the MAX30205 body-temperature sensor.
  - `I2cBus` opens a Linux i2c-dev device (by default `/dev/i2c-1`). It
    provides `write`, `read` and `write_read`, and it can be used as a context
    manager.
  - Bus failures raise `I2cError`.
  - `Max30205.begin()` sets continuous mode and waits for the sensor to leave
    shutdown.
  - `Max30205.read_temperature()` returns degrees Celsius.
  - `raw_to_celsius` decodes the two register bytes.
- `healthbeacon.max30102`: the MAX30102 pulse-oximetry sensor on the same kind
  of bus.
  - `Max30102` provides `init`, `read_register`, `write_register`,
    `check_config` and `read_fifo`.
  - `init` and `check_config` return the configuration registers by name.
  - `read_fifo` returns one `(red, infrared)` sample.
  - `decode_sample` splits a 6-byte FIFO frame into two 18-bit readings.
- `healthbeacon.pulse`: signal processing for the pulse sensor.
  - `PulseOximeter.add_sample(red, ir)` finds heartbeats as peaks in the
    infrared signal and returns `True` when a sample completes one. It keeps
    `heart_rate` up to date, and updates `spo2` after every 100 samples.
  - `HeartStatusTracker.update(...)` records beat intervals. After 15 intervals
    it returns HRV, vitality, mood state and mood.
  - Helpers: `mean`, `stddev`, `interval_to_hr`, `compute_spo2` and
    `simple_mood_estimate`.
- `healthbeacon.app`: ties the parts together.
  - `Application` holds a queue of up to 16 commands and reports.
    `process_pending` handles them in order.
  - `DeviceState` holds the light, motor and fall state. `mark_fallen` and
    `mark_standing` report whether the state changed.
  - `build_report_services` builds the "Agriculture" service property report.
  - `handle_command` applies a light or motor command. It returns 0 on success
    and 1 otherwise.
  - `alarm_needed` is true for a temperature above 29.0 °C or a heart rate above
    99 BPM.

## Example

```python
from healthbeacon.gps import dm_to_dd, parse_gngga
from healthbeacon.max30205 import raw_to_celsius
from healthbeacon.pulse import interval_to_hr, stddev
from healthbeacon.app import alarm_needed

raw_to_celsius(0x19, 0x00)      # 25.0 °C
interval_to_hr(800)             # 75 beats per minute
stddev([800, 810, 790])         # spread of beat intervals
alarm_needed(30.5, 80)          # True: too warm
dm_to_dd(3958.0)                # ddmm.mmmm -> decimal degrees
```

## Running the application

Make an `Application` with two arguments:

- a publish callable, called as `publish(message_type, device_id, request_id, text)`;
- a device id.

Feed it with `submit_report(Report(...))` and `submit_command(request_id, payload)`.
Both return `False` when the queue is full. Then call `process_pending()`.

- Each report is published as an `UpMessageType.PROPERTY_REPORT` with the
  device id.
- Each command is answered with an `UpMessageType.COMMAND_RESPONSE` that
  carries its request id and a result code: 0 when the command was understood,
  1 otherwise.

## What it does not do

- There is no MQTT client, network or Wi-Fi connection. Delivering the
  published text is up to the callable you pass in.
- No thread or loop samples the sensors or calls `process_pending`. Your code
  drives it.
- Buttons, fall sensing and the alarm output pin are not handled. `DeviceState`
  records falls, and `alarm_needed` only gives the decision.
- There is no command-line program.
"""Heart-rate, SpO2 and heart-rate-variability estimation from pulse-oximeter samples."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

log = logging.getLogger(__name__)

SAMPLE_NUM = 100
SAMPLE_INTERVAL_MS = 40
MIN_PEAK_DISTANCE = 15
MAX_PEAKS = 10
SPO2_SAMPLE_SIZE = 100
MAX_SAMPLES = 15
PEAK_THRESHOLD = 1000

BASELINE_HR = 70
HRV_THRESHOLD = 20.0
POSITIVE_RATIO_THRESHOLD = 60.0


class Mood(str, Enum):
    """Rough emotional state estimated from heart rate and HRV."""

    ANXIOUS = "anxious"
    CALM = "calm"
    NORMAL = "normal"


class Vitality(str, Enum):
    """Physical vitality estimated from heart-rate variability."""

    ENERGETIC = "energetic"
    NORMAL = "normal"
    LOW = "low"


class MoodState(str, Enum):
    """Overall mood derived from the share of positive and neutral moments."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


def mean(values: Sequence[float]) -> float:
    """Return the arithmetic mean of ``values``."""
    if not values:
        raise ValueError("mean of an empty sequence")
    return sum(values) / len(values)


def stddev(values: Sequence[float]) -> float:
    """Return the population standard deviation of ``values``."""
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def interval_to_hr(interval_ms: int) -> int:
    """Convert a beat interval in milliseconds to beats per minute; 0 for a zero interval."""
    if interval_ms == 0:
        return 0
    quotient = 60000 // abs(interval_ms)
    return quotient if interval_ms > 0 else -quotient


def simple_mood_estimate(current_hr: int, hrv: float) -> Mood:
    """Estimate the mood from the current heart rate and heart-rate variability."""
    limit = BASELINE_HR * 1.1
    if hrv < HRV_THRESHOLD and current_hr > limit:
        mood = Mood.ANXIOUS
    elif hrv >= HRV_THRESHOLD and current_hr <= limit:
        mood = Mood.CALM
    else:
        mood = Mood.NORMAL
    log.info("mood estimate: %s", mood.value)
    return mood


def compute_spo2(red: Sequence[int], ir: Sequence[int]) -> int | None:
    """Estimate SpO2 in percent from matching red and infrared windows; None if not measurable."""
    if len(red) != len(ir):
        raise ValueError("red and infrared windows must have the same length")
    if not red:
        raise ValueError("empty sample window")
    count = float(len(red))
    red_dc = sum(red) / count
    ir_dc = sum(ir) / count
    red_ac = float(max(red) - min(red))
    ir_ac = float(max(ir) - min(ir))
    if ir_ac == 0 or ir_dc == 0 or red_dc == 0:
        return None
    ratio = (red_ac / red_dc) / (ir_ac / ir_dc)
    spo2 = min(100.0, max(0.0, 110.0 - 25.0 * ratio))
    return int(spo2 + 0.5)


class PulseOximeter:
    """Tracks heart rate and SpO2 from a stream of (red, infrared) samples."""

    def __init__(self) -> None:
        self.heart_rate = 0
        self.spo2 = 0
        self.peak_count = 0
        self._ir_window = [0] * SAMPLE_NUM
        self._index = 0
        self._last_peak = -MIN_PEAK_DISTANCE
        self._peak_intervals = [0] * MAX_PEAKS
        self._red_raw = [0] * SPO2_SAMPLE_SIZE
        self._ir_raw = [0] * SPO2_SAMPLE_SIZE
        self._spo2_index = 0

    def add_sample(self, red: int, ir: int) -> bool:
        """Add one sample; return True when it completes a detected heartbeat."""
        index = self._index
        self._ir_window[index] = ir
        self._red_raw[self._spo2_index] = red
        self._ir_raw[self._spo2_index] = ir

        ir_avg = sum(self._ir_window) // SAMPLE_NUM
        prev = self._ir_window[(index - 1) % SAMPLE_NUM]
        nxt = self._ir_window[(index + 1) % SAMPLE_NUM]

        beat = False
        if ir > prev and ir > nxt and ir > ir_avg + PEAK_THRESHOLD:
            interval = (index - self._last_peak) % SAMPLE_NUM
            if index - self._last_peak >= 0:
                interval = index - self._last_peak
            if interval >= MIN_PEAK_DISTANCE:
                self._peak_intervals[self.peak_count % MAX_PEAKS] = interval
                self.peak_count += 1
                self._last_peak = index
                recorded = self._peak_intervals[: min(self.peak_count, MAX_PEAKS)]
                avg_interval = sum(recorded) // len(recorded)
                self.heart_rate = 60000 // (avg_interval * SAMPLE_INTERVAL_MS)
                beat = True

        self._index = (index + 1) % SAMPLE_NUM
        self._spo2_index += 1
        if self._spo2_index >= SPO2_SAMPLE_SIZE:
            self._spo2_index = 0
            spo2 = compute_spo2(self._red_raw, self._ir_raw)
            if spo2 is not None:
                self.spo2 = spo2
        return beat


@dataclass(frozen=True)
class HeartStatus:
    """Result of one heart-status update; analysis fields are None while sampling."""

    heart_rate: int
    hrv: float | None = None
    vitality: Vitality | None = None
    positive_ratio: float | None = None
    mood_state: MoodState | None = None
    mood: Mood | None = None

    @property
    def sampling(self) -> bool:
        return self.hrv is None


class HeartStatusTracker:
    """Analyses recent beat intervals for heart rate, HRV, vitality and mood."""

    def __init__(self) -> None:
        self._intervals = [0] * MAX_SAMPLES
        self.sample_count = 0

    def update(
        self,
        current_interval: int,
        positive_count: int,
        neutral_count: int,
        total_count: int,
    ) -> HeartStatus:
        """Record a beat interval in milliseconds and return the current status."""
        self._intervals[self.sample_count % MAX_SAMPLES] = current_interval
        self.sample_count += 1

        if self.sample_count < MAX_SAMPLES:
            current_hr = interval_to_hr(current_interval)
            log.info("heart rate (sampling): %d BPM, waiting for more data", current_hr)
            return HeartStatus(heart_rate=current_hr)

        valid = sorted(self._intervals)[2 : MAX_SAMPLES - 2]
        hrv = stddev(valid)
        if hrv > 40:
            vitality = Vitality.ENERGETIC
        elif hrv >= 20:
            vitality = Vitality.NORMAL
        else:
            vitality = Vitality.LOW

        positive_ratio = 0.0
        if total_count > 0:
            positive_ratio = (positive_count + neutral_count) / total_count * 100.0
        mood_state = (
            MoodState.POSITIVE
            if positive_ratio >= POSITIVE_RATIO_THRESHOLD
            else MoodState.NEGATIVE
        )

        current_hr = interval_to_hr(int(mean(valid)))
        log.info("heart rate: %d BPM", current_hr)
        log.info("vitality (HRV): %.2f ms, %s", hrv, vitality.value)
        log.info("positive ratio: %.2f%%, %s", positive_ratio, mood_state.value)
        mood = simple_mood_estimate(current_hr, hrv)
        return HeartStatus(
            heart_rate=current_hr,
            hrv=hrv,
            vitality=vitality,
            positive_ratio=positive_ratio,
            mood_state=mood_state,
            mood=mood,
        )
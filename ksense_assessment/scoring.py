"""Deterministic risk scoring for a single patient record.

Each signal is parsed into a typed value or None. None means the field was
missing, empty or malformed: the signal scores 0 and the record is flagged
as a data quality issue. Scoring never raises.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ksense_assessment import config


class BloodPressure(NamedTuple):
    systolic: float
    diastolic: float


class SignalScore(NamedTuple):
    points: int
    invalid: bool = False


INVALID = SignalScore(0, invalid=True)


def parse_number(value) -> Optional[float]:
    # only real JSON numbers count; numeric-looking strings do not
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _parse_half(text):
    text = text.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_blood_pressure(value) -> Optional[BloodPressure]:
    if not isinstance(value, str) or not value:
        return None
    parts = value.split("/")
    if len(parts) != 2:
        return None
    systolic, diastolic = (_parse_half(p) for p in parts)
    if systolic is None or diastolic is None:
        return None
    return BloodPressure(systolic, diastolic)


def score_bp(value) -> SignalScore:
    bp = parse_blood_pressure(value)
    if bp is None:
        return INVALID
    s, d = bp
    if s < 120 and d < 80:
        return SignalScore(0)  # Normal
    if 120 <= s <= 129 and d < 80:
        return SignalScore(1)  # Elevated
    if (130 <= s <= 139) or (80 <= d <= 89):
        return SignalScore(2)  # Stage 1
    if s >= 140 or d >= 90:
        return SignalScore(3)  # Stage 2
    return SignalScore(0)


def score_temp(value) -> SignalScore:
    t = parse_number(value)
    if t is None:
        return INVALID
    if t <= 99.5:
        return SignalScore(0)
    if 99.6 <= t <= 100.9:
        return SignalScore(1)
    if t >= 101:
        return SignalScore(2)
    # readings between the published brackets (e.g. 100.95)
    return SignalScore(0)


def score_age(value) -> SignalScore:
    a = parse_number(value)
    if a is None:
        return INVALID
    if a < 40:
        return SignalScore(0)
    if a <= 65:
        return SignalScore(1)
    return SignalScore(2)


def has_fever(value) -> bool:
    t = parse_number(value)
    return t is not None and t >= config.FEVER_THRESHOLD


@dataclass(frozen=True)
class Assessment:
    patient_id: Optional[str]
    blood_pressure: SignalScore
    temperature: SignalScore
    age: SignalScore
    fever: bool

    @property
    def total(self) -> int:
        return self.blood_pressure.points + self.temperature.points + self.age.points

    @property
    def data_quality_issue(self) -> bool:
        return self.blood_pressure.invalid or self.temperature.invalid or self.age.invalid

    @property
    def high_risk(self) -> bool:
        return self.total >= config.HIGH_RISK_THRESHOLD


def classify(record) -> Assessment:
    if not isinstance(record, Mapping):
        record = {}
    temperature = record.get("temperature")
    return Assessment(
        patient_id=record.get("patient_id"),
        blood_pressure=score_bp(record.get("blood_pressure")),
        temperature=score_temp(temperature),
        age=score_age(record.get("age")),
        # checked against the raw reading, independent of the temperature score
        fever=has_fever(temperature),
    )

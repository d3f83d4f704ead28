# buffbucks/models/domain/fitness_domain.py
"""
Fitness Domain Models
Domain models for mint request evaluation.
Upstream payloads are wrapped rather than validated: a missing or empty level
anywhere in an aggregate response means "no data" and totals to zero.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

DAY_MILLIS = 86_400_000


@dataclass(frozen=True)
class InvocationArgs:
    """Positional arguments of one mint invocation, kept as supplied."""

    claimed_email: Any
    last_mint_time: Any

    @classmethod
    def from_args(cls, args: list) -> "InvocationArgs":
        return cls(claimed_email=args[0], last_mint_time=args[1])

    @property
    def last_mint_time_millis(self) -> int:
        return int(self.last_mint_time)


@dataclass(frozen=True)
class DayWindow:
    """Canonical [start, end) boundary of the current day in epoch millis."""

    start_time_millis: int
    end_time_millis: int

    def __post_init__(self):
        if self.end_time_millis - self.start_time_millis != DAY_MILLIS:
            raise ValueError(
                f"Day window must span exactly {DAY_MILLIS} ms, got "
                f"[{self.start_time_millis}, {self.end_time_millis})"
            )

    @classmethod
    def from_payload(cls, data: dict) -> "DayWindow":
        """Build from the time-utility payload ``{startTime, endTime}``."""
        start, end = data["startTime"], data["endTime"]
        for value in (start, end):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("Day window boundaries must be integers")
        return cls(start_time_millis=start, end_time_millis=end)


class ValueKind(str, Enum):
    """Typed value slot used by Google Fit data points."""

    INT = "intVal"
    FLOAT = "fpVal"


class MetricPoint:
    """Single data point holding one or more typed values."""

    def __init__(self, data: Any):
        self.values = _as_list(data.get("value") if isinstance(data, dict) else None)

    def first_value(self, kind: ValueKind) -> float:
        if not self.values or not isinstance(self.values[0], dict):
            return 0
        value = self.values[0].get(kind.value)
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 0
        return value


class MetricBucket:
    """Time bucket of an aggregate response."""

    def __init__(self, data: Any):
        self.datasets = _as_list(data.get("dataset") if isinstance(data, dict) else None)

    def points(self) -> list[MetricPoint]:
        """Points of the first dataset; other datasets are not counted."""
        if not self.datasets or not isinstance(self.datasets[0], dict):
            return []
        return [MetricPoint(point) for point in _as_list(self.datasets[0].get("point"))]

    def total(self, kind: ValueKind) -> float:
        return sum(point.first_value(kind) for point in self.points())


class MetricSeries:
    """Response to a dataset:aggregate query."""

    def __init__(self, data: Any):
        self.raw_data = data if isinstance(data, dict) else {}
        self.buckets = [MetricBucket(bucket) for bucket in _as_list(self.raw_data.get("bucket"))]

    def has_error(self) -> bool:
        """Check if the payload carries an error member instead of data."""
        return bool(self.raw_data.get("error"))

    def total(self, kind: ValueKind) -> float:
        """Sum the first value of every point across all buckets."""
        return sum(bucket.total(kind) for bucket in self.buckets)


@dataclass(frozen=True)
class ActivityTotals:
    """Raw daily activity totals feeding the composite score."""

    steps: float = 0
    calories: float = 0
    heart_points: float = 0

    def to_dict(self) -> dict:
        return {
            "steps": self.steps,
            "calories": self.calories,
            "heart_points": self.heart_points,
        }


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []

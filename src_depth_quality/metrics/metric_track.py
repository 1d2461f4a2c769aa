"""
Metric bookkeeping: identity, color bands and value history.

A MetricSpec describes a metric (name, display bounds, unit, description and
the good/warn/bad ranges). A MetricTrack couples a spec with the append-only
history of values observed during a session.

Thread model: one producer (the frame callback) appends while any number of
readers take snapshots. Each track guards its state with its own lock, so a
reader sees either the history before an append or after it, never a partial
update.
"""

import math
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from utils.logger_config import get_logger

logger = get_logger(__name__)

Interval = Tuple[float, float]


class Band(Enum):
    """Classification bands in priority order."""
    GOOD = 'good'
    WARN = 'warn'
    BAD = 'bad'

    @classmethod
    def parse(cls, value: Union['Band', str]) -> 'Band':
        """Accept a Band, its value, or the color names used on screen."""
        if isinstance(value, Band):
            return value
        key = str(value).strip().lower()
        aliases = {'green': cls.GOOD, 'yellow': cls.WARN, 'red': cls.BAD}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown band: {value!r}")


# Overlapping ranges resolve in this order
BAND_PRIORITY: Tuple[Band, ...] = (Band.GOOD, Band.WARN, Band.BAD)


def _as_interval(low: float, high: float) -> Interval:
    low, high = float(low), float(high)
    if low > high:
        raise ValueError(f"Range low bound {low} exceeds high bound {high}")
    return low, high


@dataclass(frozen=True)
class MetricSpec:
    """
    Identity and display configuration of a metric.

    Ranges may overlap or leave gaps; ``classify`` picks the first band in
    BAND_PRIORITY whose closed interval contains the value.
    """
    name: str
    display_min: float
    display_max: float
    unit: str
    description: str
    ranges: Mapping[Band, Interval] = field(default_factory=dict)

    def __post_init__(self):
        if self.display_min > self.display_max:
            raise ValueError(
                f"{self.name}: display_min {self.display_min} exceeds display_max {self.display_max}")
        normalized = {Band.parse(band): _as_interval(*interval)
                      for band, interval in dict(self.ranges).items()}
        object.__setattr__(self, 'ranges', normalized)

    def with_range(self, band: Union[Band, str], low: float, high: float) -> 'MetricSpec':
        """Return a copy with one band replaced."""
        ranges = dict(self.ranges)
        ranges[Band.parse(band)] = _as_interval(low, high)
        return replace(self, ranges=ranges)

    def with_ranges(self, ranges: Mapping[Union[Band, str], Sequence[float]]) -> 'MetricSpec':
        """Return a copy with several bands replaced at once."""
        merged = dict(self.ranges)
        for band, interval in ranges.items():
            merged[Band.parse(band)] = _as_interval(*interval)
        return replace(self, ranges=merged)

    def classify(self, value: float) -> Optional[Band]:
        """Band containing ``value``, or None when no band does."""
        for band in BAND_PRIORITY:
            interval = self.ranges.get(band)
            if interval is not None and interval[0] <= value <= interval[1]:
                return band
        return None


class MetricTrack:
    """A metric spec plus the session history of its values."""

    def __init__(self, spec: MetricSpec):
        self._spec = spec
        self._values: List[float] = []
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        name: str,
        display_min: float,
        display_max: float,
        unit: str,
        description: str,
        ranges: Optional[Mapping[Union[Band, str], Sequence[float]]] = None
    ) -> 'MetricTrack':
        """
        Create a track with an empty history.

        Args:
            name: Metric name
            display_min: Lower display bound
            display_max: Upper display bound
            unit: Unit label, e.g. '(mm)'
            description: Multi-line description
            ranges: Optional band -> (low, high) mapping, applied atomically

        Returns:
            MetricTrack: New track
        """
        spec = MetricSpec(name, display_min, display_max, unit, description,
                          ranges={band: tuple(interval) for band, interval in (ranges or {}).items()})
        return cls(spec)

    @property
    def spec(self) -> MetricSpec:
        return self._spec

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def display_min(self) -> float:
        return self._spec.display_min

    @property
    def display_max(self) -> float:
        return self._spec.display_max

    @property
    def unit(self) -> str:
        return self._spec.unit

    @property
    def description(self) -> str:
        return self._spec.description

    @property
    def ranges(self) -> Dict[Band, Interval]:
        return dict(self._spec.ranges)

    def set_range(self, band: Union[Band, str], low: float, high: float) -> 'MetricTrack':
        """Set one band's interval; returns the track for chaining."""
        new_spec = self._spec.with_range(band, low, high)
        with self._lock:
            self._spec = new_spec
        logger.debug(f"{self.name}: {Band.parse(band).value} range set to [{low}, {high}]")
        return self

    def add_value(self, value: float) -> None:
        """
        Append a value to the history.

        Raises:
            ValueError: If the value is NaN or infinite
        """
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"{self.name}: refusing non-finite value {value}")
        with self._lock:
            self._values.append(value)

    def current_value(self) -> Optional[float]:
        """Last appended value, or None when no value was recorded yet."""
        with self._lock:
            return self._values[-1] if self._values else None

    def history(self) -> Tuple[float, ...]:
        """Snapshot of all values in arrival order."""
        with self._lock:
            return tuple(self._values)

    def recent(self, count: int) -> Tuple[float, ...]:
        """Snapshot of the last ``count`` values, for trend display."""
        if count <= 0:
            return ()
        with self._lock:
            return tuple(self._values[-count:])

    def classify(self, value: float) -> Optional[Band]:
        return self._spec.classify(value)

    def current_band(self) -> Optional[Band]:
        """Classification of the current value, None without data or band."""
        value = self.current_value()
        if value is None:
            return None
        return self.classify(value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __repr__(self) -> str:
        return f"MetricTrack(name={self.name!r}, values={len(self)}, current={self.current_value()})"

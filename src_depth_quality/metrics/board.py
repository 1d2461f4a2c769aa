"""
Collection of the metric tracks of one session.

The board owns one MetricTrack per metric, routes each frame's analyzer
result to the tracks by field, and offers tabular views of the histories for
trend display and end-of-session summaries.
"""

import math
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from utils.logger_config import get_logger
from .definitions import DEFAULT_METRICS, MetricDefinition
from .metric_track import MetricTrack

logger = get_logger(__name__)


class MetricBoard:
    """Metric tracks keyed by metric name, created once per session."""

    def __init__(self, definitions: Sequence[MetricDefinition] = DEFAULT_METRICS):
        self._tracks: Dict[str, MetricTrack] = {}
        self._fields: Dict[str, str] = {}

        for definition in definitions:
            name = definition.spec.name
            if name in self._tracks:
                raise ValueError(f"Duplicate metric name: {name}")
            self._tracks[name] = MetricTrack(definition.spec)
            self._fields[definition.field] = name

        logger.info(f"Metric board created with {len(self._tracks)} metrics: "
                    f"{', '.join(self._tracks)}")

    @classmethod
    def from_overrides(
        cls,
        range_overrides: Optional[Mapping[str, Mapping[str, Sequence[float]]]] = None,
        definitions: Sequence[MetricDefinition] = DEFAULT_METRICS
    ) -> 'MetricBoard':
        """
        Build a board whose band ranges are replaced per metric name.

        Args:
            range_overrides: {metric name: {band: [low, high]}}
            definitions: Base metric catalog

        Raises:
            ValueError: If an override names an unknown metric or band
        """
        range_overrides = range_overrides or {}
        known = {definition.spec.name for definition in definitions}
        unknown = set(range_overrides) - known
        if unknown:
            raise ValueError(f"Range overrides for unknown metrics: {sorted(unknown)}")

        adjusted = []
        for definition in definitions:
            overrides = range_overrides.get(definition.spec.name)
            if overrides:
                definition = definition._replace(spec=definition.spec.with_ranges(overrides))
                logger.info(f"Applied range overrides for '{definition.spec.name}'")
            adjusted.append(definition)
        return cls(adjusted)

    def __getitem__(self, name: str) -> MetricTrack:
        return self._tracks[name]

    def __iter__(self) -> Iterator[MetricTrack]:
        return iter(self._tracks.values())

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def names(self) -> List[str]:
        return list(self._tracks)

    def track_for_field(self, field: str) -> MetricTrack:
        return self._tracks[self._fields[field]]

    def publish(self, values: Mapping[str, float]) -> None:
        """
        Append one frame's values, keyed by analyzer field.

        Every value is checked before any track is touched, so a frame is
        either applied to all tracks or to none.

        Raises:
            KeyError: If a field has no track
            ValueError: If a value is not finite
        """
        missing = [field for field in values if field not in self._fields]
        if missing:
            raise KeyError(f"No metric track for fields: {missing}")
        checked = {field: float(value) for field, value in values.items()}
        bad = [field for field, value in checked.items() if not math.isfinite(value)]
        if bad:
            raise ValueError(f"Non-finite values for fields: {bad}")

        for field, value in checked.items():
            self.track_for_field(field).add_value(value)

    def current_values(self) -> Dict[str, Optional[float]]:
        return {name: track.current_value() for name, track in self._tracks.items()}

    def history_frame(self) -> pd.DataFrame:
        """
        Histories as a DataFrame, one column per metric, indexed by frame.

        Tracks are snapshotted independently; a column that is one frame
        behind the others is padded with NaN.
        """
        columns = {name: pd.Series(track.history(), dtype='float64')
                   for name, track in self._tracks.items()}
        frame = pd.DataFrame(columns)
        frame.index.name = 'frame'
        return frame

    def summary(self) -> pd.DataFrame:
        """Per-metric summary: unit, sample count, current value and band, statistics."""
        rows: List[Dict[str, Any]] = []
        for name, track in self._tracks.items():
            values = pd.Series(track.history(), dtype='float64')
            current = values.iloc[-1] if len(values) else None
            band = track.classify(current) if current is not None else None
            rows.append({
                'metric': name,
                'unit': track.unit,
                'samples': len(values),
                'current': current,
                'band': band.value if band is not None else None,
                'mean': values.mean() if len(values) else None,
                'std': values.std(ddof=0) if len(values) else None,
                'min': values.min() if len(values) else None,
                'max': values.max() if len(values) else None,
            })
        return pd.DataFrame(rows).set_index('metric')

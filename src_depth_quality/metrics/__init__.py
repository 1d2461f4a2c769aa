"""
Metric bookkeeping for the depth quality toolkit.

This package contains the metric spec/track types, the default metric
catalog and the board that holds the tracks of a session.
"""

from .metric_track import Band, BAND_PRIORITY, MetricSpec, MetricTrack
from .definitions import DEFAULT_METRICS, MetricDefinition, default_field_map
from .board import MetricBoard

__all__ = [
    'Band',
    'BAND_PRIORITY',
    'MetricSpec',
    'MetricTrack',
    'DEFAULT_METRICS',
    'MetricDefinition',
    'default_field_map',
    'MetricBoard',
]

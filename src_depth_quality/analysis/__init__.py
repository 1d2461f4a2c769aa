"""
Per-frame geometric analysis of a depth sensor against a flat target.

This package contains the input geometry types and the plane deviation
analyzer that turns a ROI point cloud and its fitted plane into metrics.
"""

from .geometry import Point3, Plane, RegionOfInterest, CalibrationConstants
from .plane_deviation import (
    PlaneDeviationAnalyzer,
    PlaneDeviationMetrics,
    analyze_plane_deviation,
    OUTLIER_CROP_PERCENT,
    MIN_RETAINED_POINTS,
    STD_NORMALIZATION_TOTAL,
    STD_NORMALIZATION_RETAINED,
)

__all__ = [
    'Point3',
    'Plane',
    'RegionOfInterest',
    'CalibrationConstants',
    'PlaneDeviationAnalyzer',
    'PlaneDeviationMetrics',
    'analyze_plane_deviation',
    'OUTLIER_CROP_PERCENT',
    'MIN_RETAINED_POINTS',
    'STD_NORMALIZATION_TOTAL',
    'STD_NORMALIZATION_RETAINED',
]

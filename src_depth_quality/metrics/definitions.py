"""
Default catalog of the depth quality metrics.

Each entry pairs the analyzer field that produces the value with the spec
shown to the operator. Ranges follow the reference depth quality tool.
"""

from typing import Dict, List, NamedTuple

from .metric_track import Band, MetricSpec


class MetricDefinition(NamedTuple):
    field: str
    spec: MetricSpec


AVERAGE_ERROR = "Average Error"
STD_ERROR = "STD (Error)"
SUBPIXEL_RMS = "Subpixel RMS"
FILL_RATE = "Fill-Rate"
DISTANCE = "Distance"
ANGLE = "Angle"


DEFAULT_METRICS: List[MetricDefinition] = [
    MetricDefinition('avg_error_mm', MetricSpec(
        AVERAGE_ERROR, 0, 10, "(mm)",
        "Average Distance from Plane Fit\n"
        "This metric approximates a plane within\n"
        "the ROI and calculates the average\n"
        "distance of points in the ROI\n"
        "from that plane, in mm",
        ranges={Band.GOOD: (0, 1), Band.WARN: (1, 7), Band.BAD: (7, 1000)})),

    MetricDefinition('std_error_mm', MetricSpec(
        STD_ERROR, 0, 10, "(mm)",
        "Standard Deviation from Plane Fit\n"
        "This metric approximates a plane within\n"
        "the ROI and calculates the\n"
        "standard deviation of distances\n"
        "of points in the ROI from that plane",
        ranges={Band.GOOD: (0, 1), Band.WARN: (1, 7), Band.BAD: (7, 1000)})),

    MetricDefinition('subpixel_rms_mm', MetricSpec(
        SUBPIXEL_RMS, 0.0, 1.0, "(mm)",
        "Normalized RMS from the Plane Fit.\n"
        "This metric provides the subpixel accuracy\n"
        "and is calculated as follows:\n"
        "Zi - depth of i-th pixel (mm)\n"
        "Zpi - depth Zi's projection onto plane fit (mm)\n"
        "BL - optical baseline (mm)\n"
        "FL - focal length, as a multiple of pixel width\n"
        "Di = BL*FL/Zi; Dpi = BL*FL/Zpi\n"
        "RMS = SQRT(SUM((Di-Dpi)^2)/n)",
        ranges={Band.GOOD: (0, 0.1), Band.WARN: (0.1, 0.5), Band.BAD: (0.5, 1.0)})),

    MetricDefinition('fill_rate_pct', MetricSpec(
        FILL_RATE, 0, 100, "%",
        "Fill Rate\n"
        "Percentage of pixels with valid depth values\n"
        "out of all pixels within the ROI",
        ranges={Band.GOOD: (90, 100), Band.WARN: (50, 90), Band.BAD: (0, 50)})),

    MetricDefinition('distance_m', MetricSpec(
        DISTANCE, 0, 5, "(m)",
        "Approximate Distance\n"
        "When facing a flat wall at right angle\n"
        "this metric estimates the distance\n"
        "in meters to that wall",
        ranges={Band.GOOD: (0, 2), Band.WARN: (2, 3), Band.BAD: (3, 7)})),

    MetricDefinition('angle_deg', MetricSpec(
        ANGLE, 0, 180, "(deg)",
        "Wall Angle\n"
        "When facing a flat wall this metric\n"
        "estimates the angle to the wall.",
        ranges={Band.GOOD: (-5, 5), Band.WARN: (-10, 10), Band.BAD: (-100, 100)})),
]


def default_field_map() -> Dict[str, str]:
    """Metric name -> analyzer field."""
    return {definition.spec.name: definition.field for definition in DEFAULT_METRICS}

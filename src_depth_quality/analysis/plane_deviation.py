"""
Plane deviation analysis for depth quality evaluation.

For one frame, compares the ROI point cloud against the fitted plane and
derives six quality metrics:
- Average error: mean |distance| to the plane (mm)
- STD error: spread of |distance| around the mean (mm)
- Subpixel RMS: RMS of the disparity difference between each point and its
  projection onto the plane (px-equivalent, reported under "mm" like the
  reference tool)
- Fill rate: share of ROI pixels that produced a point (%)
- Distance: origin to plane distance (m)
- Angle: tilt of the plane normal against the optical axis (deg)

The extreme tails of the per-point distances are cropped before the error
aggregates are computed. Fill rate always uses the full, untrimmed count.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Optional

import numpy as np

from utils.logger_config import get_logger
from utils.stereo_math import PlaneGeometry, StereoMath
from .geometry import CalibrationConstants, Plane, RegionOfInterest
from ..errors import DegenerateInputError

logger = get_logger(__name__)

# Total share of samples treated as outliers, split evenly over both tails
OUTLIER_CROP_PERCENT = 5.0

# Fewest retained samples that still give a meaningful mean and spread
MIN_RETAINED_POINTS = 3

# Denominator for the STD aggregate. "total" divides by the untrimmed point
# count, "retained" by the count left after trimming. Average and RMS always
# use the retained count.
STD_NORMALIZATION_TOTAL = "total"
STD_NORMALIZATION_RETAINED = "retained"
STD_NORMALIZATIONS = (STD_NORMALIZATION_TOTAL, STD_NORMALIZATION_RETAINED)


@dataclass(frozen=True)
class PlaneDeviationMetrics:
    """Scalar metrics of a single frame."""
    avg_error_mm: float
    std_error_mm: float
    subpixel_rms_mm: float
    fill_rate_pct: float
    distance_m: float
    angle_deg: float

    # Bookkeeping, not published as metrics
    point_count: int = 0
    retained_count: int = 0

    def as_dict(self) -> Dict[str, float]:
        values = asdict(self)
        values.pop('point_count')
        values.pop('retained_count')
        return values


class PlaneDeviationAnalyzer:
    """
    Stateless per-frame metrics computation.

    The analyzer only holds its tuning parameters; ``analyze`` has no side
    effects and may be called from any thread.
    """

    def __init__(
        self,
        outlier_crop_percent: float = OUTLIER_CROP_PERCENT,
        min_retained_points: int = MIN_RETAINED_POINTS,
        std_normalization: str = STD_NORMALIZATION_TOTAL
    ):
        """
        Args:
            outlier_crop_percent: Total percentage of samples cropped, half
                from each tail of the sorted distances
            min_retained_points: Minimum samples left after cropping
            std_normalization: One of STD_NORMALIZATIONS
        """
        if not 0 <= outlier_crop_percent < 100:
            raise ValueError(f"outlier_crop_percent must be in [0, 100), got {outlier_crop_percent}")
        if min_retained_points < 1:
            raise ValueError(f"min_retained_points must be at least 1, got {min_retained_points}")
        if std_normalization not in STD_NORMALIZATIONS:
            raise ValueError(f"Unknown std_normalization: {std_normalization}")

        self.outlier_crop_percent = float(outlier_crop_percent)
        self.min_retained_points = int(min_retained_points)
        self.std_normalization = std_normalization

    def outliers_per_tail(self, count: int) -> int:
        """Number of samples dropped from each end of the sorted distances."""
        return int(count * (self.outlier_crop_percent / 2 / 100))

    def analyze(
        self,
        points: Iterable,
        plane: Plane,
        roi: RegionOfInterest,
        calibration: CalibrationConstants
    ) -> PlaneDeviationMetrics:
        """
        Compute the frame metrics.

        Args:
            points: ROI point cloud, (n, 3) array or sequence of (x, y, z) in meters
            plane: Fitted plane with unit normal
            roi: ROI the points were sampled from
            calibration: Validated baseline and focal length

        Returns:
            PlaneDeviationMetrics: The six metrics for this frame

        Raises:
            DegenerateInputError: If the ROI has no area, too few points
                survive trimming, or the result is not finite
        """
        pts = PlaneGeometry.as_points_array(points)
        count = len(pts)

        if roi.area <= 0:
            raise DegenerateInputError(f"ROI has no area: {roi}")

        n_outliers = self.outliers_per_tail(count)
        retained_count = count - 2 * n_outliers
        if retained_count < self.min_retained_points:
            raise DegenerateInputError(
                f"Only {retained_count} of {count} points left after outlier crop, "
                f"need at least {self.min_retained_points}")

        normal, _ = PlaneGeometry.unit_normal(plane.a, plane.b, plane.c)
        distances = PlaneGeometry.signed_distances(pts, normal, plane.d)
        projected = PlaneGeometry.project_to_plane(pts, normal, distances)

        baseline, focal = calibration.baseline_mm, calibration.focal_length_px
        # Zero-range points surface as non-finite metrics below
        with np.errstate(divide='ignore', invalid='ignore'):
            disparity_errors = (
                StereoMath.depth_to_disparity(np.linalg.norm(pts, axis=1), baseline, focal)
                - StereoMath.depth_to_disparity(np.linalg.norm(projected, axis=1), baseline, focal))
        abs_distances_mm = np.abs(distances) * 1000.0

        # Sort by distance, ties broken by disparity error
        order = np.lexsort((disparity_errors, abs_distances_mm))
        retained = order[n_outliers:count - n_outliers]
        kept_mm = abs_distances_mm[retained]
        kept_disparity = disparity_errors[retained]

        avg_error = kept_mm.sum() / retained_count

        std_denominator = count if self.std_normalization == STD_NORMALIZATION_TOTAL else retained_count
        std_error = np.sqrt(np.sum((kept_mm - avg_error) ** 2) / std_denominator)

        subpixel_rms = np.sqrt(np.sum(kept_disparity ** 2) / retained_count)

        fill_rate = count / float(roi.area) * 100.0

        metrics = PlaneDeviationMetrics(
            avg_error_mm=float(avg_error),
            std_error_mm=float(std_error),
            subpixel_rms_mm=float(subpixel_rms),
            fill_rate_pct=float(fill_rate),
            distance_m=float(-plane.d),
            angle_deg=PlaneGeometry.normal_tilt_degrees(plane.c),
            point_count=count,
            retained_count=retained_count
        )

        values = metrics.as_dict()
        non_finite = [name for name, value in values.items() if not np.isfinite(value)]
        if non_finite:
            raise DegenerateInputError(f"Non-finite metrics: {', '.join(non_finite)}")

        logger.debug(f"Analyzed {count} points ({retained_count} retained): "
                     f"avg={metrics.avg_error_mm:.3f}mm, std={metrics.std_error_mm:.3f}mm, "
                     f"rms={metrics.subpixel_rms_mm:.4f}, fill={metrics.fill_rate_pct:.1f}%")

        return metrics


def analyze_plane_deviation(
    points: Iterable,
    plane: Plane,
    roi: RegionOfInterest,
    baseline_mm: float,
    focal_length_px: float,
    analyzer: Optional[PlaneDeviationAnalyzer] = None
) -> PlaneDeviationMetrics:
    """
    Compute the frame metrics with plain calibration values.

    Raises:
        InvalidCalibrationError: If baseline or focal length is invalid
        DegenerateInputError: See PlaneDeviationAnalyzer.analyze
    """
    calibration = CalibrationConstants(baseline_mm, focal_length_px)
    analyzer = analyzer or PlaneDeviationAnalyzer()
    return analyzer.analyze(points, plane, roi, calibration)

"""
Geometric input types for the plane deviation analysis.

Input formats:
- Point3: (x, y, z) in meters, as deprojected by the depth sensor
- Plane: (a, b, c, d) of a*x + b*y + c*z + d = 0 with unit (a, b, c)
- RegionOfInterest: pixel rectangle (min_x, min_y, max_x, max_y)
- CalibrationConstants: baseline in millimeters, focal length in pixels
"""

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Sequence

import numpy as np

from utils.stereo_math import StereoMath
from ..errors import InvalidCalibrationError


class Point3(NamedTuple):
    """A 3D coordinate in meters."""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Plane:
    """
    Implicit plane a*x + b*y + c*z + d = 0.

    (a, b, c) is the unit normal, so ``d`` is the negated signed distance from
    the sensor origin to the plane.
    """
    a: float
    b: float
    c: float
    d: float

    @property
    def normal(self) -> np.ndarray:
        return np.array([self.a, self.b, self.c], dtype=np.float64)

    @classmethod
    def from_normal(cls, normal: Sequence[float], distance_m: float) -> 'Plane':
        """
        Build a plane from a (not necessarily unit) normal and the distance of
        the origin to the plane along that normal.
        """
        n = np.asarray(normal, dtype=np.float64)
        length = np.linalg.norm(n)
        if length == 0:
            raise ValueError("Plane normal must be non-zero")
        n = n / length
        return cls(float(n[0]), float(n[1]), float(n[2]), -float(distance_m))


@dataclass(frozen=True)
class RegionOfInterest:
    """Axis-aligned pixel rectangle the point cloud was sampled from."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def area(self) -> int:
        """Pixel area; the fill rate denominator."""
        return self.width * self.height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegionOfInterest':
        return cls(int(data['min_x']), int(data['min_y']),
                   int(data['max_x']), int(data['max_y']))

    @classmethod
    def centered(cls, frame_width: int, frame_height: int, fraction: float) -> 'RegionOfInterest':
        """ROI of the given linear fraction of the frame, centered in it."""
        roi_w = int(frame_width * fraction)
        roi_h = int(frame_height * fraction)
        min_x = (frame_width - roi_w) // 2
        min_y = (frame_height - roi_h) // 2
        return cls(min_x, min_y, min_x + roi_w, min_y + roi_h)


@dataclass(frozen=True)
class CalibrationConstants:
    """
    Sensor calibration needed for the disparity-domain metric.

    Validated once on construction; the analyzer assumes valid values.

    Raises:
        InvalidCalibrationError: If baseline or focal length is not a finite
            positive number
    """
    baseline_mm: float
    focal_length_px: float

    def __post_init__(self):
        try:
            baseline = StereoMath.validate_positive_scalar(self.baseline_mm, "baseline_mm")
            focal = StereoMath.validate_positive_scalar(self.focal_length_px, "focal_length_px")
        except ValueError as e:
            raise InvalidCalibrationError(str(e)) from e
        object.__setattr__(self, 'baseline_mm', baseline)
        object.__setattr__(self, 'focal_length_px', focal)

    @property
    def bf_factor(self) -> float:
        """Disparity scale for ranges in meters: disparity = bf_factor / range."""
        return StereoMath.baseline_focal_factor(self.baseline_mm, self.focal_length_px)

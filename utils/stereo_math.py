"""
Stereo vision mathematical utilities.

This module provides the depth/disparity conversions and the point-to-plane
geometry used when evaluating a depth sensor against a flat target.

Conventions:
- Points are in meters, shape (n, 3)
- Baseline is in millimeters, focal length in pixels
- Disparity is in pixels
"""

import numpy as np
from typing import Tuple, Union

from utils.logger_config import get_logger

logger = get_logger(__name__)

# Point clouds are reported in meters, the baseline in millimeters
METERS_TO_MM = 1000.0


class StereoMath:
    """Mathematical utilities for stereo depth evaluation."""

    @staticmethod
    def validate_positive_scalar(value: float, name: str) -> float:
        """
        Validate that a calibration scalar is finite and strictly positive.

        Args:
            value: Value to validate
            name: Name for error messages

        Returns:
            float: The value as a float

        Raises:
            ValueError: If the value is not a finite positive number
        """
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be a number, got {value!r}")

        if not np.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")
        return value

    @staticmethod
    def baseline_focal_factor(baseline_mm: float, focal_length_px: float) -> float:
        """
        Calculate the disparity scale factor for ranges given in meters.

        ``disparity_px = factor / range_m``, i.e. ``B*f / (range_m * 1000)``.
        """
        return baseline_mm * focal_length_px / METERS_TO_MM

    @staticmethod
    def depth_to_disparity(
        ranges_m: Union[np.ndarray, float],
        baseline_mm: float,
        focal_length_px: float
    ) -> Union[np.ndarray, float]:
        """
        Convert ranges in meters to disparity in pixels.

        Args:
            ranges_m: Range(s) in meters
            baseline_mm: Stereo baseline in millimeters
            focal_length_px: Focal length in pixels

        Returns:
            Disparity value(s) in pixels
        """
        factor = StereoMath.baseline_focal_factor(baseline_mm, focal_length_px)
        return factor / np.asarray(ranges_m, dtype=np.float64)


class PlaneGeometry:
    """Closed-form point/plane geometry for planes with a unit normal."""

    @staticmethod
    def as_points_array(points) -> np.ndarray:
        """
        Convert a point sequence to a float64 array of shape (n, 3).

        Raises:
            ValueError: If the input cannot be viewed as (n, 3)
        """
        array = np.asarray(points, dtype=np.float64)
        if array.size == 0:
            return array.reshape(0, 3)
        if array.ndim != 2 or array.shape[1] != 3:
            raise ValueError(f"Points must have shape (n, 3), got {array.shape}")
        return array

    @staticmethod
    def signed_distances(points: np.ndarray, normal: np.ndarray, offset: float) -> np.ndarray:
        """Signed distance of each point to the plane ``normal . p + offset = 0``."""
        return points @ normal + offset

    @staticmethod
    def project_to_plane(
        points: np.ndarray,
        normal: np.ndarray,
        distances: np.ndarray
    ) -> np.ndarray:
        """Orthogonal projection of each point onto the plane."""
        return points - distances[:, np.newaxis] * normal

    @staticmethod
    def normal_tilt_degrees(normal_z: float) -> float:
        """Angle between the plane normal and the optical (z) axis, in degrees."""
        cosine = min(abs(float(normal_z)), 1.0)
        return float(np.degrees(np.arccos(cosine)))

    @staticmethod
    def unit_normal(a: float, b: float, c: float) -> Tuple[np.ndarray, float]:
        """
        Return the normal vector and its length.

        Planes coming from the fitting stage are expected to be unit length;
        a noticeable deviation is logged.
        """
        normal = np.array([a, b, c], dtype=np.float64)
        norm = float(np.linalg.norm(normal))
        if not np.isclose(norm, 1.0, atol=1e-3):
            logger.warning(f"Plane normal is not unit length: |n|={norm:.6f}")
        return normal, norm

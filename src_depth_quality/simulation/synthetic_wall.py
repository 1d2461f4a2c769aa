"""
Synthetic flat-wall frames for exercising the pipeline without a sensor.

Each frame deprojects the ROI pixels of a pinhole camera onto a plane at the
configured distance and tilt, perturbs the range of every point with Gaussian
noise along its viewing ray, and drops pixels at random to model holes in the
depth map.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from utils.logger_config import get_logger
from ..analysis.geometry import Plane, RegionOfInterest

logger = get_logger(__name__)


@dataclass(frozen=True)
class WallFrame:
    """One synthetic frame: ROI point cloud plus the plane it was drawn from."""
    points: np.ndarray
    plane: Plane
    roi: RegionOfInterest


class SyntheticWallSource:
    """Generates noisy point clouds of a flat wall seen through a pinhole camera."""

    def __init__(
        self,
        roi: RegionOfInterest,
        focal_length_px: float,
        principal_point: Tuple[float, float],
        distance_m: float = 1.0,
        tilt_deg: float = 0.0,
        noise_mm: float = 1.0,
        fill_ratio: float = 1.0,
        seed: Optional[int] = None
    ):
        """
        Args:
            roi: Pixel rectangle to sample
            focal_length_px: Focal length in pixels
            principal_point: (cx, cy) in pixels
            distance_m: Distance from the camera origin to the wall
            tilt_deg: Rotation of the wall normal about the camera y axis
            noise_mm: Standard deviation of the range noise
            fill_ratio: Probability that a pixel yields a point, in [0, 1]
            seed: Random seed for reproducible sequences
        """
        if distance_m <= 0:
            raise ValueError(f"distance_m must be positive, got {distance_m}")
        if not 0 <= fill_ratio <= 1:
            raise ValueError(f"fill_ratio must be in [0, 1], got {fill_ratio}")
        if abs(tilt_deg) >= 90:
            raise ValueError(f"tilt_deg must be within (-90, 90), got {tilt_deg}")
        if noise_mm < 0:
            raise ValueError(f"noise_mm must be non-negative, got {noise_mm}")

        self.roi = roi
        self.focal_length_px = float(focal_length_px)
        self.principal_point = principal_point
        self.noise_mm = float(noise_mm)
        self.fill_ratio = float(fill_ratio)
        self._rng = np.random.default_rng(seed)

        tilt = np.radians(tilt_deg)
        self.plane = Plane.from_normal((np.sin(tilt), 0.0, np.cos(tilt)), distance_m)
        self._rays = self._roi_rays()

        logger.info(f"Synthetic wall: distance={distance_m:.3f}m, tilt={tilt_deg:.1f}deg, "
                    f"noise={noise_mm:.2f}mm, fill={fill_ratio:.2f}, roi={roi.width}x{roi.height}")

    def _roi_rays(self) -> np.ndarray:
        """Unnormalized viewing rays (z = 1) of every ROI pixel center, shape (n, 3)."""
        cx, cy = self.principal_point
        us, vs = np.meshgrid(np.arange(self.roi.min_x, self.roi.max_x) + 0.5,
                             np.arange(self.roi.min_y, self.roi.max_y) + 0.5)
        x = (us.ravel() - cx) / self.focal_length_px
        y = (vs.ravel() - cy) / self.focal_length_px
        return np.column_stack((x, y, np.ones_like(x)))

    def next_frame(self) -> WallFrame:
        rays = self._rays
        if self.fill_ratio < 1.0:
            rays = rays[self._rng.random(len(rays)) < self.fill_ratio]

        normal = self.plane.normal
        # Ray parameter where each ray meets the plane
        t = -self.plane.d / (rays @ normal)
        points = rays * t[:, np.newaxis]

        if self.noise_mm > 0 and len(points):
            ranges = np.linalg.norm(points, axis=1)
            noisy = ranges + self._rng.normal(0.0, self.noise_mm / 1000.0, len(points))
            points = points * (noisy / ranges)[:, np.newaxis]

        return WallFrame(points=points, plane=self.plane, roi=self.roi)

    def frames(self, count: int) -> Iterator[WallFrame]:
        for _ in range(count):
            yield self.next_frame()

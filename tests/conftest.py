import numpy as np
import pytest

from src_depth_quality.analysis.geometry import CalibrationConstants, Plane, RegionOfInterest


@pytest.fixture
def calibration():
    # 50 mm baseline, 640 px focal length -> bf factor of 32 for ranges in meters
    return CalibrationConstants(baseline_mm=50.0, focal_length_px=640.0)


@pytest.fixture
def wall_plane():
    """Plane z = 5."""
    return Plane(0.0, 0.0, 1.0, -5.0)


@pytest.fixture
def roi():
    return RegionOfInterest(0, 0, 20, 10)


@pytest.fixture
def points_on_wall():
    xs, ys = np.meshgrid(np.linspace(-0.5, 0.5, 8), np.linspace(-0.4, 0.4, 5))
    return np.column_stack((xs.ravel(), ys.ravel(), np.full(xs.size, 5.0)))


@pytest.fixture
def config_data():
    return {
        "case_name": "unit",
        "baseline_mm": 50.0,
        "focal_length_px": 640.0,
        "simulation": {"frames": 3, "seed": 1}
    }

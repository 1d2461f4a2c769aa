import logging
from types import SimpleNamespace

import numpy as np
import pytest

from utils.logger_config import LoggerConfig, get_logger
from utils.stereo_math import PlaneGeometry, StereoMath


@pytest.fixture
def restore_logging():
    yield
    LoggerConfig.setup_root_logger(force=True)


def test_depth_to_disparity():
    disparity = StereoMath.depth_to_disparity(np.array([1.0, 2.0]), 50.0, 640.0)

    assert disparity == pytest.approx([32.0, 16.0])


@pytest.mark.parametrize("value", [0, -1.0, float('inf'), None, "abc"])
def test_validate_positive_scalar_rejects(value):
    with pytest.raises(ValueError):
        StereoMath.validate_positive_scalar(value, "baseline_mm")


def test_projection_lands_on_plane():
    normal = np.array([0.0, 0.6, 0.8])
    points = np.array([[0.1, 0.2, 3.0], [-0.4, 0.0, 2.5]])

    distances = PlaneGeometry.signed_distances(points, normal, -2.0)
    projected = PlaneGeometry.project_to_plane(points, normal, distances)

    assert PlaneGeometry.signed_distances(projected, normal, -2.0) == pytest.approx([0.0, 0.0], abs=1e-12)


def test_as_points_array_of_empty_input():
    assert PlaneGeometry.as_points_array([]).shape == (0, 3)


def test_normal_tilt_clamps_rounding():
    assert PlaneGeometry.normal_tilt_degrees(1.0000000002) == 0.0


def test_non_unit_normal_is_logged(caplog):
    # Handlers live on the project root, so capture from there
    root = logging.getLogger('depth_quality_toolkit')
    root.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.WARNING, logger='depth_quality_toolkit'):
            _, norm = PlaneGeometry.unit_normal(0.0, 0.0, 2.0)
    finally:
        root.removeHandler(caplog.handler)

    assert norm == pytest.approx(2.0)
    assert "not unit length" in caplog.text


def test_configure_from_config_writes_log_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "session.log"
    LoggerConfig.configure_from(SimpleNamespace(log_level="debug", log_file=str(log_file)))

    get_logger("tests").debug("frame analyzed")

    info = LoggerConfig.get_configuration_info()
    assert info['configured']
    assert info['level'] == 'DEBUG'
    assert 'FileHandler' in info['handlers']
    for handler in logging.getLogger('depth_quality_toolkit').handlers:
        handler.flush()
    assert "frame analyzed" in log_file.read_text()


def test_set_level(restore_logging):
    LoggerConfig.set_level("warning")

    assert logging.getLogger('depth_quality_toolkit').level == logging.WARNING


def test_unknown_level(restore_logging):
    with pytest.raises(ValueError):
        LoggerConfig.set_level("chatty")

import json

import pytest

from config.config import Config
from src_depth_quality.analysis import RegionOfInterest
from src_depth_quality.errors import InvalidCalibrationError


def test_defaults_are_filled(config_data):
    config = Config(config_data=config_data)

    assert config.outlier_crop_percent == 5.0
    assert config.min_retained_points == 3
    assert config.std_normalization == "total"
    assert config.metric_ranges == {}
    assert config.get_simulation_config()["frames"] == 3
    assert config.get_simulation_config()["frame_width"] == 640


def test_calibration_is_validated_once(config_data):
    calibration = Config(config_data=config_data).get_calibration()

    assert calibration.baseline_mm == 50.0
    assert calibration.focal_length_px == 640.0


@pytest.mark.parametrize("changes", [
    {"baseline_mm": 0},
    {"baseline_mm": -10.0},
    {"focal_length_px": 0.0},
    {"focal_length_px": "wide"},
])
def test_invalid_calibration_rejected_at_setup(config_data, changes):
    config_data.update(changes)

    with pytest.raises(InvalidCalibrationError):
        Config(config_data=config_data)


def test_missing_calibration_key(config_data):
    del config_data["focal_length_px"]

    with pytest.raises(InvalidCalibrationError):
        Config(config_data=config_data)


def test_invalid_calibration_is_a_value_error(config_data):
    config_data["baseline_mm"] = 0

    with pytest.raises(ValueError):
        Config(config_data=config_data)


@pytest.mark.parametrize("changes", [
    {"outlier_crop_percent": 60},
    {"min_retained_points": 0},
    {"std_normalization": "sample"},
    {"metric_ranges": {"Fill-Rate": {"purple": [0, 1]}}},
    {"metric_ranges": {"Fill-Rate": {"good": [0]}}},
    {"roi": {"min_x": 10, "min_y": 10, "max_x": 10, "max_y": 20}},
    {"roi": {"min_x": 0, "min_y": 0, "max_x": 1000, "max_y": 20}},
])
def test_invalid_analysis_settings(config_data, changes):
    config_data.update(changes)

    with pytest.raises(ValueError):
        Config(config_data=config_data)


def test_default_roi_is_centered(config_data):
    assert Config(config_data=config_data).get_roi() == RegionOfInterest(192, 144, 448, 336)


def test_configured_roi(config_data):
    config_data["roi"] = {"min_x": 10, "min_y": 20, "max_x": 110, "max_y": 70}

    assert Config(config_data=config_data).get_roi().area == 5000


def test_case_name_formatting(config_data):
    config_data["log_file"] = "result/{case_name}/session.log"

    assert Config(config_data=config_data).log_file == "result/unit/session.log"


def test_load_from_file(tmp_path, config_data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_data))

    config = Config(str(path))

    assert config.case_name == "unit"
    assert config.get_calibration().bf_factor == pytest.approx(32.0)


def test_unknown_attribute(config_data):
    with pytest.raises(AttributeError):
        Config(config_data=config_data).no_such_key


def test_requires_a_source():
    with pytest.raises(ValueError):
        Config()

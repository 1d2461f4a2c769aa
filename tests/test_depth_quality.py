import json

import numpy as np
import pytest

import main
from config.config import Config
from src_depth_quality.analysis import RegionOfInterest
from src_depth_quality.depth_quality import DepthQualityTool
from src_depth_quality.metrics import Band
from src_depth_quality.simulation import SyntheticWallSource


@pytest.fixture
def tool(config_data):
    return DepthQualityTool(Config(config_data=config_data))


def make_source(**kwargs):
    params = dict(roi=RegionOfInterest(300, 220, 340, 260), focal_length_px=640.0,
                  principal_point=(320.0, 240.0), seed=11)
    params.update(kwargs)
    return SyntheticWallSource(**params)


def test_on_frame_publishes_every_metric(tool):
    frame = make_source(distance_m=1.5, tilt_deg=4.0, noise_mm=1.0).next_frame()

    metrics = tool.on_frame(frame.points, frame.plane, frame.roi)

    assert metrics is not None
    assert all(len(track) == 1 for track in tool.board)
    assert tool.board["Distance"].current_value() == pytest.approx(1.5)
    assert tool.board["Angle"].current_value() == pytest.approx(4.0)
    assert tool.board["Average Error"].current_value() == pytest.approx(metrics.avg_error_mm)
    assert tool.frames_processed == 1


def test_noise_free_full_wall(tool):
    frame = make_source(noise_mm=0.0, fill_ratio=1.0).next_frame()

    metrics = tool.on_frame(frame.points, frame.plane, frame.roi)

    assert metrics.avg_error_mm == pytest.approx(0.0, abs=1e-6)
    assert metrics.subpixel_rms_mm == pytest.approx(0.0, abs=1e-6)
    assert metrics.fill_rate_pct == pytest.approx(100.0)


def test_noisy_wall_error_tracks_noise_level(tool):
    frame = make_source(noise_mm=2.0).next_frame()

    metrics = tool.on_frame(frame.points, frame.plane, frame.roi)

    # Mean of |N(0, 2mm)| is about 1.6mm; the crop trims it slightly
    assert 1.0 < metrics.avg_error_mm < 2.0
    assert metrics.subpixel_rms_mm > 0


def test_degenerate_frame_is_skipped(tool):
    frame = make_source().next_frame()
    tool.on_frame(frame.points, frame.plane, frame.roi)

    skipped = tool.on_frame(np.empty((0, 3)), frame.plane, frame.roi)

    assert skipped is None
    assert tool.frames_skipped == 1
    assert tool.frames_processed == 1
    assert all(len(track) == 1 for track in tool.board)


def test_run_counts_published_frames(tool):
    published = tool.run(make_source(fill_ratio=0.8).frames(5))

    assert published == 5
    assert tool.board.history_frame().shape == (5, 6)
    fill = tool.board["Fill-Rate"].history()
    assert all(60.0 < value < 95.0 for value in fill)


def test_range_overrides_reach_the_board(config_data):
    config_data["metric_ranges"] = {"Distance": {"good": [0.5, 1.5]}}

    tool = DepthQualityTool(Config(config_data=config_data))

    assert tool.board["Distance"].ranges[Band.GOOD] == (0.5, 1.5)
    assert tool.board["Distance"].ranges[Band.WARN] == (2.0, 3.0)


def test_processing_info(tool):
    info = tool.get_processing_info()

    assert info['baseline_mm'] == 50.0
    assert info['std_normalization'] == "total"
    assert info['frames_processed'] == 0
    assert set(info['current_values']) == set(tool.board.names)


def test_synthetic_source_validation():
    with pytest.raises(ValueError):
        make_source(distance_m=0)
    with pytest.raises(ValueError):
        make_source(fill_ratio=1.5)
    with pytest.raises(ValueError):
        make_source(tilt_deg=90)


def test_main_runs_synthetic_session(tmp_path, config_data):
    config_data["log_file"] = None
    config_data["simulation"] = {"frames": 4, "seed": 5, "noise_mm": 0.5}
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_data))

    assert main.main(str(path)) == 0


def test_main_reports_invalid_calibration(tmp_path, config_data):
    config_data["baseline_mm"] = -1
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_data))

    assert main.main(str(path)) == 1

import json
from typing import Dict, Any, Optional

from src_depth_quality.analysis.geometry import CalibrationConstants, RegionOfInterest
from src_depth_quality.analysis.plane_deviation import (
    OUTLIER_CROP_PERCENT, MIN_RETAINED_POINTS, STD_NORMALIZATION_TOTAL, STD_NORMALIZATIONS)
from src_depth_quality.errors import InvalidCalibrationError
from src_depth_quality.metrics.metric_track import Band
from utils.logger_config import get_logger

logger = get_logger(__name__)


class Config:
    def __init__(self, config_path: Optional[str] = None, config_data: Optional[Dict[str, Any]] = None):
        if config_path is None and config_data is None:
            raise ValueError("Either config_path or config_data must be given")
        if config_path is not None:
            self.config_data = self._load_config(config_path)
        else:
            self.config_data = dict(config_data)
            self._process_string_formatting(self.config_data)

        self._init_analysis_defaults()
        self._init_simulation_defaults()
        self._validate_calibration()
        self._validate_analysis_config()
        self._validate_roi_config()
        self._validate_metric_ranges()

    def _load_config(self, config_path: str) -> Dict[str, Any]:
        with open(config_path, 'r') as config_file:
            config_data = json.load(config_file)

        # Process string formatting for paths that contain {case_name}
        self._process_string_formatting(config_data)
        return config_data

    def _process_string_formatting(self, config_data: Dict[str, Any]) -> None:
        """Process string formatting in config values, replacing {case_name} with actual value."""
        case_name = config_data.get("case_name", "")

        for key, value in config_data.items():
            if isinstance(value, str) and "{case_name}" in value:
                try:
                    config_data[key] = value.format(case_name=case_name)
                except (KeyError, ValueError) as e:
                    # Keep original value if formatting fails
                    logger.warning(f"Could not format value for key '{key}': {e}")

    def _init_analysis_defaults(self) -> None:
        """Fill analysis and logging parameters missing from the file."""
        defaults = {
            "outlier_crop_percent": OUTLIER_CROP_PERCENT,  # total, split over both tails
            "min_retained_points": MIN_RETAINED_POINTS,
            "std_normalization": STD_NORMALIZATION_TOTAL,
            "log_level": "INFO",
            "log_file": None,
            "roi": None,
            "metric_ranges": {}
        }
        for k, v in defaults.items():
            self.config_data.setdefault(k, v)

    def _init_simulation_defaults(self) -> None:
        """Defaults for the synthetic wall source used by main.py."""
        defaults = {
            "frames": 30,
            "frame_width": 640,
            "frame_height": 480,
            "roi_fraction": 0.4,
            "distance_m": 1.0,
            "tilt_deg": 0.0,
            "noise_mm": 1.0,
            "fill_ratio": 0.95,
            "seed": None
        }
        simulation = self.config_data.setdefault("simulation", {})
        for k, v in defaults.items():
            simulation.setdefault(k, v)

    def _validate_calibration(self) -> None:
        """
        Validate the sensor calibration once for the whole session.

        Raises:
            InvalidCalibrationError: If baseline or focal length is missing or invalid
        """
        missing = [key for key in ("baseline_mm", "focal_length_px") if key not in self.config_data]
        if missing:
            raise InvalidCalibrationError(f"Missing calibration keys: {', '.join(missing)}")

        self._calibration = CalibrationConstants(
            self.config_data["baseline_mm"], self.config_data["focal_length_px"])
        logger.info(f"Calibration: baseline={self._calibration.baseline_mm}mm, "
                    f"focal_length={self._calibration.focal_length_px}px")

    def _validate_analysis_config(self) -> None:
        crop = self.config_data.get("outlier_crop_percent")
        if not isinstance(crop, (int, float)) or not 0 <= crop < 50:
            raise ValueError("outlier_crop_percent must be a number in [0, 50)")

        min_points = self.config_data.get("min_retained_points")
        if not isinstance(min_points, int) or min_points < 1:
            raise ValueError("min_retained_points must be a positive integer")

        if self.config_data.get("std_normalization") not in STD_NORMALIZATIONS:
            raise ValueError(f"std_normalization must be one of {STD_NORMALIZATIONS}")

        if crop > 10:
            logger.warning(f"Large outlier crop ({crop}%) discards many samples per frame")

    def _validate_roi_config(self) -> None:
        roi = self.config_data.get("roi")
        if roi is None:
            return
        try:
            region = RegionOfInterest.from_dict(roi)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid roi section: {e}")
        if region.width <= 0 or region.height <= 0:
            raise ValueError(f"ROI must have positive width and height: {region}")

        simulation = self.config_data["simulation"]
        if region.max_x > simulation["frame_width"] or region.max_y > simulation["frame_height"]:
            raise ValueError(f"ROI {region} exceeds the frame size "
                             f"{simulation['frame_width']}x{simulation['frame_height']}")

    def _validate_metric_ranges(self) -> None:
        """Check the shape of per-metric band overrides: {metric: {band: [low, high]}}."""
        ranges = self.config_data.get("metric_ranges")
        if not isinstance(ranges, dict):
            raise ValueError("metric_ranges must be an object")
        for metric, bands in ranges.items():
            if not isinstance(bands, dict):
                raise ValueError(f"metric_ranges['{metric}'] must be an object")
            for band, interval in bands.items():
                Band.parse(band)
                if not isinstance(interval, (list, tuple)) or len(interval) != 2:
                    raise ValueError(f"metric_ranges['{metric}']['{band}'] must be [low, high]")

    def get_calibration(self) -> CalibrationConstants:
        """Return the validated calibration constants."""
        return self._calibration

    def get_roi(self) -> RegionOfInterest:
        """Configured ROI, or a centered one derived from the simulation frame size."""
        if self.config_data.get("roi") is not None:
            return RegionOfInterest.from_dict(self.config_data["roi"])
        simulation = self.config_data["simulation"]
        return RegionOfInterest.centered(
            simulation["frame_width"], simulation["frame_height"], simulation["roi_fraction"])

    def get_simulation_config(self) -> Dict[str, Any]:
        """Return a copy of the synthetic source parameters."""
        return dict(self.config_data["simulation"])

    def get_analysis_config_summary(self) -> str:
        return (f"outlier crop {self.config_data['outlier_crop_percent']}%, "
                f"min retained points {self.config_data['min_retained_points']}, "
                f"std normalization '{self.config_data['std_normalization']}'")

    def __getattr__(self, name: str) -> Any:
        if name in ("config_data", "_calibration"):
            raise AttributeError(name)
        if name in self.config_data:
            return self.config_data[name]
        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

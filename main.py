import sys

from config.config import Config
from src_depth_quality.depth_quality import DepthQualityTool
from src_depth_quality.errors import InvalidCalibrationError
from src_depth_quality.simulation import SyntheticWallSource
from utils.logger_config import LoggerConfig, get_logger


def load_config(config_path: str) -> Config:
    """
    Load configuration from a JSON file.

    Args:
        config_path (str): Path to the configuration JSON file.

    Returns:
        Config: Loaded configuration object.
    """
    return Config(config_path)


def run_synthetic_session(config: Config) -> DepthQualityTool:
    """
    Evaluate synthetic wall frames with the configured calibration.

    Args:
        config (Config): Configuration object containing session parameters.
    """
    simulation = config.get_simulation_config()
    calibration = config.get_calibration()
    source = SyntheticWallSource(
        roi=config.get_roi(),
        focal_length_px=calibration.focal_length_px,
        principal_point=(simulation["frame_width"] / 2, simulation["frame_height"] / 2),
        distance_m=simulation["distance_m"],
        tilt_deg=simulation["tilt_deg"],
        noise_mm=simulation["noise_mm"],
        fill_ratio=simulation["fill_ratio"],
        seed=simulation["seed"])

    tool = DepthQualityTool(config)
    tool.run(source.frames(simulation["frames"]))
    return tool


def main(config_file: str = "config/config_depth_quality.json") -> int:
    """
    Main function to execute a depth quality session on synthetic frames.
    """
    try:
        config = load_config(config_file)
    except InvalidCalibrationError as e:
        get_logger(__name__).error(f"Invalid calibration in {config_file}: {e}")
        return 1

    LoggerConfig.configure_from(config)
    logger = get_logger(__name__)

    tool = run_synthetic_session(config)
    logger.info("Session summary:\n" + tool.board.summary().to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))

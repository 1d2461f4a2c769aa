"""
Depth quality session.

Wires the plane deviation analyzer to the metric board. The frame-processing
stage calls ``on_frame`` once per frame with the ROI point cloud and the
plane fitted to it; the resulting metrics are appended to the board's tracks,
which the rendering side reads.

Preconditions: ``on_frame`` is only called with a plane when the upstream
plane fit succeeded, and by a single producer at a time.
"""

from typing import Any, Dict, Iterable, Optional

from utils.logger_config import get_logger
from .analysis.geometry import Plane, RegionOfInterest
from .analysis.plane_deviation import PlaneDeviationAnalyzer, PlaneDeviationMetrics
from .errors import DegenerateInputError
from .metrics.board import MetricBoard


class DepthQualityTool:
    def __init__(self, config, board: Optional[MetricBoard] = None):
        # Calibration was validated when the config was loaded
        self.config = config
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self.calibration = config.get_calibration()
        self.analyzer = PlaneDeviationAnalyzer(
            outlier_crop_percent=config.outlier_crop_percent,
            min_retained_points=config.min_retained_points,
            std_normalization=config.std_normalization)
        self.board = board if board is not None else MetricBoard.from_overrides(config.metric_ranges)

        self.frames_processed = 0
        self.frames_skipped = 0

        self.logger.info(f"{self.__class__.__name__} initialized: {config.get_analysis_config_summary()}")

    def on_frame(self, points, plane: Plane, roi: RegionOfInterest) -> Optional[PlaneDeviationMetrics]:
        """
        Analyze one frame and publish its metrics.

        Degenerate frames are skipped: they are logged, counted, and leave
        every track unchanged.

        Args:
            points: ROI point cloud in meters, shape (n, 3)
            plane: Plane fitted to the points
            roi: ROI the points were sampled from

        Returns:
            The published metrics, or None if the frame was skipped
        """
        try:
            metrics = self.analyzer.analyze(points, plane, roi, self.calibration)
        except DegenerateInputError as e:
            self.frames_skipped += 1
            self.logger.warning(f"Skipping frame {self.frames_processed + self.frames_skipped}: {e}")
            return None

        self.board.publish(metrics.as_dict())
        self.frames_processed += 1
        return metrics

    def run(self, frames: Iterable) -> int:
        """
        Feed frames (objects with ``points``, ``plane`` and ``roi``) through
        ``on_frame``.

        Returns:
            int: Number of frames whose metrics were published
        """
        published = 0
        for frame in frames:
            if self.on_frame(frame.points, frame.plane, frame.roi) is not None:
                published += 1
        self.logger.info(f"Processed {published} frames "
                         f"({self.frames_skipped} skipped in this session)")
        return published

    def get_processing_info(self) -> Dict[str, Any]:
        return {
            'baseline_mm': self.calibration.baseline_mm,
            'focal_length_px': self.calibration.focal_length_px,
            'outlier_crop_percent': self.analyzer.outlier_crop_percent,
            'min_retained_points': self.analyzer.min_retained_points,
            'std_normalization': self.analyzer.std_normalization,
            'frames_processed': self.frames_processed,
            'frames_skipped': self.frames_skipped,
            'current_values': self.board.current_values()
        }

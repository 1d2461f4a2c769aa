"""
Exception types raised by the depth quality modules.

All errors derive from ValueError so callers validating configuration can
keep catching ValueError as they do for the rest of the toolkit.
"""


class DepthQualityError(ValueError):
    """Base class for depth quality errors."""


class InvalidCalibrationError(DepthQualityError):
    """Baseline or focal length is missing, non-finite or non-positive.

    Raised at session setup, never per frame.
    """


class DegenerateInputError(DepthQualityError):
    """A frame cannot produce meaningful metrics.

    Raised for too few points after outlier trimming, an ROI with no area,
    or non-finite results. The frame callback catches it and skips the frame.
    """

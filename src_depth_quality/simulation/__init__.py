"""
Synthetic frame sources used to run the toolkit without hardware.
"""

from .synthetic_wall import SyntheticWallSource, WallFrame

__all__ = ['SyntheticWallSource', 'WallFrame']

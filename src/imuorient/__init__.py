"""Orientation estimation for IMUs based on Madgwick's gradient descent filter."""

from pathlib import Path

SRC_ROOT = Path(__file__).parent
PROJECT_ROOT = SRC_ROOT.parent.parent

__version__ = "0.1.0"

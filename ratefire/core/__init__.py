"""Signal-level stages: envelope, shot detection, burst grouping and shot edits."""

from .detection import detect_shots
from .editing import DEFAULT_TOGGLE_TOLERANCE, ToggleShot, toggle_shot
from .envelope import estimate_envelope, window_samples
from .segmentation import segment_bursts

__all__ = [
    "DEFAULT_TOGGLE_TOLERANCE",
    "ToggleShot",
    "detect_shots",
    "estimate_envelope",
    "segment_bursts",
    "toggle_shot",
    "window_samples",
]

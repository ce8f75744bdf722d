from .peaks import (
    detect_shots,
    detection_threshold,
    enforce_refractory,
    is_degenerate,
    relative_prominence,
)

__all__ = [
    "detect_shots",
    "detection_threshold",
    "enforce_refractory",
    "is_degenerate",
    "relative_prominence",
]

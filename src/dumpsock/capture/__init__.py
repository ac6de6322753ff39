"""Single-connection TCP capture pipeline."""

from dumpsock.capture.models import Active, CaptureState, CaptureStep, DrainStats, Failed
from dumpsock.capture.pipeline import run_capture

__all__ = [
    "Active",
    "CaptureState",
    "CaptureStep",
    "DrainStats",
    "Failed",
    "run_capture",
]

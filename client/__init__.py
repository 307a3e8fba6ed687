# client/__init__.py
# The OpenCV capture loop lives in client.capture and is imported on demand.

from .api import AttendanceClient, AttendanceRejected
from .recognizer import Classifier, Prediction, best_prediction, build_record, capture_and_submit

__all__ = [
    "AttendanceClient",
    "AttendanceRejected",
    "Classifier",
    "Prediction",
    "best_prediction",
    "build_record",
    "capture_and_submit",
]

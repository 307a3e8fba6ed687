import importlib
import logging
import os

import cv2
import requests

from client.api import AttendanceClient
from client.recognizer import capture_and_submit

logger = logging.getLogger(__name__)

CAM_INDEX = int(os.getenv("CAM_INDEX", "0"))
KEY_ESC = 27
KEY_SPACE = 32


def _overlay(frame, prediction, message):
    if prediction is not None:
        label = f"{prediction.label} {round(prediction.probability * 100)}%"
        cv2.putText(frame, label, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (0, 255, 0), 2)
    if message:
        cv2.putText(frame, message, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 255), 2)


def run_recognition_loop(classifier, client=None, camera_index=CAM_INDEX):
    """SPACE captures and submits the current frame, ESC exits."""
    client = client or AttendanceClient()
    cap = cv2.VideoCapture(camera_index)
    if not cap.isOpened():
        logger.error("Cannot open camera %s", camera_index)
        return

    logger.info("Recognition started (SPACE to mark, ESC to exit)")
    prediction, message = None, None
    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break

            key = cv2.waitKey(1) & 0xFF
            if key == KEY_ESC:
                break
            if key == KEY_SPACE:
                try:
                    prediction, message = capture_and_submit(frame, classifier, client)
                    logger.info(message)
                    for entry in client.fetch_attendance():
                        logger.info("  %s - %s", entry["name"], entry["time"])
                except requests.RequestException as e:
                    logger.error("[ERROR] Attendance server: %s", e)
                    message = "Attendance server unavailable"

            _overlay(frame, prediction, message)
            cv2.imshow("Face Recognition Attendance", frame)
    finally:
        cap.release()
        cv2.destroyAllWindows()


def load_classifier(path):
    """Instantiate a classifier from a ``module:ClassName`` path."""
    module_name, _, attr = path.partition(":")
    if not attr:
        raise ValueError(f"Classifier path must look like 'module:ClassName', got '{path}'")
    module = importlib.import_module(module_name)
    return getattr(module, attr)()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s: %(message)s")
    classifier_path = os.getenv("CLASSIFIER")
    if not classifier_path:
        raise SystemExit("Set CLASSIFIER=module:ClassName to the face classifier to use.")
    run_recognition_loop(load_classifier(classifier_path))

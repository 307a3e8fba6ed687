"""
client/recognizer.py
---------------------------------
Turns classifier output into a candidate attendance record.

The classifier is any object with ``predict(frame)`` returning a list of
``Prediction``; the model behind it is not part of this project.
"""

from datetime import datetime

import numpy as np

from client.api import AttendanceRejected

NO_FACE_LABEL = "No face"
CONFIDENCE_THRESHOLD = 0.8


class Prediction:
    def __init__(self, label, probability):
        self.label = label
        self.probability = float(probability)

    def __repr__(self):
        return f"Prediction(label={self.label!r}, probability={self.probability:.2f})"


class Classifier:
    def predict(self, frame):
        """Return a list of ``Prediction`` for one BGR frame."""
        raise NotImplementedError


def best_prediction(predictions):
    if not predictions:
        return None
    probs = np.array([p.probability for p in predictions], dtype=np.float64)
    return predictions[int(np.argmax(probs))]


def build_record(prediction, now=None, threshold=CONFIDENCE_THRESHOLD):
    """Candidate record for ``prediction``, or None when no valid face was seen."""
    if prediction is None or prediction.label == NO_FACE_LABEL:
        return None
    if prediction.probability < threshold:
        return None

    now = now or datetime.now()
    return {
        "name": prediction.label,
        "status": "Present",
        "confidence": round(float(prediction.probability), 2),
        "time": now.strftime("%H:%M:%S"),
        "date": now.strftime("%Y-%m-%d"),
    }


def capture_and_submit(frame, classifier, client):
    """Classify one frame and submit it. Returns (prediction, message)."""
    prediction = best_prediction(classifier.predict(frame))
    record = build_record(prediction)
    if record is None:
        return prediction, "No valid face detected."

    try:
        client.mark_attendance(record)
    except AttendanceRejected as e:
        return prediction, e.message
    return prediction, f"{record['name']} marked present"

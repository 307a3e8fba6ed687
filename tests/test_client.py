import os
import tempfile
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch

import numpy as np
import requests

from client.api import AttendanceClient, AttendanceRejected
from client.capture import KEY_ESC, KEY_SPACE, load_classifier, run_recognition_loop
from client.recognizer import Classifier, Prediction, best_prediction, build_record, capture_and_submit


def fake_response(status_code, payload=None, content=b""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.content = content
    return resp


class TestRecognizer(unittest.TestCase):
    def test_best_prediction(self):
        predictions = [Prediction("Alice", 0.2), Prediction("Bob", 0.7), Prediction("No face", 0.1)]
        self.assertEqual(best_prediction(predictions).label, "Bob")
        self.assertIsNone(best_prediction([]))

    def test_build_record(self):
        now = datetime(2024, 5, 1, 9, 15, 2)
        record = build_record(Prediction("Alice", 0.9341), now=now)

        self.assertEqual(record, {
            "name": "Alice",
            "status": "Present",
            "confidence": 0.93,
            "time": "09:15:02",
            "date": "2024-05-01",
        })

    def test_build_record_rejects_no_face_and_low_confidence(self):
        self.assertIsNone(build_record(Prediction("No face", 0.99)))
        self.assertIsNone(build_record(Prediction("Alice", 0.79)))
        self.assertIsNone(build_record(None))
        self.assertIsNotNone(build_record(Prediction("Alice", 0.8)))


class TestAttendanceClient(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.client = AttendanceClient("http://server:5000/", session=self.session)

    def test_mark_attendance(self):
        record = {"name": "Alice"}
        self.session.post.return_value = fake_response(201, {"data": {"name": "Alice", "date": "2024-05-01"}})

        data = self.client.mark_attendance(record)

        self.assertEqual(data["name"], "Alice")
        self.session.post.assert_called_once_with(
            "http://server:5000/mark-attendance", json=record, timeout=self.client.timeout
        )

    def test_mark_attendance_rejected(self):
        self.session.post.return_value = fake_response(400, {"error": "Alice already marked present today"})

        with self.assertRaises(AttendanceRejected) as ctx:
            self.client.mark_attendance({"name": "Alice"})
        self.assertEqual(ctx.exception.message, "Alice already marked present today")

    def test_fetch_attendance(self):
        self.session.get.return_value = fake_response(200, [{"name": "Alice", "time": "09:00:00"}])

        self.assertEqual(self.client.fetch_attendance()[0]["name"], "Alice")
        self.session.get.assert_called_once_with("http://server:5000/attendance", timeout=self.client.timeout)

    def test_download_csv(self):
        self.session.get.return_value = fake_response(200, content=b"name,status\n")

        with tempfile.TemporaryDirectory() as tmp:
            dest = os.path.join(tmp, "attendance.csv")
            self.client.download_csv(dest)
            with open(dest, "rb") as f:
                self.assertEqual(f.read(), b"name,status\n")

    def test_download_pdf_not_found(self):
        self.session.get.return_value = fake_response(404, {"error": "No attendance records found for today"})

        with self.assertRaises(AttendanceRejected) as ctx:
            self.client.download_pdf("unused.pdf")
        self.assertEqual(ctx.exception.status_code, 404)


class TestCaptureAndSubmit(unittest.TestCase):
    def setUp(self):
        self.frame = np.zeros((480, 640, 3), dtype=np.uint8)
        self.classifier = MagicMock()
        self.api = MagicMock()

    def test_submits_valid_face(self):
        self.classifier.predict.return_value = [Prediction("Alice", 0.95), Prediction("Bob", 0.05)]

        prediction, message = capture_and_submit(self.frame, self.classifier, self.api)

        self.assertEqual(prediction.label, "Alice")
        self.assertEqual(message, "Alice marked present")
        submitted = self.api.mark_attendance.call_args[0][0]
        self.assertEqual(submitted["name"], "Alice")
        self.assertEqual(submitted["confidence"], 0.95)

    def test_skips_invalid_face(self):
        self.classifier.predict.return_value = [Prediction("No face", 0.9)]

        _, message = capture_and_submit(self.frame, self.classifier, self.api)

        self.assertEqual(message, "No valid face detected.")
        self.api.mark_attendance.assert_not_called()

    def test_reports_server_rejection(self):
        self.classifier.predict.return_value = [Prediction("Alice", 0.95)]
        self.api.mark_attendance.side_effect = AttendanceRejected("Alice already marked present today")

        _, message = capture_and_submit(self.frame, self.classifier, self.api)

        self.assertEqual(message, "Alice already marked present today")


class TestRecognitionLoop(unittest.TestCase):
    def setUp(self):
        patcher = patch("client.capture.cv2")
        self.cv2 = patcher.start()
        self.addCleanup(patcher.stop)

        self.frame = np.zeros((480, 640, 3), dtype=np.uint8)
        self.cap = self.cv2.VideoCapture.return_value
        self.cap.isOpened.return_value = True
        self.cap.read.return_value = (True, self.frame)

        self.classifier = MagicMock()
        self.classifier.predict.return_value = [Prediction("Alice", 0.95)]
        self.api = MagicMock()
        self.api.fetch_attendance.return_value = [{"name": "Alice", "time": "09:00:00"}]

    def press(self, *keys):
        self.cv2.waitKey.side_effect = list(keys)

    def test_space_submits_and_fetches_list(self):
        self.press(KEY_SPACE, KEY_ESC)

        run_recognition_loop(self.classifier, self.api, camera_index=0)

        self.api.mark_attendance.assert_called_once()
        self.assertEqual(self.api.mark_attendance.call_args[0][0]["name"], "Alice")
        self.api.fetch_attendance.assert_called_once()

    def test_esc_exits_and_releases_camera(self):
        self.press(KEY_ESC)

        run_recognition_loop(self.classifier, self.api, camera_index=0)

        self.api.mark_attendance.assert_not_called()
        self.cap.release.assert_called_once()
        self.cv2.destroyAllWindows.assert_called_once()

    def test_unopened_camera_returns_without_reading(self):
        self.cap.isOpened.return_value = False

        run_recognition_loop(self.classifier, self.api, camera_index=3)

        self.cv2.VideoCapture.assert_called_once_with(3)
        self.cap.read.assert_not_called()

    def test_server_error_does_not_end_session(self):
        self.press(KEY_SPACE, KEY_SPACE, KEY_ESC)
        self.api.mark_attendance.side_effect = [requests.HTTPError("500 Server Error"), {"name": "Alice"}]

        run_recognition_loop(self.classifier, self.api, camera_index=0)

        self.assertEqual(self.api.mark_attendance.call_count, 2)
        self.cap.release.assert_called_once()

    def test_connection_drop_while_listing_does_not_end_session(self):
        self.press(KEY_SPACE, KEY_SPACE, KEY_ESC)
        self.api.fetch_attendance.side_effect = [requests.ConnectionError("refused"), []]

        run_recognition_loop(self.classifier, self.api, camera_index=0)

        self.assertEqual(self.api.mark_attendance.call_count, 2)
        self.assertEqual(self.api.fetch_attendance.call_count, 2)

    def test_camera_stops_delivering_frames(self):
        self.cap.read.return_value = (False, None)

        run_recognition_loop(self.classifier, self.api, camera_index=0)

        self.cv2.waitKey.assert_not_called()
        self.cap.release.assert_called_once()


class TestLoadClassifier(unittest.TestCase):
    def test_path_without_class_rejected(self):
        with self.assertRaises(ValueError):
            load_classifier("client.recognizer")

    def test_module_and_class_path(self):
        classifier = load_classifier("client.recognizer:Classifier")
        self.assertIsInstance(classifier, Classifier)


if __name__ == "__main__":
    unittest.main()

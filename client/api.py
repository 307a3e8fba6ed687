import logging
import os
import requests

logger = logging.getLogger(__name__)

API_URL = os.getenv("API_URL", "http://localhost:5000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))


class AttendanceRejected(Exception):
    """The server refused a submission (low confidence, duplicate, missing fields)."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AttendanceClient:
    def __init__(self, base_url=API_URL, timeout=REQUEST_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def mark_attendance(self, record):
        resp = self.session.post(self._url("mark-attendance"), json=record, timeout=self.timeout)
        if resp.status_code == 400:
            message = resp.json().get("error", "Attendance rejected")
            logger.warning("Submission for %s rejected: %s", record.get("name"), message)
            raise AttendanceRejected(message)
        resp.raise_for_status()
        return resp.json()["data"]

    def fetch_attendance(self):
        resp = self.session.get(self._url("attendance"), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _download(self, path, dest):
        resp = self.session.get(self._url(path), timeout=self.timeout)
        if resp.status_code == 404:
            raise AttendanceRejected(resp.json().get("error", "No records"), status_code=404)
        resp.raise_for_status()
        with open(dest, "wb") as f:
            f.write(resp.content)
        logger.info("Saved %s to %s", path, dest)
        return dest

    def download_csv(self, dest):
        return self._download("export-csv", dest)

    def download_pdf(self, dest):
        return self._download("export-pdf", dest)

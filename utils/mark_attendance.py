import logging

from flask import current_app
from marshmallow import ValidationError
from pymongo.errors import DuplicateKeyError

from models.attendance import Attendance, current_date
from models.schemas import AttendanceSubmissionSchema
from utils.errors import AlreadyMarked, NoRecordsFound, ValidationFailed

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "status", "confidence", "time")

submission_schema = AttendanceSubmissionSchema()


# ============================
# VALIDATION
# ============================
def _validate_submission(payload):
    if not isinstance(payload, dict):
        raise ValidationFailed("Missing required fields")

    missing = [f for f in REQUIRED_FIELDS if payload.get(f) is None or payload.get(f) == ""]
    if missing:
        logger.warning("Rejected submission, missing fields: %s", ", ".join(missing))
        raise ValidationFailed("Missing required fields")

    try:
        data = submission_schema.load(payload)
    except ValidationError as e:
        logger.warning("Rejected submission, invalid fields: %s", e.messages)
        if "confidence" in e.messages:
            raise ValidationFailed("Invalid confidence value")
        raise ValidationFailed("Missing required fields")

    threshold = current_app.config["CONFIDENCE_THRESHOLD"]
    if data["confidence"] < threshold:
        logger.warning("Rejected %s, confidence %.2f below %.2f", data["name"], data["confidence"], threshold)
        raise ValidationFailed("Face recognition confidence too low")

    return data


# ============================
# MARK ATTENDANCE
# ============================
def mark_attendance_in_db(payload, today=None):
    """
    Validate a candidate record and store it for ``today``.

    Raises ``ValidationFailed`` for missing fields or a low confidence and
    ``AlreadyMarked`` when the person already has a record for the day.
    Returns the stored record.
    """
    data = _validate_submission(payload)
    today = today or current_date()

    # ATTENDANCE EXIST?
    if Attendance.find_for(data["name"], today):
        logger.info("[REPEAT] %s already present on %s", data["name"], today)
        raise AlreadyMarked(data["name"])

    record = Attendance(
        name=data["name"],
        status=data["status"],
        confidence=data["confidence"],
        time=data["time"],
        date=today,
    )
    try:
        record.save()
    except DuplicateKeyError:
        # Lost the race against a concurrent submission
        logger.info("[REPEAT] %s inserted concurrently on %s", data["name"], today)
        raise AlreadyMarked(data["name"])

    logger.info("[NEW] %s | %s %s (%.2f)", record.name, record.status, record.time, record.confidence)
    return record.to_dict()


def todays_attendance(today=None):
    return Attendance.find_by_date(today or current_date())


def records_for_export(today=None):
    """Today's records, or ``NoRecordsFound`` when the day is empty."""
    records = todays_attendance(today)
    if not records:
        raise NoRecordsFound()
    return records


# ============================
# DAILY RESET
# ============================
def reset_attendance(today=None):
    today = today or current_date()
    deleted = Attendance.delete_not_dated(today)
    logger.info("Attendance reset for %s, removed %d stale records", today, deleted)
    return deleted

from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

from utils.db import attendance_col

DATE_FORMAT = "%Y-%m-%d"
EXPORT_FIELDS = ["name", "status", "confidence", "time", "date"]


def current_date():
    """Calendar day as YYYY-MM-DD in the app TIMEZONE (UTC outside an app)."""
    tz_name = current_app.config["TIMEZONE"] if has_app_context() else "UTC"
    return datetime.now(ZoneInfo(tz_name)).strftime(DATE_FORMAT)


class Attendance:
    @staticmethod
    def collection():
        return attendance_col()

    def __init__(self, name, status, confidence, time, date=None):
        self.name = name
        self.status = status  # "Present"
        self.confidence = float(confidence)
        self.time = time
        self.date = date or current_date()

    def to_dict(self):
        return {
            "name": self.name,
            "status": self.status,
            "confidence": self.confidence,
            "time": self.time,
            "date": self.date,
        }

    def save(self):
        return Attendance.collection().insert_one(self.to_dict())

    # Find a person's record for a given day
    @staticmethod
    def find_for(name, date):
        return Attendance.collection().find_one({"name": name, "date": date}, {"_id": 0})

    # All records of a day, in insertion order
    @staticmethod
    def find_by_date(date):
        return list(Attendance.collection().find({"date": date}, {"_id": 0}).sort("_id", 1))

    # Bulk purge of every record not dated ``date``
    @staticmethod
    def delete_not_dated(date):
        result = Attendance.collection().delete_many({"date": {"$ne": date}})
        return result.deleted_count

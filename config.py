import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/AttendanceSystem")
    ATTENDANCE_COLLECTION = os.getenv("ATTENDANCE_COLLECTION", "attendances")

    # Minimum classifier probability accepted for a submission
    CONFIDENCE_THRESHOLD = float(os.getenv("CONFIDENCE_THRESHOLD", "0.8"))

    # Daily reset job
    SCHEDULER_ENABLED = _env_flag("SCHEDULER_ENABLED", "true")
    RESET_CRON = os.getenv("RESET_CRON", "0 0 * * *")
    # Day boundary for stamping records and for the reset trigger
    TIMEZONE = os.getenv("TIMEZONE", "UTC")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "5000"))

    @classmethod
    def validate(cls):
        if not 0.0 <= cls.CONFIDENCE_THRESHOLD <= 1.0:
            raise ValueError(f"CONFIDENCE_THRESHOLD must be within [0, 1], got {cls.CONFIDENCE_THRESHOLD}")
        if len(cls.RESET_CRON.split()) != 5:
            raise ValueError(f"RESET_CRON must have five fields, got '{cls.RESET_CRON}'")
        try:
            ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"TIMEZONE is not a known IANA zone: '{cls.TIMEZONE}'")


class TestingConfig(Config):
    TESTING = True
    MONGO_URI = "mongodb://localhost:27017/AttendanceSystemTest"
    SCHEDULER_ENABLED = False
    LOG_LEVEL = "DEBUG"

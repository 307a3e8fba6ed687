# models/__init__.py

from .attendance import Attendance, current_date

__all__ = [
    "Attendance",
    "current_date",
]

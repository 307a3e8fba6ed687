class AttendanceError(Exception):
    """Base class for errors reported back to the caller as ``{"error": message}``."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(AttendanceError):
    status_code = 400


class AlreadyMarked(AttendanceError):
    status_code = 400

    def __init__(self, name):
        super().__init__(f"{name} already marked present today")
        self.name = name


class NoRecordsFound(AttendanceError):
    status_code = 404

    def __init__(self, message="No attendance records found for today"):
        super().__init__(message)

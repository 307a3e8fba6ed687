from flask import Blueprint, jsonify, request

from models.schemas import AttendanceRecordSchema
from utils.mark_attendance import mark_attendance_in_db, todays_attendance

attendance_bp = Blueprint("attendance", __name__)

record_schema = AttendanceRecordSchema()


# ==========================================================
# MARK ATTENDANCE
# ==========================================================
@attendance_bp.route("/mark-attendance", methods=["POST"])
def mark_attendance():
    payload = request.get_json(silent=True)
    record = mark_attendance_in_db(payload)
    return jsonify({"message": "Attendance marked successfully", "data": record_schema.dump(record)}), 201


# ==========================================================
# TODAY'S ATTENDANCE LIST
# ==========================================================
@attendance_bp.route("/attendance", methods=["GET"])
def list_attendance():
    return jsonify(record_schema.dump(todays_attendance(), many=True)), 200


@attendance_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})

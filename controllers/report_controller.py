import io
import logging

from flask import Blueprint, send_file

from models.attendance import current_date
from utils.exports import build_csv, build_pdf
from utils.mark_attendance import records_for_export

logger = logging.getLogger(__name__)

report_bp = Blueprint("report", __name__)


# ---------------- Export CSV ----------------
@report_bp.route("/export-csv")
def export_csv():
    today = current_date()
    records = records_for_export(today)

    output = io.BytesIO(build_csv(records))
    logger.info("Exporting %d records for %s as CSV", len(records), today)
    return send_file(output, mimetype="text/csv", as_attachment=True,
                     download_name=f"attendance_{today}.csv")


# ---------------- Export PDF ----------------
@report_bp.route("/export-pdf")
def export_pdf():
    today = current_date()
    records = records_for_export(today)

    buffer = io.BytesIO(build_pdf(records, today))
    logger.info("Exporting %d records for %s as PDF", len(records), today)
    return send_file(buffer, mimetype="application/pdf", as_attachment=True,
                     download_name=f"attendance_{today}.pdf")

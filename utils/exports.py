"""
utils/exports.py
---------------------------------
CSV and PDF renderings of a day's attendance records.
Both builders work in memory and return raw bytes.
"""

import csv
import io

from reportlab.lib.colors import HexColor, black, white
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from models.attendance import EXPORT_FIELDS

ACCENT = HexColor("#007AFF")
ROW_SHADE = HexColor("#F3F3F3")
FOOTER_GREY = HexColor("#333333")

TABLE_WIDTH = 500
HEADER_HEIGHT = 30
ROW_HEIGHT = 25
CELL_PADDING = 10
ELLIPSIS = "..."
# (title, x offset, width, alignment)
COLUMNS = [
    ("Name", 0, 150, "left"),
    ("Status", 150, 120, "center"),
    ("Confidence", 270, 100, "center"),
    ("Time", 370, 130, "center"),
]
FOOTER_TEXT = "Generated Automatically - Face Recognition Attendance System"


# ---------------- CSV ----------------
def build_csv(records):
    si = io.StringIO()
    cw = csv.writer(si)
    cw.writerow(EXPORT_FIELDS)
    for record in records:
        cw.writerow([record.get(field, "") for field in EXPORT_FIELDS])
    return si.getvalue().encode("utf-8")


# ---------------- PDF ----------------
def format_confidence(confidence):
    return f"{round(float(confidence) * 100)}%"


def fit_text(text, width, font="Helvetica", size=12):
    """Truncate ``text`` with an ellipsis so it fits ``width`` points."""
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + ELLIPSIS, font, size) > width:
        text = text[:-1]
    return text + ELLIPSIS


def _draw_cell(c, text, x, width, y, align, font="Helvetica", size=12):
    text = fit_text(text, width - 2 * CELL_PADDING, font, size)
    if align == "left":
        c.drawString(x + CELL_PADDING, y, text)
    else:
        c.drawCentredString(x + width / 2, y, text)


def _draw_header(c, start_x, top):
    c.setFillColor(ACCENT)
    c.rect(start_x, top - HEADER_HEIGHT, TABLE_WIDTH, HEADER_HEIGHT, fill=1, stroke=0)
    c.setFillColor(white)
    c.setFont("Helvetica-Bold", 12)
    for title, offset, width, align in COLUMNS:
        _draw_cell(c, title, start_x + offset, width, top - HEADER_HEIGHT + 10, align, font="Helvetica-Bold")
    return top - HEADER_HEIGHT - 5


def build_pdf(records, date):
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Attendance Report {date}")
    width, height = A4
    start_x = (width - TABLE_WIDTH) / 2

    # Title
    y = height - 60
    c.setFillColor(ACCENT)
    c.setFont("Helvetica-Bold", 22)
    c.drawCentredString(width / 2, y, "Attendance Report")

    # Date
    y -= 30
    c.setFillColor(black)
    c.setFont("Helvetica", 14)
    c.drawCentredString(width / 2, y, f"Date: {date}")

    y = _draw_header(c, start_x, y - 20)

    for index, record in enumerate(records):
        if y - ROW_HEIGHT < 60:
            c.showPage()
            y = _draw_header(c, start_x, height - 50)

        c.setFillColor(ROW_SHADE if index % 2 == 0 else white)
        c.rect(start_x, y - ROW_HEIGHT, TABLE_WIDTH, ROW_HEIGHT, fill=1, stroke=0)

        c.setFillColor(black)
        c.setFont("Helvetica", 12)
        values = [
            str(record.get("name", "")),
            str(record.get("status", "")),
            format_confidence(record.get("confidence", 0)),
            str(record.get("time", "")),
        ]
        for value, (_, offset, col_width, align) in zip(values, COLUMNS):
            _draw_cell(c, value, start_x + offset, col_width, y - ROW_HEIGHT + 8, align)
        y -= ROW_HEIGHT

    # Footer
    c.setFillColor(FOOTER_GREY)
    c.setFont("Helvetica", 10)
    c.drawCentredString(width / 2, max(y - 40, 30), FOOTER_TEXT)

    c.save()
    buffer.seek(0)
    return buffer.getvalue()

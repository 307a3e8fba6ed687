from marshmallow import Schema, fields, validate, EXCLUDE


class AttendanceSubmissionSchema(Schema):
    """Body of POST /mark-attendance. Any client supplied ``date`` is dropped."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1))
    status = fields.String(required=True, validate=validate.Length(min=1))
    confidence = fields.Float(required=True, validate=validate.Range(min=0, max=1))
    time = fields.String(required=True, validate=validate.Length(min=1))


class AttendanceRecordSchema(Schema):
    name = fields.String()
    status = fields.String()
    confidence = fields.Float()
    time = fields.String()
    date = fields.String()

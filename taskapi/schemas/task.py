"""Task-related Marshmallow schemas."""

from datetime import datetime, timedelta, timezone

from marshmallow import RAISE, Schema, ValidationError, fields, post_load, validate, validates


DEFAULT_DUE_IN = timedelta(days=7)

# Width of the tasks.title column
TITLE_MAX_LENGTH = 255

# Clients that serialize an unset timestamp send the zero time instead of omitting it
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskSchema(Schema):
    """Schema for task serialization."""

    id = fields.Int(dump_only=True)
    title = fields.Str(required=True)
    description = fields.Str(required=True)
    due_date = fields.AwareDateTime(format="iso", default_timezone=timezone.utc)
    created_at = fields.AwareDateTime(dump_only=True, format="iso", default_timezone=timezone.utc)
    updated_at = fields.AwareDateTime(dump_only=True, format="iso", default_timezone=timezone.utc)


class TaskPayloadSchema(Schema):
    """Schema for task create and update validation.

    Both operations replace the full set of mutable fields, so the same
    rules apply to each. A missing, null or zero ``due_date`` defaults to
    one week from the moment of validation.
    """

    class Meta:
        unknown = RAISE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=TITLE_MAX_LENGTH))
    description = fields.Str(required=True, validate=validate.Length(min=1))
    due_date = fields.AwareDateTime(
        format="iso",
        default_timezone=timezone.utc,
        allow_none=True,
        load_default=None,
    )

    @validates("due_date")
    def validate_due_date(self, value: datetime | None, **kwargs) -> None:
        if value is None or value == ZERO_TIME:
            return
        try:
            value.astimezone(timezone.utc)
        except OverflowError as err:
            raise ValidationError("Due date is out of range.") from err
        if value < utcnow():
            raise ValidationError("Due date cannot be in the past.")

    @post_load
    def apply_default_due_date(self, data: dict, **kwargs) -> dict:
        due_date = data.get("due_date")
        if due_date is None or due_date == ZERO_TIME:
            data["due_date"] = utcnow() + DEFAULT_DUE_IN
        else:
            data["due_date"] = due_date.astimezone(timezone.utc)
        return data

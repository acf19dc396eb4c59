from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_type(enum_cls, name: str) -> Enum:
    # Persist the lowercase values ("bi-weekly"), not the member names
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


def apply_changes(instance, changes: dict) -> None:
    """Copy partial-update fields onto a model row.

    An explicit null only clears nullable columns; for NOT NULL columns it is ignored.
    """
    columns = instance.__table__.columns
    for key, value in changes.items():
        if value is None and key in columns and not columns[key].nullable:
            continue
        setattr(instance, key, value)

import logging
import math
from datetime import date, datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InternalError, Unauthenticated, ValidationError

logger = logging.getLogger(__name__)


def require_caller(caller_id):
    if not caller_id:
        raise Unauthenticated()
    return caller_id


def commit(session, failure_message):
    """Commit the unit of work, turning store failures into InternalError."""
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(failure_message)
        raise InternalError(failure_message)


def reject_unknown_fields(data, allowed):
    unknown = set(data) - set(allowed)
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")


def is_number(value):
    """True for a finite int or float; bools, NaN and infinities are not amounts."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def to_datetime(value):
    """Normalize an ISO string, date or datetime into a naive datetime.

    Values carrying a UTC offset are converted to naive UTC, matching how the
    DateTime columns store them.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError("Invalid date")
    else:
        raise ValidationError("Invalid date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed

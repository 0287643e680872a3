"""Conversion between wire timestamps and the store's datetime values.

The valid range matches what ``datetime`` can hold: 0001-01-01T00:00:00Z
through 9999-12-31T23:59:59.999999999Z. The store keeps microseconds, so
decoding truncates anything finer.
"""

from datetime import UTC, datetime, timedelta

from src.bookshelf.core.errors import invalid_argument, unknown
from src.bookshelf.entities.book.entity import Timestamp

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
MIN_SECONDS = -62135596800  # 0001-01-01T00:00:00Z
MAX_SECONDS = 253402300799  # 9999-12-31T23:59:59Z
NANOS_PER_SECOND = 1_000_000_000


def _validate(ts: Timestamp) -> str | None:
    if not 0 <= ts.nanos < NANOS_PER_SECOND:
        return f"nanos {ts.nanos} out of range [0, {NANOS_PER_SECOND})"
    if ts.seconds < MIN_SECONDS:
        return f"seconds {ts.seconds} before 0001-01-01"
    if ts.seconds > MAX_SECONDS:
        return f"seconds {ts.seconds} after 9999-12-31"
    return None


def decode_timestamp(ts: Timestamp | None, field: str) -> datetime:
    """Convert a wire timestamp into an aware UTC datetime.

    Raises an InvalidArgument error naming ``field`` when the value is
    missing or outside the representable range.
    """
    if ts is None:
        raise invalid_argument(f"{field} field has invalid format: missing timestamp", field)

    problem = _validate(ts)
    if problem is not None:
        raise invalid_argument(f"{field} field has invalid format: {problem}", field)

    return EPOCH + timedelta(seconds=ts.seconds, microseconds=ts.nanos // 1000)


def encode_timestamp(value: object, field: str) -> Timestamp:
    """Convert a datetime read from the store into a wire timestamp.

    Naive datetimes are taken as UTC. Anything that is not a datetime means
    the store handed back a malformed value, reported as Unknown.
    """
    if not isinstance(value, datetime):
        raise unknown(
            f"{field} field has invalid format: expected a datetime, got {type(value).__name__}",
            field,
        )

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)

    delta = value - EPOCH
    return Timestamp(
        seconds=delta.days * 86400 + delta.seconds,
        nanos=delta.microseconds * 1000,
    )

"""Entry service: the calls the HTTP layer makes into the journal core.

Translates between the nested :class:`schemas.Entry` shape and the
header + field-row shape kept by :mod:`storage`. Nothing is cached between
calls; every function works on the session it is given.
"""
from datetime import UTC, datetime

from sqlmodel import Session

import storage
from errors import InvalidInputError
from schemas import FIELD_IDS, Entry, EntrySummary

DATE_FORMAT = "%Y-%m-%d"


def utc_timestamp() -> str:
    """Current UTC time in RFC 3339 form, second precision."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_entry_date(value: str) -> str:
    """Return ``value`` if it is a real calendar date written as YYYY-MM-DD."""
    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidInputError(f"Invalid date format: {value!r}, expected YYYY-MM-DD") from e
    # strptime also accepts unpadded forms such as 2025-3-1
    if parsed.isoformat() != value:
        raise InvalidInputError(f"Invalid date format: {value!r}, expected YYYY-MM-DD")
    return value


def check_month(year: int, month: int) -> None:
    if not 1 <= year <= 9999:
        raise InvalidInputError(f"Invalid year: {year}")
    if not 1 <= month <= 12:
        raise InvalidInputError(f"Invalid month: {month}")


def get_entry(session: Session, date: str) -> Entry | None:
    """Return the entry for ``date``, or None when nothing was saved for that day.

    Every catalog field is present in the result; fields that are NULL in
    storage, or missing because they were added after the entry was written,
    read as ''.
    """
    date = parse_entry_date(date)
    stored = storage.get_entry(session, date)
    if stored is None:
        return None

    fields = {field_id: "" for field_id in FIELD_IDS}
    fields.update({field_id: value or "" for field_id, value in stored.fields.items()})
    return Entry(date=stored.date, timestamp=stored.timestamp, fields=fields)


def save_entry(session: Session, date: str, entry: Entry) -> Entry:
    """Overwrite the entry for ``date`` with the fields of ``entry``.

    ``date`` comes from the caller's context (the request path) and wins over
    ``entry.date``; the timestamp is always assigned here. Field ids outside
    the catalog are dropped.
    """
    date = parse_entry_date(date)
    timestamp = utc_timestamp()
    storage.save_entry(session, date, entry.fields, timestamp)

    fields = {field_id: entry.fields.get(field_id, "") for field_id in FIELD_IDS}
    return Entry(date=date, timestamp=timestamp, fields=fields)


def delete_entry(session: Session, date: str) -> None:
    storage.delete_entry(session, parse_entry_date(date))


def get_entries_by_month(session: Session, year: int, month: int) -> list[str]:
    check_month(year, month)
    return storage.list_dates_by_month(session, year, month)


def get_entries_summary_by_month(session: Session, year: int, month: int) -> list[EntrySummary]:
    check_month(year, month)
    return [
        EntrySummary(date=date, working=working)
        for date, working in storage.list_summaries_by_month(session, year, month)
    ]

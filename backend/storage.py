"""Persistence for journal entries.

An entry is stored as a header row in ``entries`` plus one row per field in
``details``. Values cross this module's boundary as ``str | None``: a field that
was saved empty is stored as NULL and read back as ``None``.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy import insert, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, delete, select

from errors import StorageError
from models import EntryDetail, JournalEntry
from schemas import FIELD_IDS, FIELD_WORKING

logger = logging.getLogger(__name__)


@dataclass
class StoredEntry:
    date: str
    timestamp: str
    fields: dict[str, str | None]


def month_prefix(year: int, month: int) -> str:
    """Prefix shared by every YYYY-MM-DD date in the given month."""
    return f"{year:04d}-{month:02d}"


def get_entry(session: Session, date: str) -> StoredEntry | None:
    """Load the header and all field rows for ``date``, or None if there is no entry.

    Header and fields come from one statement so a concurrent save or delete
    is seen either entirely or not at all.
    """
    try:
        result = session.execute(
            text("""
                SELECT e.timestamp, d.field_id, d.value
                FROM entries e
                LEFT JOIN details d ON d.date = e.date
                WHERE e.date = :date
            """),
            {"date": date},
        )
        rows = result.fetchall()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to load entry {date}: {e}") from e

    if not rows:
        return None

    # A header without details comes back as a single row with a NULL field_id
    return StoredEntry(
        date=date,
        timestamp=rows[0][0],
        fields={row[1]: row[2] for row in rows if row[1] is not None},
    )


def save_entry(
    session: Session,
    date: str,
    fields: Mapping[str, str],
    timestamp: str,
) -> None:
    """Replace the entry for ``date`` in a single transaction.

    The header is upserted, every existing field row for the date is removed,
    and one row is written per catalog field. Empty or missing values are
    written as NULL.
    """
    detail_rows = [
        {"date": date, "field_id": field_id, "value": fields.get(field_id) or None}
        for field_id in FIELD_IDS
    ]

    try:
        session.execute(
            text("""
                INSERT INTO entries (date, timestamp)
                VALUES (:date, :timestamp)
                ON CONFLICT (date) DO UPDATE
                SET timestamp = EXCLUDED.timestamp
            """),
            {"date": date, "timestamp": timestamp},
        )
        session.execute(delete(EntryDetail).where(col(EntryDetail.date) == date))
        session.execute(insert(EntryDetail), detail_rows)

        # Single commit for all three steps (atomic)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to save entry {date}: {e}") from e

    logger.debug(f"Saved entry {date} with {len(detail_rows)} field rows")


def delete_entry(session: Session, date: str) -> None:
    """Remove the entry for ``date``; its field rows go with it (ON DELETE CASCADE).

    Deleting a date that has no entry is not an error.
    """
    try:
        result = session.execute(delete(JournalEntry).where(col(JournalEntry.date) == date))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to delete entry {date}: {e}") from e

    logger.debug(f"Deleted {result.rowcount} header rows for {date}")


def list_dates_by_month(session: Session, year: int, month: int) -> list[str]:
    prefix = month_prefix(year, month)
    try:
        dates = session.exec(
            select(JournalEntry.date)
            .where(col(JournalEntry.date).like(f"{prefix}%"))
            .order_by(JournalEntry.date)
        ).all()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to list entries for {prefix}: {e}") from e
    return list(dates)


def list_summaries_by_month(session: Session, year: int, month: int) -> list[tuple[str, str]]:
    """(date, working) for every entry in the month; working is '' when not stored."""
    prefix = month_prefix(year, month)
    try:
        result = session.execute(
            text("""
                SELECT e.date, COALESCE(d.value, '') AS working
                FROM entries e
                LEFT JOIN details d ON e.date = d.date AND d.field_id = :field_id
                WHERE e.date LIKE :pattern
                ORDER BY e.date
            """),
            {"field_id": FIELD_WORKING, "pattern": f"{prefix}%"},
        )
        rows = result.fetchall()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to summarize entries for {prefix}: {e}") from e
    return [(row[0], row[1]) for row in rows]

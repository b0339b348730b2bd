from sqlalchemy import Column, ForeignKey, Index, String
from sqlmodel import Field, SQLModel


class JournalEntry(SQLModel, table=True):
    """Header row: one per journal day, establishes that the entry exists."""

    __tablename__ = "entries"

    date: str = Field(primary_key=True)  # YYYY-MM-DD format
    timestamp: str  # UTC time of the last save, RFC 3339


class EntryDetail(SQLModel, table=True):
    """One value of one field for one day. Empty values are stored as NULL."""

    __tablename__ = "details"
    __table_args__ = (Index("idx_details_date", "date"),)

    date: str = Field(
        sa_column=Column(
            String, ForeignKey("entries.date", ondelete="CASCADE"), primary_key=True
        )
    )
    field_id: str = Field(primary_key=True)
    value: str | None = Field(default=None)

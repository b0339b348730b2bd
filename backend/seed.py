from sqlmodel import Session, select

import entries
from models import JournalEntry
from schemas import Entry

# Sample days
SAMPLE_ENTRIES = [
    Entry(
        date="2024-01-15",  # Monday
        fields={
            "POSITION_NAME": "Home",
            "RATING": "4",
            "WORKING": "yes",
            "MOOD": "good",
            "LUNCH": "Soup",
            "DINNER": "Pasta",
            "SLEEP": "7",
        },
    ),
    Entry(
        date="2024-01-16",  # Tuesday
        fields={
            "POSITION_NAME": "Office",
            "RATING": "3",
            "GENERAL": "Long meetings",
            "WORKING": "yes",
            "MOOD": "tired",
            "MOOD_TXT": "Too many calls",
            "TV": "News",
            "SLEEP": "6",
            "SLEEP_TXT": "Woke up early",
        },
    ),
    Entry(
        date="2024-01-20",  # Saturday
        fields={
            "POSITION_LON": "4.8952",
            "POSITION_LAT": "52.3702",
            "POSITION_NAME": "Amsterdam",
            "RATING": "5",
            "WORKING": "no",
            "MOOD": "great",
            "DINNER": "Pizza",
        },
    ),
]


def seed_database(session: Session) -> int:
    """Seed the database with sample days. Returns how many were written."""
    # Check if data already exists
    existing = session.exec(select(JournalEntry)).first()
    if existing:
        print("Database already has data, skipping seed.")
        return 0

    for entry in SAMPLE_ENTRIES:
        entries.save_entry(session, entry.date, entry)
    print(f"Seeded database with {len(SAMPLE_ENTRIES)} sample entries.")
    return len(SAMPLE_ENTRIES)


if __name__ == "__main__":
    from db import create_db_and_tables, engine

    create_db_and_tables()
    with Session(engine) as session:
        seed_database(session)

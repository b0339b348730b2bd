from pydantic import BaseModel, Field, field_validator

# Field IDs
FIELD_POSITION_LON = "POSITION_LON"
FIELD_POSITION_LAT = "POSITION_LAT"
FIELD_POSITION_NAME = "POSITION_NAME"
FIELD_RATING = "RATING"
FIELD_GENERAL = "GENERAL"
FIELD_WORKING = "WORKING"
FIELD_MOOD = "MOOD"
FIELD_MOOD_TEXT = "MOOD_TXT"
FIELD_LUNCH = "LUNCH"
FIELD_DINNER = "DINNER"
FIELD_TV = "TV"
FIELD_SLEEP = "SLEEP"
FIELD_SLEEP_TEXT = "SLEEP_TXT"

# Every field an entry stores a row for, in insertion order
FIELD_IDS = (
    FIELD_POSITION_LON,
    FIELD_POSITION_LAT,
    FIELD_POSITION_NAME,
    FIELD_RATING,
    FIELD_GENERAL,
    FIELD_WORKING,
    FIELD_MOOD,
    FIELD_MOOD_TEXT,
    FIELD_LUNCH,
    FIELD_DINNER,
    FIELD_TV,
    FIELD_SLEEP,
    FIELD_SLEEP_TEXT,
)


class Entry(BaseModel):
    date: str = ""  # YYYY-MM-DD, taken from the request path on save
    timestamp: str = ""  # assigned by the server on save
    fields: dict[str, str] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def blank_null_values(cls, v):
        # A null value means the same as an empty one
        if isinstance(v, dict):
            return {key: "" if value is None else value for key, value in v.items()}
        return v


class EntrySummary(BaseModel):
    date: str
    working: str = ""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session

import entries
from db import create_db_and_tables, get_session
from errors import InvalidInputError, StorageError
from schemas import Entry, EntrySummary

APP_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    logger.info(f"Days Journal v{APP_VERSION} starting...")
    create_db_and_tables()
    logger.info("Database initialized")
    yield


# Create FastAPI app
app = FastAPI(title="Days Journal API", version=APP_VERSION, lifespan=lifespan)

# Add CORS middleware
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/entries/month/{year}/{month}", response_model=list[str])
def get_entries_by_month(year: int, month: int, session: Session = Depends(get_session)):
    """Get all entry dates for a month, in date order."""
    logger.info(f"Month request for {year}-{month}")

    try:
        return entries.get_entries_by_month(session, year, month)
    except InvalidInputError as e:
        logger.warning(f"Invalid month request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        logger.error(f"Error getting entries by month: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e


@app.get("/api/entries/month/{year}/{month}/summary", response_model=list[EntrySummary])
def get_entries_summary_by_month(
    year: int, month: int, session: Session = Depends(get_session)
):
    """Get entry dates for a month together with their working status."""
    logger.info(f"Month summary request for {year}-{month}")

    try:
        return entries.get_entries_summary_by_month(session, year, month)
    except InvalidInputError as e:
        logger.warning(f"Invalid month summary request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        logger.error(f"Error getting entries summary by month: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e


@app.get("/api/entries/{date}", response_model=Entry)
def get_entry(date: str, session: Session = Depends(get_session)):
    """Get the entry for a single day."""
    try:
        entry = entries.get_entry(session, date)
    except InvalidInputError as e:
        logger.warning(f"Invalid entry request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        logger.error(f"Error getting entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@app.post("/api/entries/{date}", response_model=Entry)
def save_entry(date: str, entry: Entry, session: Session = Depends(get_session)):
    """Create or overwrite the entry for a day. The date in the path wins over the body."""
    logger.info(f"Save request for {date}")

    try:
        saved = entries.save_entry(session, date, entry)
    except InvalidInputError as e:
        logger.warning(f"Invalid save request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        logger.error(f"Error saving entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    logger.info(f"Successfully saved entry {saved.date} at {saved.timestamp}")
    return saved


@app.delete("/api/entries/{date}", status_code=204)
def delete_entry(date: str, session: Session = Depends(get_session)):
    """Delete the entry for a day. Deleting a day without an entry succeeds too."""
    logger.info(f"Delete request for {date}")

    try:
        entries.delete_entry(session, date)
    except InvalidInputError as e:
        logger.warning(f"Invalid delete request: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StorageError as e:
        logger.error(f"Error deleting entry: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return Response(status_code=204)


@app.get("/api")
def root():
    """Root endpoint."""
    return {"message": "Days Journal API", "version": APP_VERSION, "docs": "/docs"}


def mount_frontend(app: FastAPI, directory: str) -> bool:
    """Serve the built frontend at / if ``directory`` exists. Must run after the API routes."""
    if not os.path.isdir(directory):
        logger.info(f"No frontend found at {directory}, serving API only")
        return False
    app.mount("/", StaticFiles(directory=directory, html=True), name="frontend")
    logger.info(f"Serving frontend from {directory}")
    return True


mount_frontend(app, os.getenv("FRONTEND_DIR", "./frontend/dist"))


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Server listening on :{port}")
    uvicorn.run("app:app", host=os.getenv("HOST", "0.0.0.0"), port=port)

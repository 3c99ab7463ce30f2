"""
FastAPI Web Application for Telemetry Logs

This module provides a REST API for decoding refrigeration unit logs and
retrieving trip statistics, normalized rows and chart-ready pages.
"""

import logging
from pathlib import Path
from typing import Dict, Optional
from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from mareelog import constants
from mareelog import session as session_builder
from mareelog.errors import LogFormatError
from mareelog.export import export_rows_csv
from mareelog.series import build_page_series
from mareelog.settings import load_settings, save_settings, settings_from_dict, settings_to_dict
from mareelog.telemetry import build_telemetry_records

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION SETUP
# ============================================================================

app = FastAPI(title="mareelog")

LOG_SUFFIXES = (".dat", ".csv", ".txt")


# ============================================================================
# DATASET DISCOVERY
# ============================================================================

def get_available_datasets(data_dir: Path = None) -> list:
    """
    Discover log files in the data directory.

    Returns:
        List of dictionaries with 'filename' and 'display_name' keys,
        sorted by filename.
    """
    data_dir = Path(data_dir or constants.DATA_DIR)
    datasets = []

    if not data_dir.exists():
        return datasets

    for file_path in data_dir.iterdir():
        if file_path.suffix.lower() not in LOG_SUFFIXES:
            continue
        datasets.append({
            "filename": file_path.name,
            "display_name": file_path.stem.replace("_", " "),
        })

    datasets.sort(key=lambda x: x["filename"])
    return datasets


# ============================================================================
# SESSION LOADING & CACHING
# ============================================================================

# Cache for built sessions (dataset_filename -> session)
session_cache: Dict[str, dict] = {}


def load_session(dataset_filename: str) -> dict:
    """
    Build and cache the session of one dataset.

    Raises:
        HTTPException: 404 if the dataset does not exist, 422 if the file
            cannot be parsed as a device log.
    """
    if dataset_filename in session_cache:
        return session_cache[dataset_filename]

    data_dir = Path(constants.DATA_DIR)
    data_file = data_dir / dataset_filename
    if data_file.parent.resolve() != data_dir.resolve() or not data_file.is_file():
        raise HTTPException(status_code=404, detail=f"Dataset file not found: {dataset_filename}")

    text = decode_or_422(data_file.read_bytes(), dataset_filename)
    session = build_or_422(text, dataset_filename)
    session_cache[dataset_filename] = session
    return session


def settings_file() -> Path:
    return Path(constants.DATA_DIR) / constants.SETTINGS_FILE.name


def decode_or_422(raw: bytes, name: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning("Rejected log %s: %s", name, exc)
        raise HTTPException(status_code=422, detail=f"Log is not valid UTF-8: {exc}") from exc


def build_or_422(text: str, name: str) -> dict:
    try:
        return session_builder.build_session(text, load_settings(settings_file()))
    except LogFormatError as exc:
        logger.warning("Rejected log %s: %s", name, exc)
        raise HTTPException(status_code=422, detail=f"Failed to parse log: {exc}") from exc


# ============================================================================
# API ROUTES - DATASETS
# ============================================================================

@app.get("/api/datasets")
def get_datasets():
    """List the log files available in the data directory."""
    return get_available_datasets()


# ============================================================================
# API ROUTES - DATA RETRIEVAL
# ============================================================================

@app.get("/api/session")
def get_session(dataset: str = Query(..., description="Dataset filename to load")):
    """
    Get the trip summary of a dataset.

    Returns:
        Summary dictionary: dates, duration, distances, active sensors,
        page count.
    """
    return load_session(dataset)["summary"]


@app.get("/api/rows")
def get_rows(dataset: str = Query(..., description="Dataset filename to load")):
    """Get every normalized row of a dataset, chronologically sorted."""
    return build_telemetry_records(load_session(dataset)["parsed"].rows)


@app.get("/api/pages/{page_number}")
def get_page(page_number: int, dataset: str = Query(..., description="Dataset filename to load")):
    """
    Get the chart series of one page (1-indexed).

    Raises:
        HTTPException: If page_number is out of range (status 404).
    """
    session = load_session(dataset)
    pages = session["pages"]
    if not 1 <= page_number <= len(pages):
        raise HTTPException(status_code=404, detail=f"Page {page_number} not found")

    return build_page_series(pages[page_number - 1], load_settings(settings_file()), session["parsed"].sensor_names)


@app.post("/api/parse")
async def parse_log(request: Request, name: Optional[str] = Query(None, description="Name used in log messages")):
    """
    Parse raw log text sent as the request body.

    Returns:
        Dictionary with summary and rows; nothing is cached.
    """
    name = name or "<request>"
    text = decode_or_422(await request.body(), name)
    session = build_or_422(text, name)
    return {
        "summary": session["summary"],
        "rows": build_telemetry_records(session["parsed"].rows),
    }


# ============================================================================
# API ROUTES - SETTINGS
# ============================================================================

@app.get("/api/settings")
def get_settings():
    """Get the chart settings stored in the data directory (defaults if none)."""
    return settings_to_dict(load_settings(settings_file()))


@app.put("/api/settings")
def put_settings(data: dict = Body(...)):
    """
    Replace the stored chart settings.

    Cached sessions are dropped: their pages were cut with the old page size.

    Raises:
        HTTPException: If the settings are invalid (status 422).
    """
    try:
        settings = settings_from_dict(data)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    save_settings(settings, settings_file())
    session_cache.clear()
    return settings_to_dict(settings)


# ============================================================================
# API ROUTES - EXPORT
# ============================================================================

@app.get("/api/export/csv")
def export_csv(dataset: str = Query(..., description="Dataset filename to export")):
    """
    Export the normalized rows of a dataset as CSV.

    Returns:
        PlainTextResponse: CSV file with Content-Disposition header for
        download, named after the dataset.
    """
    session = load_session(dataset)
    csv_body = export_rows_csv(session["parsed"].rows)
    headers = {"Content-Disposition": f"attachment; filename={Path(dataset).stem}.csv"}
    return PlainTextResponse(
        csv_body,
        media_type="text/csv",
        headers=headers
    )


# ============================================================================
# RUN INSTRUCTIONS
# ============================================================================
# Run with: uvicorn app:app --reload

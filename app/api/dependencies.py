"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

CSV_EXTENSIONS = (".csv", ".txt")

# Spreadsheet tools label semicolon files inconsistently.
CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "text/plain",
}

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept a budget CSV upload by extension or MIME type, within the size cap.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if not filename.endswith(CSV_EXTENSIONS) and content_type not in CSV_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"CSV files are limited to {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
        )

    return file

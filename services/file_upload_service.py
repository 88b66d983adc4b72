import logging
import os
import time
from typing import Optional

from fastapi import UploadFile

import config
from services.errors import ValidationError

logger = logging.getLogger(__name__)

CSV_MIME_TYPE = "text/csv"


def get_upload_dir() -> str:
    return config.UPLOAD_DIR


def validate_csv_upload(file: Optional[UploadFile]) -> UploadFile:
    """Reject missing or non-CSV uploads before anything touches the disk."""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type != CSV_MIME_TYPE and not file.filename.lower().endswith(".csv"):
        raise ValidationError("Only CSV files are allowed")
    return file


def save_uploaded_file(file: UploadFile, upload_dir: str) -> str:
    """
    Stage the upload as <epoch-ms>-<original-name> and return its path.
    """
    os.makedirs(upload_dir, exist_ok=True)
    original_name = os.path.basename(file.filename.replace("\\", "/"))
    file_path = os.path.join(upload_dir, f"{int(time.time() * 1000)}-{original_name}")

    with open(file_path, "wb") as f:
        f.write(file.file.read())

    logger.debug("Staged upload %s", file_path)
    return file_path


def remove_uploaded_file(file_path: str) -> None:
    if file_path and os.path.exists(file_path):
        os.remove(file_path)
        logger.debug("Removed staged upload %s", file_path)

import shutil
from pathlib import Path
from typing import BinaryIO
import logging

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


def resume_filename(original_name: str) -> str:
    """Base name of the client's filename, forced to end in .pdf"""
    name = Path(original_name.replace("\\", "/")).name
    if name in ("", ".", ".."):
        name = "unnamed_file"
    if not name.lower().endswith(".pdf"):
        name += ".pdf"
    return name


def save_resume(fileobj: BinaryIO, original_name: str, upload_dir: str) -> str:
    """Write an uploaded resume to disk and return the URL it is served under"""
    upload_path = Path(upload_dir)
    upload_path.mkdir(parents=True, exist_ok=True)

    filename = resume_filename(original_name)
    target = upload_path / filename
    with target.open("wb") as buffer:
        shutil.copyfileobj(fileobj, buffer)

    logger.info(f"Stored resume {filename}")
    return f"{UPLOAD_URL_PREFIX}/{filename}"

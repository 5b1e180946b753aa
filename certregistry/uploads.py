# certregistry/uploads.py
import logging
import os
import shutil
import time
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import UploadFile

from .settings import settings

log = logging.getLogger("uploads")


@contextmanager
def staged_upload(file: Optional[UploadFile], upload_dir: Optional[str] = None) -> Iterator[bytes]:
    """
    Spool an incoming upload to a temporary file and yield its bytes.

    The temporary file is removed however the block exits. Yields b"" when no
    file was sent so validation stays with the caller.
    """
    if file is None:
        yield b""
        return

    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)
    safe_name = f"{int(time.time())}_{uuid.uuid4().hex}_{os.path.basename(file.filename or 'upload')}"
    temp_path = os.path.join(upload_dir, safe_name)

    try:
        with open(temp_path, "wb") as out:
            shutil.copyfileobj(file.file, out)
        with open(temp_path, "rb") as fp:
            yield fp.read()
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)


def sweep_stale_uploads(max_age_minutes: int, upload_dir: Optional[str] = None) -> int:
    """Delete staged files older than max_age_minutes; returns how many were removed."""
    upload_dir = upload_dir or settings.UPLOAD_DIR
    if not os.path.isdir(upload_dir):
        return 0

    cutoff = time.time() - max_age_minutes * 60
    removed = 0
    for entry in os.scandir(upload_dir):
        if not entry.is_file():
            continue
        if entry.stat().st_mtime < cutoff:
            try:
                os.remove(entry.path)
            except FileNotFoundError:
                # a request finished with it meanwhile
                continue
            removed += 1
    if removed:
        log.info("Removed %d stale upload artifact(s) from %s", removed, upload_dir)
    return removed

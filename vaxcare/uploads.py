# vaxcare/uploads.py
import random
import time
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, UploadFile

from . import config


def upload_filename(original: str) -> str:
    """``<ms timestamp>_<random><ext>``; only the extension of the client name survives."""
    ext = Path(original or "").suffix
    return f"{int(time.time() * 1000)}_{random.randint(0, 1_000_000)}{ext}"


async def save_upload(upload: Optional[UploadFile]) -> Optional[str]:
    """Store an uploaded file under UPLOAD_DIR and return its public path."""
    if not upload or not upload.filename:
        return None
    blob = await upload.read()
    if len(blob) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    upload_dir = Path(config.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    name = upload_filename(upload.filename)
    (upload_dir / name).write_bytes(blob)
    return f"/uploads/{name}"

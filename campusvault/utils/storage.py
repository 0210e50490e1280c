"""Local disk storage for uploaded resource files."""
import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Iterable, Tuple

from campusvault.core.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
TEMP_SUFFIX = ".part"


def ensure_dir(path: Path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def file_extension(filename: str) -> str:
    """Lower-case extension including the dot ("" when there is none)"""
    return os.path.splitext(filename or "")[1].lower()


def is_allowed_extension(filename: str, allowed: Iterable[str]) -> bool:
    return file_extension(filename) in {ext.lower() for ext in allowed}


def save_to_temp(fileobj: BinaryIO, upload_dir: Path, max_size: int) -> Tuple[Path, int]:
    """
    Stream an upload into a temp file inside upload_dir.

    Returns (temp_path, size). Raises PayloadTooLargeError once more than
    max_size bytes have been read; the partial file is removed first.
    """
    upload_dir = ensure_dir(upload_dir)
    temp_path = upload_dir / f".upload-{uuid.uuid4().hex}{TEMP_SUFFIX}"
    size = 0
    try:
        with open(temp_path, "wb") as out:
            while True:
                chunk = fileobj.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_size:
                    raise PayloadTooLargeError(f"File exceeds the {max_size // (1024 * 1024)}MB limit")
                out.write(chunk)
    except Exception:
        remove_file(temp_path)
        raise
    return temp_path, size


def finalize(temp_path: Path, upload_dir: Path, stored_name: str) -> Path:
    """Rename a temp upload to its final <id><ext> name"""
    final_path = Path(upload_dir) / stored_name
    os.replace(temp_path, final_path)
    return final_path


def blob_path(upload_dir: Path, stored_name: str) -> Path:
    return Path(upload_dir) / stored_name


def remove_file(path: Path) -> bool:
    try:
        Path(path).unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Failed to remove file {path}: {e}")
        return False

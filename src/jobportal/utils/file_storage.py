"""File storage utilities for uploaded files."""

import os
from pathlib import Path

from jobportal.utils.slug import upload_filename


def resolve_upload_path(root: str | os.PathLike, name: str) -> Path | None:
    """
    Resolve a request path fragment to a file under the uploads directory.

    Args:
        root: Uploads directory
        name: Path below the uploads URL prefix (may contain sub-directories)

    Returns:
        Absolute path, or None if the fragment is empty or escapes ``root``

    Examples:
        >>> resolve_upload_path("/srv/uploads", "cv.pdf")
        PosixPath('/srv/uploads/cv.pdf')
        >>> resolve_upload_path("/srv/uploads", "../etc/passwd") is None
        True
    """
    if not name or "\x00" in name:
        return None
    base = Path(root).resolve()
    candidate = (base / name).resolve()
    if candidate == base or base not in candidate.parents:
        return None
    return candidate


def file_exists(root: str | os.PathLike, name: str) -> bool:
    """
    Check if an uploaded file exists.

    Args:
        root: Uploads directory
        name: Stored file name

    Returns:
        True if the file exists, False otherwise.
    """
    path = resolve_upload_path(root, name)
    return path is not None and path.is_file()


def save_upload(root: str | os.PathLike, original_name: str, content: bytes) -> str:
    """
    Save uploaded bytes, creating the uploads directory if needed.

    Args:
        root: Uploads directory
        original_name: File name supplied by the client
        content: File bytes

    Returns:
        The stored file name (relative to ``root``)

    Raises:
        OSError: If the file cannot be written.
    """
    stored = upload_filename(original_name)
    Path(root).mkdir(parents=True, exist_ok=True)
    with open(Path(root) / stored, "wb") as f:
        f.write(content)
    return stored


def delete_upload(root: str | os.PathLike, name: str) -> bool:
    """
    Remove an uploaded file if present.

    Returns:
        True if a file was deleted
    """
    path = resolve_upload_path(root, name)
    if path is None or not path.is_file():
        return False
    path.unlink()
    return True

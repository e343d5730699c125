"""Utility functions package."""

from jobportal.utils.file_storage import file_exists, resolve_upload_path, save_upload
from jobportal.utils.slug import create_slug, upload_filename

__all__ = ["create_slug", "file_exists", "resolve_upload_path", "save_upload", "upload_filename"]

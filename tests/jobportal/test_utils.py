"""Tests for utility functions."""

import re

from jobportal.database import Database
from jobportal.init_db import init_database
from jobportal.security import hash_password, verify_password
from jobportal.utils.file_storage import (
    delete_upload,
    file_exists,
    resolve_upload_path,
    save_upload,
)
from jobportal.utils.slug import create_slug, upload_filename


class TestSlugUtils:
    """Tests for slug generation utilities."""

    def test_create_slug_basic(self):
        assert create_slug("Jane Doe Resume") == "jane-doe-resume"

    def test_create_slug_with_special_chars(self):
        assert create_slug("Google, LLC") == "google-llc"

    def test_create_slug_unicode(self):
        assert create_slug("Café Résumé") == "cafe-resume"

    def test_upload_filename(self):
        assert re.fullmatch(r"[0-9a-f]{8}-jane-doe-cv\.pdf", upload_filename("Jane Doe CV.PDF"))

    def test_upload_filename_strips_directories(self):
        name = upload_filename("../../etc/passwd")
        assert "/" not in name and ".." not in name
        assert name.endswith("-passwd")

    def test_upload_filename_windows_path(self):
        assert upload_filename("C:\\Users\\ada\\cv.docx").endswith("-cv.docx")

    def test_upload_filename_unique(self):
        assert upload_filename("cv.pdf") != upload_filename("cv.pdf")

    def test_upload_filename_empty_stem(self):
        assert upload_filename(".pdf").endswith("-file.pdf")


class TestFileStorageUtils:
    """Tests for upload storage utilities."""

    def test_save_and_resolve(self, tmp_path):
        stored = save_upload(tmp_path / "uploads", "cv.pdf", b"%PDF")
        assert file_exists(tmp_path / "uploads", stored)
        assert resolve_upload_path(tmp_path / "uploads", stored).read_bytes() == b"%PDF"

    def test_resolve_rejects_escape(self, tmp_path):
        assert resolve_upload_path(tmp_path, "../outside.txt") is None
        assert resolve_upload_path(tmp_path, "a/../../outside.txt") is None
        assert resolve_upload_path(tmp_path, "") is None
        assert resolve_upload_path(tmp_path, ".") is None

    def test_resolve_nested(self, tmp_path):
        assert resolve_upload_path(tmp_path, "a/b.txt") == (tmp_path / "a" / "b.txt").resolve()

    def test_file_exists_missing(self, tmp_path):
        assert file_exists(tmp_path, "nope.pdf") is False

    def test_delete_upload(self, tmp_path):
        stored = save_upload(tmp_path, "cv.pdf", b"x")
        assert delete_upload(tmp_path, stored) is True
        assert delete_upload(tmp_path, stored) is False


class TestPasswords:
    def test_hash_and_verify(self):
        encoded = hash_password("s3cret-pass", iterations=1000)
        assert verify_password("s3cret-pass", encoded)
        assert not verify_password("wrong", encoded)

    def test_salted(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    def test_garbage_hash(self):
        assert verify_password("x", "not-a-hash") is False
        assert verify_password("x", "md5$1$abc$def") is False


class TestInitDb:
    def test_creates_tables(self):
        database = Database("sqlite://")
        tables = init_database(database)
        assert {"users", "jobs", "applications", "sessions"} <= set(tables)
        database.dispose()

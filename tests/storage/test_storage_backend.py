"""Unit tests for the upload storage helpers."""

import tempfile
from pathlib import Path

import pytest

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.storage import LocalStorage, generate_unique_filename, validate_upload

IMAGE_TYPES = ("image/jpeg", "image/png")


@pytest.fixture
def temp_storage():
    """Create a temporary directory for storage testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield LocalStorage(tmpdir), tmpdir


class TestLocalStorage:
    def test_upload_returns_key_not_path(self, temp_storage):
        storage, tmpdir = temp_storage

        result = storage.upload(b"content", "courses/abc/thumbnails", "thumb.png")

        assert result == "courses/abc/thumbnails/thumb.png"
        assert not result.startswith(tmpdir)
        assert (Path(tmpdir) / result).read_bytes() == b"content"
        assert storage.exists(result)

    def test_download_url_points_at_uploads_mount(self, temp_storage):
        storage, _ = temp_storage

        url = storage.download_url("lessons/1/media/video.mp4")

        assert url == f"{settings.BACKEND_URL}/uploads/lessons/1/media/video.mp4"

    def test_exists_is_false_for_missing_file(self, temp_storage):
        storage, _ = temp_storage

        assert storage.exists("nothing/here.png") is False


class TestLocalStoragePathTraversal:
    def test_exists_rejects_path_traversal(self, temp_storage):
        storage, _ = temp_storage

        with pytest.raises(ValueError, match="Path traversal"):
            storage.exists("../../../etc/passwd")

    def test_exists_rejects_absolute_path(self, temp_storage):
        storage, _ = temp_storage

        with pytest.raises(ValueError, match="Path traversal"):
            storage.exists("/etc/passwd")


class TestValidateUpload:
    def test_accepts_allowed_type_within_limit(self):
        validate_upload(b"x" * 10, "image/png", IMAGE_TYPES, 100)

    def test_rejects_disallowed_type(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            validate_upload(b"x", "application/pdf", IMAGE_TYPES, 100)

    def test_rejects_missing_content_type(self):
        with pytest.raises(ValidationError):
            validate_upload(b"x", None, IMAGE_TYPES, 100)

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_upload(b"", "image/png", IMAGE_TYPES, 100)

    def test_rejects_oversized_file(self):
        with pytest.raises(ValidationError, match="maximum size"):
            validate_upload(b"x" * 101, "image/png", IMAGE_TYPES, 100)


def test_generate_unique_filename_keeps_extension():
    first = generate_unique_filename("photo.JPG")
    second = generate_unique_filename("photo.JPG")

    assert first.endswith(".JPG")
    assert first != second


def test_upload_rejects_folder_escaping_base_dir(temp_storage):
    storage, _ = temp_storage

    with pytest.raises(ValueError, match="Path traversal"):
        storage.upload(b"x", "../outside", "evil.png")

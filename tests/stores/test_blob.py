# tests/stores/test_blob.py
"""Tests for the local filesystem blob store."""

import os

import pytest

from atomforge.exceptions import UploadError
from atomforge.stores import LocalBlobStore


@pytest.fixture
def blobs(temp_dir):
    return LocalBlobStore(os.path.join(temp_dir, "bundles"), base_url="https://cdn.example.com/")


class TestLocalBlobStore:
    def test_upload_writes_file_and_metadata(self, blobs, temp_dir):
        blobs.upload("pong/latest.js", b"// bundle", "application/javascript", "no-cache")

        path = os.path.join(temp_dir, "bundles", "pong", "latest.js")
        with open(path, "rb") as f:
            assert f.read() == b"// bundle"
        assert blobs.metadata("pong/latest.js") == {
            "content_type": "application/javascript",
            "cache_control": "no-cache",
        }

    def test_overwrite_by_default(self, blobs):
        blobs.upload("pong/latest.js", b"one", "application/javascript", "no-cache")
        blobs.upload("pong/latest.js", b"two", "application/javascript", "no-cache")
        assert (blobs.root / "pong" / "latest.js").read_bytes() == b"two"

    def test_no_overwrite(self, blobs):
        blobs.upload("pong/build_1.js", b"one", "application/javascript", "max-age=60")
        with pytest.raises(UploadError):
            blobs.upload(
                "pong/build_1.js", b"two", "application/javascript", "max-age=60", overwrite=False
            )

    def test_rejects_escaping_paths(self, blobs):
        with pytest.raises(UploadError):
            blobs.upload("../outside.js", b"x", "application/javascript", "no-cache")
        with pytest.raises(UploadError):
            blobs.upload("/etc/passwd", b"x", "text/plain", "no-cache")

    def test_public_url(self, blobs):
        assert blobs.public_url("pong/latest.js") == "https://cdn.example.com/pong/latest.js"

    def test_default_url_is_file_uri(self, temp_dir):
        blobs = LocalBlobStore(os.path.join(temp_dir, "out"))
        assert blobs.public_url("pong/latest.js").startswith("file://")
        assert blobs.public_url("pong/latest.js").endswith("/out/pong/latest.js")

    def test_metadata_missing(self, blobs):
        assert blobs.metadata("nothing.js") is None

"""
Tests for uploads: validation rules in uploads.py and the /api/upload route.
"""
import errno
import inspect
from pathlib import Path

import pytest

from marketplace.api import routes_upload
from marketplace.services import uploads
from marketplace.services.uploads import UploadRejected, validate_upload

from tests.fixtures.marketplace_fixtures import image_bytes


@pytest.fixture()
def upload_dir(settings, monkeypatch, tmp_path):
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    return target


class TestValidateUpload:
    """Tests for validate_upload."""

    def test_valid_image(self):
        validate_upload(image_bytes(800, 600), "image/png")

    def test_empty_file_rejected(self):
        with pytest.raises(UploadRejected) as exc:
            validate_upload(b"", "image/png")
        assert exc.value.status_code == 400

    def test_too_large_rejected_with_413(self, settings, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 1024)
        with pytest.raises(UploadRejected) as exc:
            validate_upload(b"x" * 2048, "image/png")
        assert exc.value.status_code == 413

    def test_image_below_minimum_size_rejected(self):
        with pytest.raises(UploadRejected, match="Image too small"):
            validate_upload(image_bytes(399, 300), "image/png")

    def test_gif_not_allowed_for_images(self):
        with pytest.raises(UploadRejected, match="Invalid file type"):
            validate_upload(image_bytes(), "image/gif")

    def test_corrupt_image_rejected(self):
        with pytest.raises(UploadRejected, match="not a valid image"):
            validate_upload(b"definitely not a png", "image/png")

    def test_document_types(self):
        validate_upload(b"%PDF-1.4 fake", "application/pdf", kind="document")
        validate_upload(b"a,b\n1,2\n", "text/csv", kind="document")
        with pytest.raises(UploadRejected):
            validate_upload(b"<html>", "text/html", kind="document")


class TestUploadRoute:
    """POST /api/upload"""

    def test_stores_image_and_returns_url(self, client, auth_headers, upload_dir):
        resp = client.post(
            "/api/upload",
            files={"file": ("photo.png", image_bytes(), "image/png")},
            data={"type": "image"},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text

        url = resp.json()["url"]
        assert url.startswith("/uploads/")
        stored = upload_dir / Path(url).name
        assert stored.exists()
        assert stored.suffix == ".png"

    def test_document_upload(self, client, auth_headers, upload_dir):
        resp = client.post(
            "/api/upload",
            files={"file": ("deck.pdf", b"%PDF-1.4 fake", "application/pdf")},
            data={"type": "document"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["url"].endswith(".pdf")

    def test_requires_auth(self, client, upload_dir):
        resp = client.post("/api/upload", files={"file": ("photo.png", image_bytes(), "image/png")})
        assert resp.status_code == 401

    def test_missing_file_returns_400(self, client, auth_headers, upload_dir):
        resp = client.post("/api/upload", data={"type": "image"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_small_image_returns_400(self, client, auth_headers, upload_dir):
        resp = client.post(
            "/api/upload",
            files={"file": ("tiny.png", image_bytes(100, 100), "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert "Image too small" in resp.json()["detail"]

    def test_too_large_returns_413(self, client, auth_headers, upload_dir, settings, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 1024)
        resp = client.post(
            "/api/upload",
            files={"file": ("photo.png", b"x" * 4096, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 413

    def test_oversized_upload_rejected_before_reading(self, client, auth_headers, upload_dir, settings, monkeypatch):
        def never_called(*args, **kwargs):
            raise AssertionError("oversized body should not reach validation")

        monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 1024)
        monkeypatch.setattr(routes_upload, "validate_upload", never_called)
        resp = client.post(
            "/api/upload",
            files={"file": ("photo.png", b"x" * 4096, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 413
        assert resp.json()["detail"].startswith("File too large")
        assert not upload_dir.exists() or not any(upload_dir.iterdir())

    def test_route_runs_in_threadpool(self):
        # file IO and Pillow decoding are blocking
        assert not inspect.iscoroutinefunction(routes_upload.upload_file)

    def test_disk_full_returns_507(self, client, auth_headers, upload_dir, monkeypatch):
        def full_disk(*args, **kwargs):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(uploads.Path, "write_bytes", full_disk)
        resp = client.post(
            "/api/upload",
            files={"file": ("photo.png", image_bytes(), "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 507

"""
Tests for Media API

Tests uploads, size and type checks, URL optimization and deletion with
the ImageKit client replaced by a mock.
"""
from config.settings import settings
from src.realty.media.imagekit import ImageKitError

UPLOADED = {
    "fileId": "file-123",
    "url": "https://ik.imagekit.io/demo/realty/images/a.jpg",
    "fileType": "image",
    "width": 800,
    "height": 600,
}


class TestUpload:
    """Tests for POST /api/media/upload."""

    def test_upload_image(self, client, admin_headers, media_client):
        media_client.upload_file.return_value = UPLOADED

        response = client.post(
            "/api/media/upload",
            files={"file": ("a.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "secure_url": UPLOADED["url"],
            "public_id": "file-123",
            "format": "image",
            "resource_type": "image",
            "file_size": len(b"jpeg-bytes"),
            "width": 800,
            "height": 600,
        }
        media_client.upload_file.assert_called_once_with(
            b"jpeg-bytes", "a.jpg", f"{settings.media_folder}/images"
        )

    def test_videos_go_to_video_folder(self, client, admin_headers, media_client):
        media_client.upload_file.return_value = {"fileId": "v1", "url": "https://x/v.mp4", "fileType": "non-image"}

        response = client.post(
            "/api/media/upload",
            files={"file": ("tour.mp4", b"mp4-bytes", "video/mp4")},
            headers=admin_headers,
        )

        assert response.json()["resource_type"] == "video"
        assert media_client.upload_file.call_args[0][2] == f"{settings.media_folder}/videos"

    def test_no_file(self, client, admin_headers):
        response = client.post("/api/media/upload", headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_invalid_type(self, client, admin_headers, media_client):
        response = client.post(
            "/api/media/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid file type. Only images and videos are allowed."}
        media_client.upload_file.assert_not_called()

    def test_image_too_large(self, client, admin_headers, media_client, monkeypatch):
        monkeypatch.setattr(settings, "max_image_size_mb", 1)

        response = client.post(
            "/api/media/upload",
            files={"file": ("big.png", b"x" * (1024 * 1024 + 1), "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 413
        assert response.json()["error"] == (
            "File too large. File size: 1.00MB. Maximum allowed: 1MB for images. "
            "Please compress your file or use a smaller file."
        )
        media_client.upload_file.assert_not_called()

    def test_imagekit_failure(self, client, admin_headers, media_client):
        media_client.upload_file.side_effect = ImageKitError("Quota exceeded", status_code=403)

        response = client.post(
            "/api/media/upload",
            files={"file": ("a.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=admin_headers,
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Upload failed", "error": "Quota exceeded"}

    def test_admin_only(self, client, user_headers):
        response = client.post(
            "/api/media/upload",
            files={"file": ("a.jpg", b"jpeg-bytes", "image/jpeg")},
            headers=user_headers,
        )

        assert response.status_code == 403


class TestUploadMultiple:
    """Tests for POST /api/media/upload/multiple."""

    def test_upload_several(self, client, admin_headers, media_client):
        media_client.upload_file.return_value = UPLOADED

        response = client.post(
            "/api/media/upload/multiple",
            files=[
                ("files", ("a.jpg", b"one", "image/jpeg")),
                ("files", ("b.webp", b"two", "image/webp")),
            ],
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [u["file_size"] for u in body["uploads"]] == [3, 3]
        assert media_client.upload_file.call_count == 2

    def test_oversized_file_blocks_batch(self, client, admin_headers, media_client, monkeypatch):
        monkeypatch.setattr(settings, "max_image_size_mb", 1)

        response = client.post(
            "/api/media/upload/multiple",
            files=[
                ("files", ("ok.jpg", b"small", "image/jpeg")),
                ("files", ("huge.jpg", b"x" * (2 * 1024 * 1024), "image/jpeg")),
            ],
            headers=admin_headers,
        )

        assert response.status_code == 413
        body = response.json()
        assert body["error"].startswith("File too large: huge.jpg (2.00MB). Maximum allowed: 1MB for image.")
        assert body["invalidFiles"] == [{"name": "huge.jpg", "size": 2 * 1024 * 1024, "maxSize": 1024 * 1024}]
        media_client.upload_file.assert_not_called()

    def test_too_many_files(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "max_files_per_upload", 1)

        response = client.post(
            "/api/media/upload/multiple",
            files=[
                ("files", ("a.jpg", b"1", "image/jpeg")),
                ("files", ("b.jpg", b"2", "image/jpeg")),
            ],
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_no_files(self, client, admin_headers):
        response = client.post("/api/media/upload/multiple", headers=admin_headers)

        assert response.json() == {"error": "No files provided"}

    def test_failure(self, client, admin_headers, media_client):
        media_client.upload_file.side_effect = ImageKitError("timeout")

        response = client.post(
            "/api/media/upload/multiple",
            files=[("files", ("a.jpg", b"1", "image/jpeg"))],
            headers=admin_headers,
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Multiple upload failed"


class TestOptimize:
    """Tests for POST /api/media/optimize."""

    def test_optimized_url(self, client, admin_headers):
        response = client.post(
            "/api/media/optimize",
            json={"url": "https://ik.imagekit.io/demo/a.jpg", "width": 400, "quality": 80},
            headers=admin_headers,
        )

        assert response.json() == {
            "original_url": "https://ik.imagekit.io/demo/a.jpg",
            "optimized_url": "https://ik.imagekit.io/demo/a.jpg?tr=w-400,q-80,f-auto",
            "transformations": {"width": 400, "height": None, "quality": 80, "format": "auto", "crop": None},
        }

    def test_url_required(self, client, admin_headers):
        response = client.post("/api/media/optimize", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}


class TestDeleteMedia:
    """Tests for DELETE /api/media/{file_id}."""

    def test_delete(self, client, admin_headers, media_client):
        media_client.delete_file.return_value = {"success": True, "fileId": "file-123"}

        response = client.delete("/api/media/file-123", headers=admin_headers)

        assert response.json() == {"success": True, "message": "File deleted successfully", "fileId": "file-123"}
        media_client.delete_file.assert_called_once_with("file-123")

    def test_already_deleted(self, client, admin_headers, media_client):
        media_client.delete_file.return_value = {
            "success": True, "fileId": "gone", "message": "File not found (already deleted)",
        }

        response = client.delete("/api/media/gone", headers=admin_headers)

        assert response.json()["message"] == "File not found (may have been already deleted)"

    def test_failure(self, client, admin_headers, media_client):
        media_client.delete_file.side_effect = ImageKitError("server error", status_code=500)

        response = client.delete("/api/media/file-123", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete file"}

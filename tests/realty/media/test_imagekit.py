"""
Tests for ImageKit Media Client

Tests uploads, deletions, transformation URLs and media id collection.
"""
from unittest.mock import MagicMock

import pytest
import requests

from src.realty.media.imagekit import (
    ImageKitClient,
    ImageKitError,
    collect_media_file_ids,
    optimized_url,
)


def make_response(status_code=200, json_body=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def client():
    imagekit = ImageKitClient(
        private_key="private_test",
        upload_url="https://upload.example.com/api/v1/files/upload",
        api_url="https://api.example.com/v1/",
        timeout=5,
    )
    imagekit.session = MagicMock()
    return imagekit


class TestUpload:
    """Tests for file uploads."""

    def test_upload_posts_file_with_unique_name(self, client):
        client.session.post.return_value = make_response(
            json_body={"fileId": "f1", "url": "https://ik.imagekit.io/demo/a.jpg", "fileType": "image"}
        )

        result = client.upload_file(b"jpeg-bytes", "a.jpg", "realty/images")

        assert result["fileId"] == "f1"
        args, kwargs = client.session.post.call_args
        assert args[0] == "https://upload.example.com/api/v1/files/upload"
        assert kwargs["files"]["file"] == ("a.jpg", b"jpeg-bytes")
        assert kwargs["data"]["folder"] == "realty/images"
        assert kwargs["data"]["useUniqueFileName"] == "true"
        assert kwargs["timeout"] == 5

    def test_rejected_upload_raises(self, client):
        client.session.post.return_value = make_response(403, {"message": "Your account cannot be authenticated."})

        with pytest.raises(ImageKitError) as exc_info:
            client.upload_file(b"x", "a.jpg", "realty/images")

        assert exc_info.value.status_code == 403
        assert "cannot be authenticated" in str(exc_info.value)

    def test_network_error_raises(self, client):
        client.session.post.side_effect = requests.ConnectionError("down")

        with pytest.raises(ImageKitError):
            client.upload_file(b"x", "a.jpg", "realty/images")


class TestDelete:
    """Tests for file deletion."""

    def test_delete_calls_files_endpoint(self, client):
        client.session.delete.return_value = make_response(204)

        result = client.delete_file("f1")

        assert result == {"success": True, "fileId": "f1"}
        assert client.session.delete.call_args[0][0] == "https://api.example.com/v1/files/f1"

    def test_missing_file_counts_as_deleted(self, client):
        client.session.delete.return_value = make_response(404, {"message": "The requested file does not exist."})
        assert client.delete_file("gone")["success"] is True

        client.session.delete.return_value = make_response(400, {"message": "File not found"})
        assert client.delete_file("gone")["success"] is True

    def test_delete_files_collects_failures(self, client):
        """Batch deletion records failures instead of raising."""
        client.session.delete.side_effect = [
            make_response(204),
            make_response(500, text="boom"),
        ]

        summary = client.delete_files(["ok", "bad"])

        assert summary["total"] == 2
        assert summary["successful"] == 1
        assert summary["failed"] == 1
        assert summary["results"][1] == {"success": False, "fileId": "bad", "error": "boom"}


class TestOptimizedUrl:
    """Tests for transformation URLs."""

    def test_transformations_in_order(self):
        url = optimized_url("https://ik.imagekit.io/demo/a.jpg", width=400, height=300, crop="maintain_ratio")

        assert url == "https://ik.imagekit.io/demo/a.jpg?tr=w-400,h-300,c-maintain_ratio,q-auto,f-auto"

    def test_existing_query_string(self):
        url = optimized_url("https://ik.imagekit.io/demo/a.jpg?v=2", quality=80, format=None)

        assert url == "https://ik.imagekit.io/demo/a.jpg?v=2&tr=q-80"

    def test_no_transformations(self):
        assert optimized_url("https://x/a.jpg", quality=None, format=None) == "https://x/a.jpg"


def test_collect_media_file_ids():
    payload = {
        "images": [{"fileId": "img-1"}, {"public_id": "img-2"}, "https://plain/url.jpg"],
        "videos": [{"fileId": "vid-1"}],
        "floorPlan": {"fileId": "plan-1"},
    }

    assert collect_media_file_ids(payload) == ["img-1", "img-2", "vid-1", "plan-1"]
    assert collect_media_file_ids({"images": "not-a-list"}) == []

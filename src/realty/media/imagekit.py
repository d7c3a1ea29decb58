"""
ImageKit Media Client

Uploads and deletes listing media through the ImageKit REST API and builds
transformation URLs for stored images.
"""
from typing import Any, Dict, Iterable, List, Optional

import requests

from config.settings import settings
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)


class ImageKitError(Exception):
    """Raised when ImageKit rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ImageKitClient:
    """
    Thin client for the ImageKit upload and file management endpoints.

    Requests are authenticated with HTTP basic auth using the private key as
    the username and an empty password.
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        upload_url: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the client.

        Args:
            private_key: Override the configured private key (for testing)
            upload_url: Override the upload endpoint
            api_url: Override the file management API base URL
            timeout: Request timeout in seconds
        """
        self.private_key = private_key if private_key is not None else settings.imagekit_private_key
        self.upload_url = upload_url or settings.imagekit_upload_url
        self.api_url = (api_url or settings.imagekit_api_url).rstrip("/")
        self.timeout = timeout or settings.imagekit_timeout_seconds
        self.session = requests.Session()
        self.session.auth = (self.private_key or "", "")

    def upload_file(self, content: bytes, file_name: str, folder: str) -> Dict[str, Any]:
        """
        Upload a file under a unique name.

        Args:
            content: Raw file bytes
            file_name: Original file name
            folder: Destination folder

        Returns:
            ImageKit upload result (fileId, url, fileType, width, height, ...)

        Raises:
            ImageKitError: If the upload fails
        """
        logger.info("imagekit_upload_started", file_name=file_name, folder=folder, size=len(content))
        try:
            response = self.session.post(
                self.upload_url,
                files={"file": (file_name, content)},
                data={
                    "fileName": file_name,
                    "folder": folder,
                    "useUniqueFileName": "true",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("imagekit_upload_failed", file_name=file_name, error=str(e), error_type=type(e).__name__)
            raise ImageKitError(str(e)) from e

        if not response.ok:
            message = self._error_message(response)
            logger.error("imagekit_upload_rejected", file_name=file_name, status_code=response.status_code, error=message)
            raise ImageKitError(message, status_code=response.status_code)

        result = response.json()
        logger.info("imagekit_upload_successful", file_id=result.get("fileId"), file_name=file_name)
        return result

    def delete_file(self, file_id: str) -> Dict[str, Any]:
        """
        Delete a file. A file ImageKit no longer knows counts as deleted.

        Args:
            file_id: ImageKit file ID

        Returns:
            Dictionary with success flag, fileId and optional message

        Raises:
            ImageKitError: If the deletion fails for any other reason
        """
        try:
            response = self.session.delete(f"{self.api_url}/files/{file_id}", timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("imagekit_delete_failed", file_id=file_id, error=str(e))
            raise ImageKitError(str(e)) from e

        if response.status_code == 404:
            logger.info("imagekit_file_already_deleted", file_id=file_id)
            return {"success": True, "fileId": file_id, "message": "File not found (already deleted)"}

        if not response.ok:
            message = self._error_message(response)
            if "not found" in message.lower():
                return {"success": True, "fileId": file_id, "message": "File not found (already deleted)"}
            logger.error("imagekit_delete_rejected", file_id=file_id, status_code=response.status_code, error=message)
            raise ImageKitError(message, status_code=response.status_code)

        logger.info("imagekit_file_deleted", file_id=file_id)
        return {"success": True, "fileId": file_id}

    def delete_files(self, file_ids: Iterable[str]) -> Dict[str, Any]:
        """
        Delete several files one by one; failures are recorded, not raised.

        Args:
            file_ids: ImageKit file IDs

        Returns:
            Dictionary with total, successful, failed counts and per-file results
        """
        results = []
        for file_id in file_ids:
            try:
                results.append(self.delete_file(file_id))
            except ImageKitError as e:
                results.append({"success": False, "fileId": file_id, "error": str(e)})

        successful = sum(1 for result in results if result["success"])
        summary = {
            "total": len(results),
            "successful": successful,
            "failed": len(results) - successful,
            "results": results,
        }
        if summary["failed"]:
            logger.warning("imagekit_delete_partial_failure", failed=summary["failed"], total=summary["total"])
        return summary

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)


_client: Optional[ImageKitClient] = None


def get_imagekit_client() -> ImageKitClient:
    """
    Get the shared ImageKit client instance.
    """
    global _client
    if _client is None:
        _client = ImageKitClient()
    return _client


def optimized_url(
    url: str,
    width: Optional[Any] = None,
    height: Optional[Any] = None,
    quality: Optional[Any] = "auto",
    format: Optional[str] = "auto",
    crop: Optional[str] = None,
) -> str:
    """
    Append an ImageKit ``tr=`` transformation to a media URL.

    Args:
        url: Original ImageKit URL
        width: Width in pixels
        height: Height in pixels
        quality: Quality (``auto`` or a number)
        format: Output format (``auto``, ``webp``, ...)
        crop: Crop mode (``maintain_ratio``, ``force``, ...)

    Returns:
        URL with transformations, or the original URL when none apply
    """
    transformations = []
    if width:
        transformations.append(f"w-{width}")
    if height:
        transformations.append(f"h-{height}")
    if crop:
        transformations.append(f"c-{crop}")
    if quality:
        transformations.append(f"q-{quality}")
    if format:
        transformations.append(f"f-{format}")

    if not transformations:
        return url

    separator = "&" if "?" in url else "?"
    return f"{url}{separator}tr={','.join(transformations)}"


def _media_id(item: Any) -> Optional[str]:
    if isinstance(item, dict):
        return item.get("fileId") or item.get("public_id")
    return None


def collect_media_file_ids(payload: Dict[str, Any]) -> List[str]:
    """
    File IDs of the images, videos and floor plan referenced by a listing.

    Bare URL strings carry no file ID and are skipped.

    Args:
        payload: Decoded listing payload

    Returns:
        List of ImageKit file IDs
    """
    file_ids = []
    for key in ("images", "videos"):
        items = payload.get(key)
        if not isinstance(items, list):
            continue
        for item in items:
            file_id = _media_id(item)
            if file_id:
                file_ids.append(file_id)

    floor_plan_id = _media_id(payload.get("floorPlan"))
    if floor_plan_id:
        file_ids.append(floor_plan_id)

    return file_ids

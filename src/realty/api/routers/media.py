"""
Media Router

Admin endpoints that upload listing images and videos to ImageKit, build
optimized image URLs and delete stored files.
"""
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from config.settings import settings
from src.realty.api.auth import TokenUser, require_admin
from src.realty.api.dependencies import get_media_client
from src.realty.api.schemas import OptimizeRequest, UploadResult
from src.realty.media.imagekit import ImageKitClient, ImageKitError, optimized_url
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/media", tags=["media"])

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|webp|mp4|mov|avi|mkv|webm")
MB = 1024 * 1024


def _is_video(upload: UploadFile) -> bool:
    return (upload.content_type or "").startswith("video/")


def _check_type(upload: UploadFile) -> None:
    name_ok = ALLOWED_TYPES.search((upload.filename or "").lower())
    mime_ok = ALLOWED_TYPES.search(upload.content_type or "")
    if not (name_ok and mime_ok):
        raise HTTPException(status_code=400, detail="Invalid file type. Only images and videos are allowed.")


def _max_bytes(is_video: bool) -> int:
    return (settings.max_video_size_mb if is_video else settings.max_image_size_mb) * MB


def _folder(is_video: bool) -> str:
    return f"{settings.media_folder}/{'videos' if is_video else 'images'}"


def _upload(media: ImageKitClient, upload: UploadFile, content: bytes) -> UploadResult:
    is_video = _is_video(upload)
    result = media.upload_file(content, upload.filename, _folder(is_video))
    return UploadResult(
        secure_url=result.get("url"),
        public_id=result.get("fileId"),
        format=result.get("fileType"),
        resource_type="video" if is_video else "image",
        file_size=len(content),
        width=result.get("width"),
        height=result.get("height"),
    )


def _upload_failed(message: str, error: ImageKitError) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"success": False, "message": message, "error": str(error) or "Failed to upload file"},
    )


@router.post("/upload")
def upload_file(
    file: Optional[UploadFile] = File(None),
    admin: TokenUser = Depends(require_admin),
    media: ImageKitClient = Depends(get_media_client),
):
    """
    Upload one image or video.

    Images are limited to 10 MB and videos to 100 MB by default.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")
    _check_type(file)

    content = file.file.read()
    is_video = _is_video(file)
    max_bytes = _max_bytes(is_video)
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=(
                f"File too large. File size: {len(content) / MB:.2f}MB. "
                f"Maximum allowed: {max_bytes // MB}MB for {'videos' if is_video else 'images'}. "
                "Please compress your file or use a smaller file."
            ),
        )

    try:
        result = _upload(media, file, content)
    except ImageKitError as e:
        raise _upload_failed("Upload failed", e) from e

    return {"success": True, **result.model_dump()}


@router.post("/upload/multiple")
def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    admin: TokenUser = Depends(require_admin),
    media: ImageKitClient = Depends(get_media_client),
):
    """
    Upload several files. Nothing is uploaded when any file is oversized.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")
    if len(files) > settings.max_files_per_upload:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. Maximum is {settings.max_files_per_upload} per upload.",
        )

    contents = []
    invalid_files: List[Dict[str, Any]] = []
    for upload in files:
        _check_type(upload)
        content = upload.file.read()
        contents.append(content)

        is_video = _is_video(upload)
        max_bytes = _max_bytes(is_video)
        if len(content) > max_bytes:
            invalid_files.append({
                "name": upload.filename,
                "size": len(content),
                "maxSize": max_bytes,
                "type": "video" if is_video else "image",
            })

    if invalid_files:
        first = invalid_files[0]
        raise HTTPException(
            status_code=413,
            detail={
                "error": (
                    f"File too large: {first['name']} ({first['size'] / MB:.2f}MB). "
                    f"Maximum allowed: {first['maxSize'] // MB}MB for {first['type']}. "
                    "Please compress your file or use a smaller file."
                ),
                "invalidFiles": [
                    {"name": f["name"], "size": f["size"], "maxSize": f["maxSize"]}
                    for f in invalid_files
                ],
            },
        )

    try:
        uploads = [_upload(media, upload, content) for upload, content in zip(files, contents)]
    except ImageKitError as e:
        raise _upload_failed("Multiple upload failed", e) from e

    logger.info("media_uploaded", count=len(uploads), admin_id=admin.id)
    return {"success": True, "uploads": uploads}


@router.post("/optimize")
def optimize_url(body: OptimizeRequest, admin: TokenUser = Depends(require_admin)):
    """
    Build an ImageKit transformation URL for an existing file.
    """
    if not body.url:
        raise HTTPException(status_code=400, detail="URL is required")

    return {
        "original_url": body.url,
        "optimized_url": optimized_url(
            body.url,
            width=body.width,
            height=body.height,
            quality=body.quality,
            format=body.format,
            crop=body.crop,
        ),
        "transformations": {
            "width": body.width,
            "height": body.height,
            "quality": body.quality,
            "format": body.format,
            "crop": body.crop,
        },
    }


@router.delete("/{file_id}")
def delete_file(
    file_id: str,
    admin: TokenUser = Depends(require_admin),
    media: ImageKitClient = Depends(get_media_client),
):
    try:
        result = media.delete_file(file_id)
    except ImageKitError as e:
        raise HTTPException(status_code=500, detail="Failed to delete file") from e

    if result.get("message"):
        return {"success": True, "message": "File not found (may have been already deleted)", "fileId": file_id}
    return {"success": True, "message": "File deleted successfully", "fileId": file_id}

import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ... import config
from ...schemas import ImageUploadResponse
from ..deps import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/upload", response_model=ImageUploadResponse)
async def upload_logo(
    file: UploadFile = File(...),
    user_id: int = Depends(get_current_user_id),
):
    """
    Stores a logo image under the uploads directory and returns the URL it is
    served from.
    """
    if file.content_type not in config.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only JPG, PNG, GIF, and SVG files are allowed",
        )

    try:
        content = await file.read()
        if len(content) > config.MAX_UPLOAD_BYTES:
            limit_mb = config.MAX_UPLOAD_BYTES / (1024 * 1024)
            raise HTTPException(
                status_code=413,
                detail=f"File size limit has been reached ({limit_mb:g}MB)",
            )

        upload_dir = Path(config.UPLOAD_DIR)
        upload_dir.mkdir(parents=True, exist_ok=True)
        # the extension follows the checked content type, never the client's file name
        file_name = f"logo_{uuid.uuid4().hex}{config.IMAGE_EXTENSIONS[file.content_type]}"
        (upload_dir / file_name).write_bytes(content)
    except OSError as e:
        logger.error("Failed to store upload from user %s: %s", user_id, e)
        raise HTTPException(status_code=500, detail="Failed to upload file")
    finally:
        await file.close()

    logger.info("Stored logo %s for user %s", file_name, user_id)
    return ImageUploadResponse(file_url=f"{config.UPLOADS_ROUTE}/{file_name}")

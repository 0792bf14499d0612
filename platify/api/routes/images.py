"""Image upload endpoint."""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from platify.api.dependencies import get_image_ingestor
from platify.services.image_ingestor import ImageIngestor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/images", tags=["images"])


@router.post("/upload")
async def upload_image(
    image: Optional[UploadFile] = File(None, description="Image file (JPEG, PNG, GIF or WebP)"),
    ingestor: ImageIngestor = Depends(get_image_ingestor),
) -> Dict[str, str]:
    """
    Store an image sent from the recipe editor.

    The multipart field must be named `image`. The stored type is decided by
    the file's content, never by its declared type or extension.
    """
    logger.info(
        "Route /api/images/upload called",
        extra={
            "route": "/api/images/upload",
            "params": {
                "upload_filename": image.filename if image else None,
                "declared_type": image.content_type if image else None,
            },
        },
    )
    try:
        url = await ingestor.ingest(image)
    finally:
        if image is not None:
            await image.close()
    return {"url": url}

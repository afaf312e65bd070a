"""
Image upload endpoint. Stored files are served under /uploads.
"""

from fastapi import APIRouter, File, Request, UploadFile

from event_buddy.schemas.event import UploadResponse
from event_buddy.services.upload_service import store_image

router = APIRouter(tags=["Uploads"])


@router.post("/upload-image", response_model=UploadResponse)
async def upload_image_endpoint(request: Request, image: UploadFile = File(...)):
    """Multipart upload of one `image` field, image/* only."""
    filename = await store_image(image)
    image_url = str(request.url_for("uploads", path=filename))
    return UploadResponse(image_url=image_url, filename=filename)

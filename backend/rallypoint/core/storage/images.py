import io
import logging
import os
import uuid

import boto3
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from rallypoint.config import settings
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_FORMATS = ["jpg", "jpeg", "png", "gif", "webp"]
MAX_IMAGE_SIZE = 10 * 1024 * 1024


def _read_image(image_data: bytes) -> tuple[Image.Image, str]:
    """Open image data with Pillow and return the image and its format."""
    try:
        img = Image.open(io.BytesIO(image_data))
    except UnidentifiedImageError:
        raise CustomHTTPException(400, "Uploaded file is not a valid image")

    fmt = (img.format or "").lower()
    if fmt not in ALLOWED_IMAGE_FORMATS:
        raise CustomHTTPException(
            400,
            f"Unsupported image format. Allowed formats: {ALLOWED_IMAGE_FORMATS}",
        )
    return img, fmt


def public_url(key: str) -> str:
    if settings.S3_PUBLIC_URL:
        return f"{settings.S3_PUBLIC_URL.rstrip('/')}/{key}"
    return f"https://{settings.S3_BUCKET}.s3.{settings.S3_REGION}.amazonaws.com/{key}"


async def upload_image(upload: UploadFile, upload_to: str) -> str:
    """
    Validate an uploaded image and store it in S3.

    :param upload: The uploaded file
    :param upload_to: Folder below S3_BASE_PATH
    :return: Public URL of the stored image
    """
    if not settings.storage_enabled:
        raise CustomHTTPException(503, "Image uploads are not configured")

    image_data = await upload.read()
    if len(image_data) > MAX_IMAGE_SIZE:
        raise CustomHTTPException(
            400, f"Image size exceeds maximum allowed size of {MAX_IMAGE_SIZE} bytes"
        )
    _, fmt = _read_image(image_data)

    key = os.path.join(settings.S3_BASE_PATH, upload_to, f"{uuid.uuid4()}.{fmt}")
    s3_client = boto3.client(
        "s3",
        region_name=settings.S3_REGION,
        aws_access_key_id=settings.S3_ACCESS_KEY,
        aws_secret_access_key=settings.S3_SECRET_KEY,
    )
    s3_client.upload_fileobj(
        io.BytesIO(image_data),
        settings.S3_BUCKET,
        key,
        ExtraArgs={"ContentType": f"image/{fmt}"},
    )
    logger.info(f"Uploaded {upload.filename} to s3://{settings.S3_BUCKET}/{key}")
    return public_url(key)

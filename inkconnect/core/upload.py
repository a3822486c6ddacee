"""
inkconnect/core/upload.py

Handles image uploads by:
- Validating size and MIME type using content sniffing
- Compressing images before storage (Pillow)
- Storing objects in S3 under structured key prefixes
"""

import io
import logging
from urllib.parse import urlparse

import boto3
import filetype
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, PartialCredentialsError
from fastapi import UploadFile, status
from PIL import Image, UnidentifiedImageError

from inkconnect.core.config import settings
from inkconnect.core.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

# Image formats accepted for artwork, profile pictures and the hero background
ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_DIMENSION = 1920
COMPRESSION_QUALITY = 80

try:
    s3_client = boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        region_name=settings.AWS_REGION,
    )
    logger.info("Boto3 S3 client initialized successfully.")
except (NoCredentialsError, PartialCredentialsError):
    logger.error("AWS credentials not found or incomplete in environment settings.")
    s3_client = None
except BotoCoreError as e:
    logger.error(f"Failed to initialize Boto3 S3 client: {e}")
    s3_client = None


async def read_image_upload(file: UploadFile, max_size: int = MAX_FILE_SIZE) -> tuple[bytes, str]:
    """
    Read an uploaded image fully and validate it.

    Returns:
        tuple[bytes, str]: Raw content and the MIME type detected from the content.

    Raises:
        ValidationError: 413 when too large, 400 when empty, 415 when not a supported image.
    """
    data = await file.read()
    size = len(data)

    if size > max_size:
        logger.warning(
            f"Upload rejected: File '{file.filename}' size ({size} bytes) exceeds limit ({max_size} bytes)."
        )
        raise ValidationError(
            f"File size exceeds the limit of {max_size // 1024 // 1024} MB.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    if size == 0:
        logger.warning(f"Upload rejected: Received an empty file '{file.filename}'.")
        raise ValidationError("Received an empty file.")

    kind = filetype.guess(data[:261])
    detected_mime = kind.mime if kind else "unknown"
    if detected_mime not in ALLOWED_IMAGE_TYPES:
        logger.warning(
            f"Upload rejected: Invalid file type '{detected_mime}' for file '{file.filename}'."
        )
        raise ValidationError(
            f"Unsupported file type: '{detected_mime}'. Allowed types: "
            f"{', '.join(ext.upper() for ext in ALLOWED_IMAGE_TYPES.values())}.",
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
    return data, detected_mime


def compress_image(
    data: bytes,
    mime: str,
    max_dimension: int = MAX_DIMENSION,
    quality: int = COMPRESSION_QUALITY,
) -> bytes:
    """
    Downscale so the longest side is at most `max_dimension` and re-encode in the
    same format. Animated GIFs and images that would grow are returned unchanged.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
            if getattr(img, "is_animated", False):
                return data

            img.thumbnail((max_dimension, max_dimension))
            buffer = io.BytesIO()
            save_kwargs: dict[str, object] = {"optimize": True}
            if mime in ("image/jpeg", "image/webp"):
                save_kwargs["quality"] = quality
                if img.mode not in ("RGB", "L") and mime == "image/jpeg":
                    img = img.convert("RGB")
            img.save(buffer, format=image_format, **save_kwargs)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"[UPLOAD] Could not decode image for compression: {e}")
        raise ValidationError("Uploaded file is not a readable image.")

    compressed = buffer.getvalue()
    if len(compressed) >= len(data):
        return data
    logger.debug(f"[UPLOAD] Compressed image from {len(data)} to {len(compressed)} bytes")
    return compressed


def upload_bytes_to_s3(data: bytes, s3_key: str, content_type: str) -> str:
    """
    Store raw bytes in the configured bucket.

    Returns:
        str: Public HTTPS URL of the stored object.

    Raises:
        UpstreamError: If S3 is not configured or rejects the upload.
    """
    if not s3_client:
        logger.error("S3 client is not available. Check AWS configuration and credentials.")
        raise UpstreamError("Object storage is not configured or unavailable.")

    logger.info(
        f"Uploading {len(data)} bytes ({content_type}) as S3 key '{s3_key}' to bucket '{settings.AWS_S3_BUCKET}'"
    )
    try:
        s3_client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=s3_key,
            Body=data,
            ContentType=content_type,
        )
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code")
        logger.error(f"S3 ClientError uploading '{s3_key}': {error_code} - {e}")
        raise UpstreamError(f"Object storage upload failed: {error_code}")
    except BotoCoreError as e:
        logger.error(f"Unexpected error during S3 upload for '{s3_key}': {e}", exc_info=True)
        raise UpstreamError("Object storage upload failed.")

    file_url = f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_REGION}.amazonaws.com/{s3_key}"
    logger.debug(f"Generated file URL: {file_url}")
    return file_url


def delete_from_s3(file_url: str) -> bool:
    """Remove a stored object by its URL. Failures are logged and reported as False."""
    s3_key = get_s3_key_from_url(file_url)
    if not s3_client or not s3_key:
        return False
    try:
        s3_client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=s3_key)
        logger.info(f"Deleted S3 object: {s3_key}")
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Failed to delete S3 object '{s3_key}': {e}")
        return False


def get_s3_key_from_url(s3_url: str) -> str | None:
    """Extracts the object key from a standard S3 HTTPS URL."""
    if not s3_url:
        return None
    parsed_url = urlparse(s3_url)
    if not parsed_url.netloc.endswith("amazonaws.com"):
        logger.warning(f"URL '{s3_url}' does not look like a standard S3 URL.")
    key = parsed_url.path.lstrip("/")
    return key if key else None

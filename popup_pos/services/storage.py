from __future__ import annotations

import logging
from uuid import uuid4

from popup_pos.core.config import (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    S3_BUCKET,
    S3_ENDPOINT_URL,
    S3_PUBLIC_BASE_URL,
    S3_REGION,
    UPLOAD_MAX_BYTES,
)
from popup_pos.core.errors import InvalidContentTypeError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def _get_s3_client():
    import boto3

    kwargs = {"region_name": S3_REGION}
    if S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = S3_ENDPOINT_URL
    if AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = AWS_SECRET_ACCESS_KEY
    return boto3.client("s3", **kwargs)


def _public_base_url() -> str:
    if S3_PUBLIC_BASE_URL:
        return S3_PUBLIC_BASE_URL
    return f"https://{S3_BUCKET}.s3.{S3_REGION}.amazonaws.com"


def validate_upload(data: bytes, content_type: str | None) -> str:
    """Return the file extension for an acceptable image upload."""
    normalized = (content_type or "").split(";")[0].strip().lower()
    extension = ALLOWED_CONTENT_TYPES.get(normalized)
    if extension is None:
        raise InvalidContentTypeError("Invalid file type. Only JPEG, PNG, GIF, and WebP are allowed.")
    if not data:
        raise ValidationError("No file provided")
    if len(data) > UPLOAD_MAX_BYTES:
        raise ValidationError(f"File exceeds {UPLOAD_MAX_BYTES // (1024 * 1024)}MB")
    return extension


def upload_image(organization_id: int, data: bytes, content_type: str | None) -> str:
    extension = validate_upload(data, content_type)
    if not S3_BUCKET:
        raise RuntimeError("S3_BUCKET is not configured.")

    object_key = f"{organization_id}/{uuid4()}.{extension}"
    _get_s3_client().put_object(
        Bucket=S3_BUCKET,
        Key=object_key,
        Body=data,
        ContentType=content_type.split(";")[0].strip().lower(),
    )
    logger.info("[CATALOG] image uploaded organization_id=%s key=%s bytes=%s", organization_id, object_key, len(data))
    return f"{_public_base_url()}/{object_key}"

"""
Upload validation for images sent to OCR.

Two layers guard against content-type spoofing:
1. Magic byte detection (file signature)
2. Pillow structure verification
"""

import io
import logging

from PIL import Image

logger = logging.getLogger(__name__)


# Magic byte signatures of the formats the Read API accepts
IMAGE_MAGIC_BYTES = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
    b"RIFF": "image/webp",  # needs further validation
}


class ValidationError(Exception):
    """Raised when file validation fails."""

    pass


def detect_image_type(content: bytes) -> str | None:
    """
    Detect the image MIME type from magic bytes.

    Args:
        content: Leading bytes of the file.

    Returns:
        Detected MIME type, or None if the bytes are not a supported image.
    """
    for signature, mime_type in IMAGE_MAGIC_BYTES.items():
        if content.startswith(signature):
            # RIFF could be WebP or other formats
            if signature == b"RIFF" and content[8:12] != b"WEBP":
                continue
            return mime_type
    return None


def verify_with_pil(content: bytes) -> bool:
    """Check that Pillow can parse the image structure."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        return True
    except Exception as e:
        logger.debug(f"PIL validation failed: {e}")
        return False


def validate_image(content: bytes, max_size_mb: int = 20) -> str:
    """
    Validate uploaded image bytes.

    Args:
        content: Full file content.
        max_size_mb: Maximum file size in MB.

    Returns:
        Detected MIME type of the image.

    Raises:
        ValidationError: If the content fails any check.
    """
    if not content:
        raise ValidationError("File is empty")

    max_size_bytes = max_size_mb * 1024 * 1024
    if len(content) > max_size_bytes:
        raise ValidationError(
            f"File too large: {len(content) / 1024 / 1024:.1f}MB "
            f"(max {max_size_mb}MB)"
        )

    mime_type = detect_image_type(content[:32])
    if mime_type is None:
        raise ValidationError("Unknown or unsupported file type")

    if not verify_with_pil(content):
        raise ValidationError("File is not a valid image")

    logger.info(f"Image validated: {mime_type}, {len(content) / 1024:.1f}KB")
    return mime_type

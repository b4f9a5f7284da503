"""Utility modules for the OCR application."""

from app.utils.file_validation import (
    ValidationError,
    detect_image_type,
    validate_image,
)

__all__ = [
    "ValidationError",
    "detect_image_type",
    "validate_image",
]

"""Application-wide constants.

This module centralizes magic numbers and configuration constants
that are used across multiple modules. For environment-specific
configuration, see config.py.
"""

# =============================================================================
# File Size Limits
# =============================================================================

# Course thumbnail upload (5 MB)
THUMBNAIL_MAX_SIZE_BYTES: int = 5 * 1024 * 1024

# =============================================================================
# Pagination Defaults
# =============================================================================

# Default page size for list endpoints
DEFAULT_PAGE_SIZE: int = 20

# Maximum page size to prevent abuse
MAX_PAGE_SIZE: int = 100

# =============================================================================
# Content Limits
# =============================================================================

REVIEW_MIN_RATING: int = 1
REVIEW_MAX_RATING: int = 5
REVIEW_COMMENT_MAX_LENGTH: int = 1000

APPLICATION_MOTIVATION_MAX_LENGTH: int = 500
APPEAL_REASON_MAX_LENGTH: int = 1000

# =============================================================================
# Allowed MIME Types
# =============================================================================

# Thumbnail images
THUMBNAIL_ALLOWED_MIME_TYPES: tuple[str, ...] = (
    "image/png",
    "image/jpeg",
    "image/webp",
)

# Lesson media, keyed by the lesson field the upload is stored in
LESSON_MEDIA_ALLOWED_MIME_TYPES: dict[str, tuple[str, ...]] = {
    "video_url": ("video/mp4", "video/webm", "video/quicktime"),
    "file_url": ("application/pdf",),
}

# =============================================================================
# Identifier formats
# =============================================================================

# SC-20240131-00042
CERTIFICATE_NUMBER_PATTERN: str = r"^[A-Z]+-\d{8}-\d{5}$"

# PAY-20240131-9F3A1C2B
PAYMENT_REFERENCE_PATTERN: str = r"^PAY-\d{8}-[0-9A-F]{8}$"

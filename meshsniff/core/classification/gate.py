from typing import Optional

from meshsniff.config.settings import Settings

# Content types servers use when they don't know (or won't say) what a body is
GENERIC_CONTENT_TYPES = (
    "application/octet-stream",
    "application/binary",
    "application/x-unknown-content-type",
)


def should_deep_scan(config: Settings, content_type: Optional[str], size_bytes: Optional[int]) -> bool:
    """
    Decides whether a response with an inconclusive URL is worth a ranged
    prefix fetch. Needs deep scan enabled, a generic binary content type and
    a known size in (0, MAX_DEEP_SCAN_BYTES].
    """
    if not config.DEEP_SCAN_ENABLED:
        return False

    lowered = (content_type or "").lower()
    if not any(generic in lowered for generic in GENERIC_CONTENT_TYPES):
        return False

    if size_bytes is None or size_bytes <= 0:
        return False
    return size_bytes <= config.MAX_DEEP_SCAN_BYTES

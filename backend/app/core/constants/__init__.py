"""
Constants package — re-exports from domain-specific modules.

Usage:
    from app.core.constants.status import BlockStatus
    from app.core.constants.events import DOMAIN_CREATED
    # or import everything:
    from app.core.constants import events, status
"""

from app.core.constants import events, status
from app.core.constants.status import (
    UptimeStatus,
    BlockStatus,
    CdnStatus,
    IndexStatus,
    CHECKER_BLOCKED,
    FEED_MESSAGE_TYPE,
    IMPORT_HEADER_ROW_OFFSET,
    SKIP_ALREADY_EXISTS,
    SKIP_DUPLICATE_IN_BATCH,
    DEFAULT_BRAND_COLOR,
)

__all__ = [
    "events",
    "status",
    "UptimeStatus",
    "BlockStatus",
    "CdnStatus",
    "IndexStatus",
    "CHECKER_BLOCKED",
    "FEED_MESSAGE_TYPE",
    "IMPORT_HEADER_ROW_OFFSET",
    "SKIP_ALREADY_EXISTS",
    "SKIP_DUPLICATE_IN_BATCH",
    "DEFAULT_BRAND_COLOR",
]

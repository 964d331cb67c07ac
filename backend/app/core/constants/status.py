"""
Status facet values stored on domain records, plus import constants.
"""
from enum import Enum


class UptimeStatus(str, Enum):
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"


class BlockStatus(str, Enum):
    BLOCKED = "blocked"
    NOT_BLOCKED = "not_blocked"
    UNKNOWN = "unknown"


class CdnStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"


class IndexStatus(str, Enum):
    INDEXED = "indexed"
    NOT_INDEXED = "not_indexed"
    UNKNOWN = "unknown"


# Observation value from the checker that means "blocked"; anything else is accessible
CHECKER_BLOCKED: str = "blocked"

# Upstream feed message type carrying block/unblock events
FEED_MESSAGE_TYPE: str = "blocked_domain"

# User-facing import row number = list index + this offset (1-based + header row)
IMPORT_HEADER_ROW_OFFSET: int = 2

# Skip reasons reported by the dedup index
SKIP_ALREADY_EXISTS: str = "Already exists"
SKIP_DUPLICATE_IN_BATCH: str = "Duplicate in batch"

DEFAULT_BRAND_COLOR: str = "#3B82F6"

# Audit log actions
LOG_ACTION_ADD: str = "add"
LOG_ACTION_DELETE: str = "delete"

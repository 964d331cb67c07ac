"""
Real-time event names pushed to dashboard subscribers.

Subscribers receive every event as {"event": <name>, "data": <payload>}.
"""

DOMAIN_CREATED: str = "domain:created"
DOMAIN_UPDATED: str = "domain:updated"
DOMAIN_DELETED: str = "domain:deleted"

# Single block-status change, emitted immediately for blocked alerts
DOMAIN_BLOCK_STATUS_UPDATED: str = "domain:nawala-updated"

# Coalesced block-status changes: {"updates": [...], "count": n}
DOMAINS_BULK_BLOCK_STATUS_UPDATED: str = "domains:bulk-nawala-updated"

DOMAINS_BULK_IMPORTED: str = "domains:bulk-imported"
DOMAINS_BULK_DELETED: str = "domains:bulk-deleted"
DOMAINS_BULK_CHECK_COMPLETE: str = "domains:bulk-check-complete"

PONG: str = "pong"

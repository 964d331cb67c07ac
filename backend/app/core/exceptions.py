"""
Custom exception hierarchy for the brand/domain dashboard.

Exceptions are categorized as:
- RetryableError: Transient faults (storage unreachable, upstream feed down)
- NonRetryableError: Permanent faults (bad input, unknown ids, malformed feed data)

Every exception carries the HTTP status class it maps to and a stable code,
so route handlers can let them propagate and the registered exception
handler renders a structured failure.
"""
from typing import List, Optional


class DashboardException(Exception):
    """Base exception for the dashboard backend."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code, "message": self.message}


# ============================================
# RETRYABLE ERRORS - Transient, may succeed later
# ============================================
class RetryableError(DashboardException):
    """
    Base class for errors where retrying might succeed:
    - Storage layer unreachable
    - Upstream checker feed disconnected or slow
    """
    pass


class PersistenceError(RetryableError):
    """
    Storage layer unreachable or rejected a write for a reason other
    than a uniqueness violation.
    """
    code = "PERSISTENCE_FAULT"

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(message)


class UpstreamTransportError(RetryableError):
    """Connection to the external checking system failed."""
    status_code = 502
    code = "UPSTREAM_TRANSPORT_FAULT"


class CheckerTimeoutError(UpstreamTransportError):
    """The external checking system did not answer in time."""
    status_code = 504
    code = "UPSTREAM_TIMEOUT"


# ============================================
# NON-RETRYABLE ERRORS - Retrying won't help
# ============================================
class NonRetryableError(DashboardException):
    """
    Base class for permanent errors:
    - Validation failures
    - Unknown records
    - Malformed upstream messages
    """
    pass


class ValidationError(NonRetryableError):
    """Invalid input data."""
    status_code = 400
    code = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field is empty or absent."""
    code = "MISSING_FIELD"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field.capitalize()} is required")


class InvalidFormatError(ValidationError):
    """A field is present but not in an acceptable shape."""
    code = "INVALID_FORMAT"


class UnknownBrandError(ValidationError):
    """A free-text brand label matched no brand name or code."""
    code = "UNKNOWN_BRAND"

    def __init__(self, label: str, known_labels: Optional[List[str]] = None):
        self.label = label
        self.known_labels = known_labels or []
        sample = ", ".join(self.known_labels[:5])
        message = f"Brand '{label}' not found"
        if sample:
            message += f". Available brands: {sample}..."
        super().__init__(message)


class DuplicateKeyError(ValidationError):
    """A unique key (domain key, brand name/code) is already taken."""
    code = "DUPLICATE_KEY"

    def __init__(self, key: str, reason: str = "Already exists"):
        self.key = key
        self.reason = reason
        super().__init__(f"{key}: {reason}")


class BrandInUseError(ValidationError):
    """Brand still has domain records attached; deletion is refused."""
    code = "BRAND_IN_USE"

    def __init__(self, domain_count: int):
        self.domain_count = domain_count
        super().__init__(
            f"Cannot delete brand. It has {domain_count} domain(s) associated with it. "
            "Please reassign or delete those domains first."
        )


class NotFoundError(NonRetryableError):
    """Requested record does not exist."""
    status_code = 404
    code = "NOT_FOUND"


class DomainNotFoundError(NotFoundError):
    """Domain record not found."""

    def __init__(self, domain_id: str = ""):
        self.domain_id = domain_id
        super().__init__("Domain not found")


class BrandNotFoundError(NotFoundError):
    """Brand record not found."""

    def __init__(self, brand_id: str = ""):
        self.brand_id = brand_id
        super().__init__("Brand not found")


class ImportInProgressError(NonRetryableError):
    """Another bulk import run holds the import lock."""
    status_code = 409
    code = "IMPORT_IN_PROGRESS"

    def __init__(self, message: str = "Another bulk import is already running"):
        super().__init__(message)


class UpstreamProtocolError(NonRetryableError):
    """The checking system sent a message we cannot interpret."""
    status_code = 502
    code = "UPSTREAM_PROTOCOL_FAULT"


class AuthenticationError(NonRetryableError):
    """Caller could not be authenticated."""
    status_code = 401
    code = "UNAUTHORIZED"

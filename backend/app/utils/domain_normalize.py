"""
Domain normalization — raw user/CSV input to canonical domain keys.

Canonical form:
- trimmed and lowercased
- no http:// / https:// scheme, no leading "www."
- query string and fragment removed, path kept, trailing "/" dropped
- base host (text before the first "/") contains a "." and is at least 3 chars
Version: 1.0.0
"""
import logging
import re
from typing import Any, Dict, Optional

from app.core.exceptions import InvalidFormatError, MissingFieldError

logger = logging.getLogger("domain_normalize")

_SCHEME_RE = re.compile(r"^https?://")
_WWW_PREFIX = "www."
_MIN_HOST_LENGTH = 3


def normalize_domain(raw: Optional[str]) -> str:
    """
    Convert raw text into a canonical domain key.

    Raises:
        MissingFieldError: input is empty or whitespace only
        InvalidFormatError: the base host is not a plausible hostname
    """
    text = (raw or "").strip().lower()
    if not text:
        raise MissingFieldError("domain")

    text = _SCHEME_RE.sub("", text)
    if text.startswith(_WWW_PREFIX):
        text = text[len(_WWW_PREFIX):]

    for marker in ("?", "#"):
        text = text.split(marker, 1)[0]
    text = text.rstrip("/")

    host = text.split("/", 1)[0]
    if "." not in host or len(host) < _MIN_HOST_LENGTH:
        raise InvalidFormatError("Invalid domain format")

    return text


def normalize_import_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize one import row into {domain, brand, note}.

    Brand labels are only trimmed here; matching against known brands
    happens in the brand resolver.
    """
    domain = normalize_domain(_as_text(row.get("domain")))

    brand = _as_text(row.get("brand")).strip()
    if not brand:
        raise MissingFieldError("brand")

    note = _as_text(row.get("note")).strip()
    return {"domain": domain, "brand": brand, "note": note}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)

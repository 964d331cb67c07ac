import logging
import re
from typing import Any, Dict, Iterable, List

from app.core.exceptions import UnknownBrandError

logger = logging.getLogger("brand_resolver")

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


class BrandResolver:
    """
    Case-insensitive lookup from a brand label (name or code) to a brand id.

    Built once per import from a snapshot of the brands table. A second
    attempt strips every non-alphanumeric character, so "acme-co" matches
    a brand coded "ACMECO".
    """

    def __init__(self, lookup: Dict[str, str], labels: List[str]) -> None:
        self._lookup = lookup
        self._labels = labels

    @classmethod
    def from_brands(cls, brands: Iterable[Dict[str, Any]]) -> "BrandResolver":
        lookup: Dict[str, str] = {}
        labels: List[str] = []
        for brand in brands:
            brand_id = brand.get("id")
            name = (brand.get("name") or "").upper()
            code = (brand.get("code") or "").upper()
            if not brand_id:
                continue
            if name:
                lookup.setdefault(name, brand_id)
                labels.append(name)
            if code:
                lookup.setdefault(code, brand_id)
        return cls(lookup, labels)

    @property
    def known_labels(self) -> List[str]:
        return list(self._labels)

    def resolve(self, label: str) -> str:
        """
        Return the brand id for a label.

        Raises:
            UnknownBrandError: no name or code matches, even after stripping
        """
        candidate = (label or "").strip().upper()
        brand_id = self._lookup.get(candidate)
        if brand_id:
            return brand_id

        stripped = _NON_ALNUM_RE.sub("", candidate)
        if stripped:
            brand_id = self._lookup.get(stripped)
            if brand_id:
                return brand_id

        raise UnknownBrandError(label, self._labels)

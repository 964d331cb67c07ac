"""
Dedup index — one-pass duplicate detection for a batch of canonical keys.

Holds the persisted keys (snapshot taken when the batch starts) separately
from keys claimed earlier in the same batch so the skip reason can say
which one it was.
"""
from typing import Iterable, Set

from app.core.constants.status import SKIP_ALREADY_EXISTS, SKIP_DUPLICATE_IN_BATCH
from app.core.exceptions import DuplicateKeyError


class DedupIndex:

    def __init__(self, existing_keys: Iterable[str] = ()) -> None:
        self._existing: Set[str] = set(existing_keys)
        self._claimed: Set[str] = set()

    def claim(self, key: str) -> None:
        """
        Reserve a key for this batch.

        Raises:
            DuplicateKeyError: key is already persisted or already claimed
        """
        if key in self._existing:
            raise DuplicateKeyError(key, SKIP_ALREADY_EXISTS)
        if key in self._claimed:
            raise DuplicateKeyError(key, SKIP_DUPLICATE_IN_BATCH)
        self._claimed.add(key)

    def release(self, key: str) -> None:
        """Give back a claim for a row that failed after claiming."""
        self._claimed.discard(key)

    def __contains__(self, key: str) -> bool:
        return key in self._existing or key in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)

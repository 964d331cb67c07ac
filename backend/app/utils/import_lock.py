"""
Import lock — optional Redis lock serializing bulk imports.

Two overlapping imports can both read the same persisted-key snapshot;
the unique index still rejects the loser's rows, which then surface as
per-row failures. Enabling IMPORT_LOCK_ENABLED makes the second import
fail fast with ImportInProgressError instead.
Version: 1.0.0
"""
import logging
import uuid
from typing import Optional

import redis

from app.core.config import settings
from app.core.exceptions import ImportInProgressError

logger = logging.getLogger(__name__)

IMPORT_LOCK_KEY = "domain_import_lock"


def _get_redis() -> redis.Redis:
    """Create a Redis client from the configured URL."""
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


class ImportLock:
    """SET NX EX lock held for the duration of one bulk import."""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        ttl_seconds: Optional[int] = None,
        key: str = IMPORT_LOCK_KEY,
    ) -> None:
        self._client = client
        self._ttl = ttl_seconds or settings.import_lock_ttl_seconds
        self._key = key
        self._token: Optional[str] = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = _get_redis()
        return self._client

    def acquire(self, owner: str = "unknown") -> str:
        """
        Take the lock or raise.

        Raises:
            ImportInProgressError: another import holds the lock
        """
        token = f"{owner}:{uuid.uuid4().hex}"
        acquired = self.client.set(self._key, token, nx=True, ex=self._ttl)
        if not acquired:
            holder = self.client.get(self._key)
            logger.info(f"Import lock HELD: holder={holder}, rejecting owner={owner}")
            raise ImportInProgressError()

        logger.info(f"Import lock ACQUIRED: owner={owner}, ttl={self._ttl}s")
        self._token = token
        return token

    def release(self) -> None:
        """Release the lock if this instance still owns it."""
        if self._token is None:
            return
        try:
            holder = self.client.get(self._key)
            if holder == self._token:
                self.client.delete(self._key)
                logger.info("Import lock RELEASED")
        except redis.RedisError as e:
            logger.warning(f"Import lock release failed (expires in {self._ttl}s): {e}")
        finally:
            self._token = None

    def __enter__(self) -> "ImportLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

from collections.abc import Callable
from datetime import UTC
from datetime import datetime
from datetime import timedelta
from typing import Protocol

from sqlalchemy import select
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from commitscrape.core.observability import get_logger
from commitscrape.models import CacheEntry

CACHE_KEY_PREFIX = "commitscrape:"

logger = get_logger(__name__)


def cache_key(username: str) -> str:
    """Derive the cache key for a resolved username."""

    return CACHE_KEY_PREFIX + username


def utc_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class CacheStore(Protocol):
    """Key-value store with per-key expiry."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None: ...


class SqlCacheStore:
    """CacheStore backed by the `cache_entries` table.

    Expiry is evaluated on read; an expired row is indistinguishable from a
    missing one and is overwritten by the next `set`.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def get(self, key: str) -> str | None:
        with self._session_factory() as session:
            return session.scalar(
                select(CacheEntry.value).where(
                    CacheEntry.key == key,
                    CacheEntry.expires_at > self._clock(),
                )
            )

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._session_factory() as session:
            session.merge(CacheEntry(key=key, value=value, expires_at=expires_at))
            session.commit()

    def ping(self) -> None:
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))


class CacheGateway:
    """Fragment cache that never fails the request it serves.

    Read errors degrade to a miss, write errors are logged and dropped.
    """

    def __init__(self, store: CacheStore, ttl_seconds: int) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> str | None:
        try:
            value = self.store.get(key)
        except SQLAlchemyError:
            logger.warning("Cache read failed for %s, treating as miss", key)
            return None

        return value or None

    def set(self, key: str, fragment: str, ttl_seconds: int | None = None) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.ttl_seconds

        try:
            self.store.set(key, fragment, ttl_seconds)
        except SQLAlchemyError:
            logger.exception("Cache write failed for %s", key)

from dataclasses import dataclass

import httpx
from sqlalchemy import Engine

from commitscrape.cache import CacheGateway
from commitscrape.cache import SqlCacheStore
from commitscrape.db import Base
from commitscrape.db import create_db_engine
from commitscrape.db import create_session_factory
from commitscrape.services.calendar_service import CalendarService
from commitscrape.settings import Settings


@dataclass(frozen=True)
class AppContext:
    """Everything a request needs, built once at startup."""

    settings: Settings
    engine: Engine
    store: SqlCacheStore
    http_client: httpx.Client
    calendar_service: CalendarService

    def close(self) -> None:
        self.http_client.close()
        self.engine.dispose()


def build_context(
    settings: Settings,
    engine: Engine | None = None,
    http_client: httpx.Client | None = None,
) -> AppContext:
    if engine is None:
        engine = create_db_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    if http_client is None:
        http_client = httpx.Client(timeout=settings.fetch_timeout_seconds)

    store = SqlCacheStore(create_session_factory(engine))
    cache = CacheGateway(store, ttl_seconds=settings.expire)
    return AppContext(
        settings=settings,
        engine=engine,
        store=store,
        http_client=http_client,
        calendar_service=CalendarService(settings, cache, http_client),
    )

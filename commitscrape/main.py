from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from commitscrape.api.routes.calendar import router as calendar_router
from commitscrape.context import build_context
from commitscrape.core.observability import get_logger
from commitscrape.core.observability import init_observability
from commitscrape.services.calendar_service import CalendarRequestError
from commitscrape.settings import Settings

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    http_client: httpx.Client | None = None,
) -> FastAPI:
    """Build the application and its context.

    `engine` and `http_client` may be injected, otherwise they are created
    from settings.
    """

    if settings is None:
        settings = Settings()
    init_observability(settings)

    context = build_context(settings, engine=engine, http_client=http_client)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        context.close()

    app = FastAPI(title="commitscrape", lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(CalendarRequestError)
    async def calendar_request_error_handler(
        _: Request, exc: CalendarRequestError
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"err": exc.message})

    app.include_router(calendar_router)
    return app


def run() -> None:
    settings = Settings()
    app = create_app(settings)
    logger.info("Listening for commitscrape requests on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()

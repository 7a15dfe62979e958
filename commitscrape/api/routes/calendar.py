from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError

from commitscrape.api.schemas.calendar import CalendarResponse
from commitscrape.api.schemas.calendar import ErrorResponse
from commitscrape.context import AppContext
from commitscrape.core.observability import get_logger
from commitscrape.services.calendar_service import CacheUnavailableError
from commitscrape.services.calendar_service import UpstreamMarkupError
from commitscrape.services.calendar_service import parse_columns
from commitscrape.services.grid import MarkupParseError


router = APIRouter()
logger = get_logger(__name__)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


@router.get(
    "/",
    response_model=CalendarResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def get_calendar(
    columns: str | None = Query(default=None),
    user: str | None = Query(default=None),
    context: AppContext = Depends(get_context),
) -> CalendarResponse:
    """Return the contribution calendar fragment, optionally trimmed."""

    logger.info("Calendar request user=%s columns=%s", user or "-", columns or "-")
    requested_columns = parse_columns(columns)

    try:
        html = context.calendar_service.get_calendar(user, requested_columns)
    except MarkupParseError as exc:
        logger.error("Upstream calendar markup rejected: %s", exc)
        raise UpstreamMarkupError from exc

    return CalendarResponse(html=html)


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/health/cache")
def health_cache(context: AppContext = Depends(get_context)) -> dict[str, str]:
    """Check that the cache store answers a trivial query."""

    try:
        context.store.ping()
    except SQLAlchemyError as exc:
        raise CacheUnavailableError from exc

    return {"status": "ok"}

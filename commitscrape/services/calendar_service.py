import re

import httpx

from commitscrape.cache import CacheGateway
from commitscrape.cache import cache_key
from commitscrape.core.observability import get_logger
from commitscrape.github_scraper import build_contributions_url
from commitscrape.github_scraper import fetch_contributions_markup
from commitscrape.services.fragment import MAX_COLUMNS
from commitscrape.services.fragment import render_fragment
from commitscrape.services.fragment import trim_columns
from commitscrape.services.grid import extract_columns
from commitscrape.settings import Settings

logger = get_logger(__name__)

# Plain ASCII integers only: no "1_0", padding or non-ASCII digits.
COLUMNS_PATTERN = re.compile(r"[+-]?[0-9]+")


class CalendarRequestError(Exception):
    """Client-facing failure rendered as `{"err": message}`."""

    status_code = 400
    message = "bad request"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidColumnsError(CalendarRequestError):
    message = f"columns must be a number between 0 and {MAX_COLUMNS}"


class UnauthorizedUserError(CalendarRequestError):
    message = "unauthorized user"


class UpstreamMarkupError(CalendarRequestError):
    status_code = 502
    message = "upstream calendar markup could not be parsed"


class CacheUnavailableError(CalendarRequestError):
    status_code = 500
    message = "cache store unavailable"


def parse_columns(raw_value: str | None) -> int | None:
    """Validate the `columns` query value; empty means not requested."""

    if raw_value is None or raw_value == "":
        return None

    if COLUMNS_PATTERN.fullmatch(raw_value) is None:
        raise InvalidColumnsError

    columns = int(raw_value)
    if columns <= 0 or columns > MAX_COLUMNS:
        raise InvalidColumnsError
    return columns


class CalendarService:
    """Serve a user's calendar fragment from cache, scraping GitHub on a miss."""

    def __init__(
        self,
        settings: Settings,
        cache: CacheGateway,
        http_client: httpx.Client,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.http_client = http_client

    def resolve_username(self, requested_user: str | None) -> str:
        """Pick the username to serve, enforcing the allow-list.

        Raises:
            UnauthorizedUserError: If a non-default user is requested and is
                not in the allow-list.
        """

        username = (requested_user or "").strip()
        if not username or not self.settings.allow_user_query:
            return self.settings.username

        if not self.settings.is_user_allowed(username):
            logger.info("Rejected calendar request for unlisted user %s", username)
            raise UnauthorizedUserError
        return username

    def scrape(self, username: str) -> str:
        """Fetch, extract and render a fresh fragment, persisting it on success."""

        url = build_contributions_url(self.settings.github_base_url, username)
        markup = fetch_contributions_markup(
            self.http_client, url, timeout=self.settings.fetch_timeout_seconds
        )
        if markup is None:
            return ""

        columns = extract_columns(markup)
        fragment = render_fragment(columns)
        logger.info("Scraped %d columns for %s", len(columns), username)

        if fragment:
            self.cache.set(cache_key(username), fragment)
        return fragment

    def get_calendar(self, requested_user: str | None, columns: int | None) -> str:
        username = self.resolve_username(requested_user)
        key = cache_key(username)

        fragment = self.cache.get(key)
        if fragment is None:
            logger.debug("Cache miss for %s", key)
            fragment = self.scrape(username)
        else:
            logger.debug("Cache hit for %s", key)

        if columns is not None and fragment:
            fragment = trim_columns(fragment, columns)
        return fragment

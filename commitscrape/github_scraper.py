import httpx

from commitscrape.core.observability import get_logger

USER_AGENT = "commitscrape"

logger = get_logger(__name__)


def build_contributions_url(base_url: str, username: str) -> str:
    return f"{base_url.rstrip('/')}/users/{username}/contributions"


def fetch_contributions_markup(
    client: httpx.Client,
    url: str,
    timeout: float,
) -> str | None:
    """Fetch the contribution calendar page.

    Returns None when the request fails or GitHub answers with anything but
    200; callers treat that as "no data" rather than an error.
    """

    try:
        response = client.get(
            url,
            headers={"User-Agent": USER_AGENT, "Accept": "text/html"},
            timeout=timeout,
            follow_redirects=True,
        )
    except httpx.HTTPError as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        return None

    if response.status_code != 200:
        logger.warning("Fetching %s returned HTTP %s", url, response.status_code)
        return None

    return response.text

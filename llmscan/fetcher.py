"""HTTP fetcher for sitemaps and documentation pages."""

import httpx

from .exceptions import FetchError
from .logger import get_module_logger

logger = get_module_logger("fetcher")

DEFAULT_TIMEOUT = 30.0


class Fetcher:
    """
    Blocking GET with a fixed timeout.

    Redirects are followed; anything but a final HTTP 200 is a failure.
    There is no retry: the scanner skips the page instead.
    """

    def __init__(self, user_agent: str, timeout: float = DEFAULT_TIMEOUT):
        self.user_agent = user_agent
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        """
        Return the body of *url*.

        Raises:
            FetchError: on a transport error or a non-200 status
        """
        try:
            with httpx.Client(
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                follow_redirects=True,
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as e:
            logger.debug(f"Transport error for {url}: {e}")
            raise FetchError(f"Request failed: {e}", url=url, details={"error": str(e)})

        if response.status_code != 200:
            logger.debug(f"HTTP {response.status_code} for {url}")
            raise FetchError(
                f"HTTP {response.status_code}",
                url=url,
                status_code=response.status_code
            )

        return response.text

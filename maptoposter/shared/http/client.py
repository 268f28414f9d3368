"""HTTP client"""

from typing import Any, Optional

import requests

from ..exceptions.errors import HTTPStatusError, HTTPTransportError
from ..logging.config import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """
    Thin HTTP client over a requests session

    Features:
    - Bounded timeout on every request
    - Session-wide User-Agent
    - Transport failures and bad statuses raised as distinct errors

    Requests are sent exactly once, without retry.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: Request timeout (seconds)
            user_agent: User-Agent header
        """
        self.timeout = timeout
        self.user_agent = user_agent

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create the session"""
        session = requests.Session()

        if self.user_agent:
            session.headers.update({"User-Agent": self.user_agent})

        return session

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        GET request

        Args:
            url: Request URL
            params: Query parameters
            headers: Additional headers

        Returns:
            Response object

        Raises:
            HTTPTransportError: No response was received
            HTTPStatusError: Response status was 4xx/5xx
        """
        try:
            logger.debug(f"GET request to {url}")
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"GET request failed: {url} - {e}")
            raise HTTPTransportError(f"Failed to GET {url}: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.debug(f"GET request returned {response.status_code}: {url}")
            raise HTTPStatusError(
                f"GET {url} returned status {response.status_code}",
                status_code=response.status_code,
            ) from e

        logger.debug(f"GET request successful: {url} (status={response.status_code})")
        return response

    def close(self) -> None:
        """Close the session"""
        if self.session:
            self.session.close()
            logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from curl_cffi.requests import RequestsError, Response, Session
from curl_cffi.requests.exceptions import HTTPError

from iofxml.exceptions import NetworkError

logger = structlog.get_logger(__name__)


class Scraper:
    """HTTP transport shared by the WinSplits listings and result downloads.

    Requests are issued one at a time. There are no retries: any failed
    request raises NetworkError and ends the workflow.
    """

    def __init__(self) -> None:
        self.session = Session()

    def _check_status(self, response: Response, url: str) -> None:
        try:
            response.raise_for_status()
        except HTTPError as e:
            logger.error("http_error", url=url, status_code=response.status_code)
            raise NetworkError(
                f"Failed to fetch data from {url} (HTTP {response.status_code})",
                url=url,
                status_code=response.status_code,
            ) from e

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Performs a GET request and returns the fully read response.

        Args:
            url: Target URL.
            params: Query parameters.
            headers: Extra headers for this request.

        Returns:
            The response of a successful request.

        Raises:
            NetworkError: On transport failure or a non-success status.
        """
        logger.info("fetching_url", url=url, params=params)
        try:
            response = self.session.get(url, params=params, headers=headers)
        except RequestsError as e:
            logger.error("request_failed", url=url, error=str(e))
            raise NetworkError(f"Failed to fetch data from {url}: {e}", url=url) from e

        self._check_status(response, url)
        return response

    @contextmanager
    def stream(
        self, url: str, params: dict[str, str] | None = None
    ) -> Iterator[Iterator[bytes]]:
        """Opens a streaming GET request.

        The body is exposed as an iterator of byte chunks and is never held
        in memory as a whole. The connection is closed when the block exits.

        Raises:
            NetworkError: On transport failure or a non-success status, also
                while iterating the body.
        """
        logger.info("streaming_url", url=url, params=params)
        try:
            response = self.session.get(url, params=params, stream=True)
        except RequestsError as e:
            logger.error("request_failed", url=url, error=str(e))
            raise NetworkError(f"Failed to fetch data from {url}: {e}", url=url) from e

        try:
            self._check_status(response, url)
            yield self._iter_body(response, url)
        finally:
            response.close()

    def _iter_body(self, response: Response, url: str) -> Iterator[bytes]:
        try:
            for chunk in response.iter_content():
                if chunk:
                    yield chunk
        except RequestsError as e:
            logger.error("stream_interrupted", url=url, error=str(e))
            raise NetworkError(
                f"Connection lost while downloading {url}: {e}", url=url
            ) from e

"""GitHub document source.

Fetches raw file contents for a repository at a resolved ref and builds
deep links to line ranges on github.com.

Example:
    >>> from code_excerpt.core.config import SourceConfig
    >>> source = GitHubSource(SourceConfig(repository="Snazzah/slash-create", ref="v6.0.0"))
    >>> source.code_file_url("src/index.ts", (10, 20))
    'https://github.com/Snazzah/slash-create/blob/v6.0.0/src/index.ts#L10-L20'

"""

import logging
import time
from urllib.parse import quote

import httpx

from code_excerpt.core.config import SourceConfig
from code_excerpt.core.exceptions import DocumentNotFoundError, SourceError

logger = logging.getLogger(__name__)


def _is_retryable_error(
    status_code: int | None,
    exception: Exception | None,
) -> bool:
    """Determine if error is retryable.

    Retryable: network errors, timeouts, 429 rate limit, 5xx server errors.
    Not retryable: 400, 401, 403, 404 (client errors).

    Args:
        status_code: HTTP status code, or None if exception occurred.
        exception: Exception that occurred, or None if status code available.

    Returns:
        True if error is transient and should be retried.

    """
    if exception is not None:
        return isinstance(exception, (httpx.TimeoutException, httpx.RequestError))
    if status_code is not None:
        return status_code == 429 or status_code >= 500
    return False


class GitHubSource:
    """Raw file fetcher and deep-link builder for one repository and ref.

    Implements retry with exponential backoff for transient failures.
    """

    BASE_RETRY_DELAY = 1.0  # seconds

    def __init__(self, config: SourceConfig, client: httpx.Client | None = None) -> None:
        """Initialize the source.

        Args:
            config: Repository, ref, URL templates and HTTP settings.
            client: Optional client to reuse; one is created per fetch otherwise.

        """
        self._config = config
        self._client = client

    def __repr__(self) -> str:
        """Return string representation without credentials."""
        return f"GitHubSource(repository={self._config.repository}, ref={self._config.ref})"

    def raw_url(self, file: str) -> str:
        """Return the raw content URL for file."""
        return self._config.raw_url_template.format(
            repository=self._config.repository,
            ref=quote(self._config.ref),
            file=quote(file.lstrip("/")),
        )

    def code_file_url(self, file: str, lines: tuple[int, int]) -> str:
        """Return a deep link to lines of file.

        Args:
            file: Repository-relative file path.
            lines: Inclusive (start, end) line range, normally the actual
                range of a rendered excerpt.

        Returns:
            URL highlighting the range on github.com.

        """
        start, end = lines
        return self._config.blob_url_template.format(
            repository=self._config.repository,
            ref=quote(self._config.ref),
            file=quote(file.lstrip("/")),
            start=start,
            end=end,
        )

    def _headers(self) -> dict[str, str]:
        if self._config.token:
            return {"Authorization": f"Bearer {self._config.token}"}
        return {}

    def _get_with_retry(self, client: httpx.Client, url: str, file: str) -> str:
        last_error: Exception | None = None
        attempts = self._config.max_retries + 1

        for attempt in range(attempts):
            try:
                response = client.get(url, headers=self._headers())

                if response.status_code == 200:
                    return response.text

                if response.status_code == 404:
                    raise DocumentNotFoundError(file, self._config.ref)

                if not _is_retryable_error(response.status_code, None):
                    logger.error(
                        "GitHub raw error: status=%s, file=%s",
                        response.status_code,
                        file,
                    )
                    raise SourceError(
                        f"Fetching {file} failed with HTTP {response.status_code}"
                    )

                last_error = httpx.HTTPStatusError(
                    f"HTTP {response.status_code}",
                    request=response.request,
                    response=response,
                )

            except (httpx.TimeoutException, httpx.RequestError) as e:
                last_error = e

            if attempt < attempts - 1:
                delay = self.BASE_RETRY_DELAY * (2**attempt)
                logger.debug(
                    "Fetch of %s failed, retrying in %.1fs (attempt %d/%d)",
                    file,
                    delay,
                    attempt + 1,
                    attempts,
                )
                time.sleep(delay)

        logger.error("Fetching %s failed after %d attempts: %s", file, attempts, last_error)
        raise SourceError(f"Fetching {file} failed after {attempts} attempts: {last_error}")

    def fetch_text(self, file: str) -> str:
        """Fetch the full text of file at the configured ref.

        Args:
            file: Repository-relative file path.

        Returns:
            Document text.

        Raises:
            DocumentNotFoundError: If the file does not exist at the ref.
            SourceError: On non-retryable errors or exhausted retries.

        """
        url = self.raw_url(file)
        logger.debug("Fetching %s", url)

        if self._client is not None:
            return self._get_with_retry(self._client, url, file)

        with httpx.Client(timeout=self._config.timeout, follow_redirects=True) as client:
            return self._get_with_retry(client, url, file)

"""URL-based collection import.

The portfolio page is fetched and converted by a remote serverless function;
this module only validates the showcase URL and invokes that function on the
caller's behalf, turning its reply into an ImportSummary.
"""

import uuid
from typing import Any
from urllib.parse import urlsplit

import httpx
from loguru import logger

from card_importer.lib.collection_import.types import (
    ImportSummary,
    InvalidPortfolioUrlError,
    PortfolioImportError,
)

PORTFOLIO_HOST = "app.getcollectr.com"
PORTFOLIO_PATH_PREFIX = "/showcase/profile/"
DEFAULT_FUNCTION_NAME = "import-collectr-portfolio"
DEFAULT_TIMEOUT = 60.0
INVALID_URL_MESSAGE = "Please enter a valid Collectr portfolio URL"


def validate_portfolio_url(url: str | None) -> str:
    """Check that a URL points at a Collectr showcase profile.

    Args:
        url: User-supplied URL.

    Returns:
        The trimmed URL, with ``https://`` added when no scheme was given.

    Raises:
        InvalidPortfolioUrlError: If the scheme, host or path do not match.
    """
    candidate = (url or "").strip()
    if candidate and "://" not in candidate:
        candidate = f"https://{candidate}"
    parts = urlsplit(candidate)

    if parts.scheme not in ("http", "https") or (parts.hostname or "").lower() != PORTFOLIO_HOST:
        raise InvalidPortfolioUrlError(INVALID_URL_MESSAGE)
    if not parts.path.startswith(PORTFOLIO_PATH_PREFIX):
        raise InvalidPortfolioUrlError(INVALID_URL_MESSAGE)
    if not parts.path[len(PORTFOLIO_PATH_PREFIX) :].strip("/"):
        raise InvalidPortfolioUrlError(INVALID_URL_MESSAGE)

    return candidate


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Import function returned HTTP {response.status_code}"


def _parse_job_id(value: Any) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        logger.warning(f"Import function returned a non-UUID job id: {value!r}")
        return None


class PortfolioImportClient:
    """Client for the remote portfolio import function."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        function_name: str = DEFAULT_FUNCTION_NAME,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._function_name = function_name
        self._timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/{self._function_name}"

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    def _headers(self, access_token: str) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {access_token}"}
        if self._api_key:
            headers["apikey"] = self._api_key
        return headers

    async def import_portfolio(self, url: str, access_token: str) -> ImportSummary:
        """Run a portfolio import through the remote function.

        Args:
            url: A validated portfolio showcase URL.
            access_token: The caller's access token, forwarded so the remote
                side creates listings for the same user.

        Returns:
            ImportSummary with the remote counts and job id.

        Raises:
            PortfolioImportError: On transport errors, non-2xx replies,
                undecodable or malformed bodies or an explicit ``success: false``.
        """
        if not self.is_configured:
            msg = "Portfolio import function is not configured"
            raise PortfolioImportError(msg)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self.endpoint,
                    json={"portfolioUrl": url},
                    headers=self._headers(access_token),
                )
        except httpx.TimeoutException as e:
            logger.warning("Portfolio import function timed out")
            raise PortfolioImportError("Portfolio import timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"Portfolio import function transport error: {e}")
            raise PortfolioImportError("Could not reach the portfolio import function") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"Portfolio import function HTTP {response.status_code}: {message}")
            raise PortfolioImportError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise PortfolioImportError("Import function returned an invalid response") from e

        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("error") if isinstance(data, dict) else None
            raise PortfolioImportError(str(message or "Import failed"), status_code=response.status_code)

        try:
            summary = ImportSummary(
                success=max(int(data.get("imported") or 0), 0),
                failed=max(int(data.get("failed") or 0), 0),
                job_id=_parse_job_id(data.get("jobId")),
            )
        except (TypeError, ValueError) as e:
            raise PortfolioImportError("Import function returned an invalid response") from e
        logger.info(f"Portfolio import finished: {summary.success} imported, {summary.failed} failed")
        return summary

"""
Pact broker client.

Only the verification-result publishing endpoint is implemented; fetching
pacts and authentication flows belong to the loader that builds the Pact.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pactverifier.core.errors import PublishError

logger = structlog.get_logger()

PUBLISH_VERIFICATION_RESULTS = "pb:publish-verification-results"


class RetryableHTTPError(Exception):
    """HTTP errors that should be retried."""


def is_retryable_status(status_code: int) -> bool:
    """Determine if HTTP status code is retryable."""
    return status_code in (408, 429, 500, 502, 503, 504)


@dataclass(frozen=True)
class Ok:
    value: Any = None


@dataclass(frozen=True)
class Err:
    error: PublishError


PublishResult = Union[Ok, Err]


class PactBrokerClient:
    """Synchronous pact broker client with retry on transient failures."""

    def __init__(
        self,
        base_url: str,
        options: Optional[Mapping[str, Any]] = None,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._options = dict(options or {})
        self._timeout = timeout
        self._max_retries = max_retries
        self._backoff_factor = backoff_factor

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/hal+json, application/json",
        }
        auth = self._options.get("authentication")
        if auth and auth[0] == "bearer":
            headers["Authorization"] = f"Bearer {auth[1]}"
        return headers

    def _auth(self) -> Optional[tuple[str, str]]:
        auth = self._options.get("authentication")
        if auth and auth[0] == "basic":
            return (auth[1], auth[2])
        return None

    def publish_verification_results(
        self,
        attributes: Mapping[str, Any],
        success: bool,
        version: str,
    ) -> PublishResult:
        """
        Publish a verification verdict for a pact.

        Args:
            attributes: HAL links captured when the pact was fetched
            success: Aggregate verification result
            version: Provider application version that was verified

        Returns:
            Ok with the broker's response body, or Err with a PublishError
        """
        link = attributes.get(PUBLISH_VERIFICATION_RESULTS)
        href = link.get("href") if isinstance(link, Mapping) else None
        if not href:
            return Err(
                PublishError(
                    "Pact has no link to publish verification results to",
                    details={"link": PUBLISH_VERIFICATION_RESULTS},
                )
            )

        payload = {"success": success, "providerApplicationVersion": version}
        try:
            return Ok(self._post(href, payload))
        except httpx.HTTPStatusError as exc:
            return Err(
                PublishError(
                    f"Broker rejected verification results: HTTP {exc.response.status_code}",
                    details={"url": href},
                    status_code=exc.response.status_code,
                )
            )
        except (RetryableHTTPError, httpx.HTTPError) as exc:
            error = PublishError(
                f"Failed to publish verification results to {href}",
                details={"url": href},
            )
            error.__cause__ = exc
            return Err(error)

    def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        retrying = retry(
            retry=retry_if_exception_type(RetryableHTTPError),
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=self._backoff_factor, max=30),
            reraise=True,
        )
        return retrying(self._request)("POST", url, payload)

    def _request(self, method: str, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Execute HTTP request, raising RetryableHTTPError for transient failures."""
        if not url.startswith(("http://", "https://")):
            url = f"{self._base_url}/{url.lstrip('/')}"

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.request(
                    method,
                    url,
                    json=payload,
                    headers=self._headers(),
                    auth=self._auth(),
                )
        except (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError) as exc:
            logger.warning("http_network_error", method=method, url=url, error=str(exc))
            raise RetryableHTTPError(str(exc)) from exc

        if is_retryable_status(response.status_code):
            logger.warning(
                "http_retryable_error",
                status=response.status_code,
                method=method,
                url=url,
            )
            raise RetryableHTTPError(f"HTTP {response.status_code}: {response.text}")

        response.raise_for_status()
        return response.json() if response.content else {}

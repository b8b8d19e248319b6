"""HTTP client for the remote wellness API.

Calls never raise for transport or HTTP problems. Each request resolves to a
``FetchResult``: either ``FetchOk`` carrying the decoded JSON body, or one of
the ``FetchFailure`` variants the domain services branch on to decide whether
the local store has to answer instead.
"""

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Protocol

import httpx

from wellness_tracker.services.availability import AvailabilityMonitor

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOk:
    """Successful response body."""

    value: object


@dataclass(frozen=True)
class FetchFailure:
    """Base for every way a remote call can fail."""

    message: str = ""

    def describe(self) -> str:
        """Return a short label for logs."""
        label = type(self).__name__
        return f"{label}: {self.message}" if self.message else label


@dataclass(frozen=True)
class RemoteUnavailable(FetchFailure):
    """The availability monitor reports the service as unreachable."""


@dataclass(frozen=True)
class RemoteTimeout(FetchFailure):
    """The request did not complete within its timeout."""


@dataclass(frozen=True)
class RemoteNetworkError(FetchFailure):
    """The request failed below the HTTP layer."""


@dataclass(frozen=True)
class RemoteError(FetchFailure):
    """The service answered with a non-2xx status."""

    status: int = 0

    def describe(self) -> str:
        """Return a short label for logs."""
        return f"RemoteError {self.status}: {self.message}"


@dataclass(frozen=True)
class RemoteInvalidPayload(FetchFailure):
    """The service answered 2xx with a body that does not match the schema."""


FetchResult = FetchOk | FetchFailure


class RemoteStore(Protocol):
    """Interface for requests against the remote API."""

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: dict[str, object] | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        """Issue a request and return its outcome."""


@dataclass
class HttpxRemoteStore(RemoteStore):
    """Remote store implemented with httpx."""

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    monitor: AvailabilityMonitor
    timeout: float = 10

    @classmethod
    def create(
        cls,
        base_url: str,
        api_key: str,
        monitor: AvailabilityMonitor,
        http_client: httpx.AsyncClient,
        timeout: float = 10,
    ) -> "HttpxRemoteStore":
        """Create a remote store sharing the monitor's HTTP session."""
        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            http_client=http_client,
            monitor=monitor,
            timeout=timeout,
        )

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: dict[str, object] | None = None,
        timeout: float | None = None,
    ) -> FetchResult:
        """Send a JSON request unless the service is known to be down."""
        if not await self.monitor.ensure_checked():
            return RemoteUnavailable()
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = await self.http_client.request(
                method,
                url,
                json=body,
                headers=auth_headers(self.api_key),
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as exc:
            self.monitor.mark_unavailable(f"timeout on {method} {path}")
            return RemoteTimeout(str(exc) or "request timed out")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self.monitor.mark_unavailable(f"network error on {method} {path}")
            return RemoteNetworkError(str(exc) or type(exc).__name__)

        if not response.is_success:
            message = _error_message(response)
            if response.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
                self.monitor.mark_unavailable(
                    f"status {response.status_code} on {method} {path}"
                )
            _logger.info(
                "Remote %s %s failed: status=%s error=%s",
                method,
                path,
                response.status_code,
                message,
            )
            return RemoteError(message=message, status=response.status_code)

        try:
            return FetchOk(response.json())
        except ValueError:
            return RemoteInvalidPayload("response body is not JSON")


def auth_headers(api_key: str) -> dict[str, str]:
    """Return the headers every remote request carries."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return response.reason_phrase

"""RequestExecutor — the single pipeline from descriptor to typed result.

Every remote call goes through ``execute``: resolve the URL, enforce the
auth requirement, perform one blocking httpx exchange, then classify the
outcome into a decoded value or a RobinhoodError subclass. Nothing is
retried here; order placement must never be sent twice implicitly.
"""

from __future__ import annotations

import time
import uuid
from functools import lru_cache
from typing import Any, Self

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from robinhood_client.config import ClientConfig
from robinhood_client.net.errors import (
    DecodeError,
    NotFoundError,
    NotLoggedInError,
    RemoteRejectionError,
    TransportError,
    TransportTimeoutError,
)
from robinhood_client.net.method import ApiMethod, Verb
from robinhood_client.net.session import Session
from robinhood_client.utils.logging import set_request_id

log = structlog.get_logger()

# Keys the remote service uses for human-readable error text, in priority order
_ERROR_KEYS = ("detail", "error", "non_field_errors", "message")


@lru_cache(maxsize=None)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def _error_message(response: httpx.Response) -> str:
    """Pull the server's error message out of a rejected response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase

    if isinstance(payload, dict):
        for key in _ERROR_KEYS:
            value = payload.get(key)
            if isinstance(value, list) and value:
                return "; ".join(str(v) for v in value)
            if value:
                return str(value)
    return response.text.strip() or response.reason_phrase


class RequestExecutor:
    """Executes ApiMethod descriptors against the configured host.

    Holds only configuration and the underlying httpx.Client, so one
    instance may be shared read-only between callers. The Session passed
    to ``execute`` is the caller's.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout),
            headers={
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            },
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def execute(self, method: ApiMethod, session: Session) -> Any:
        """Run one descriptor and return its decoded result.

        Returns None when the descriptor declares no result shape.

        Raises:
            NotLoggedInError: Auth required and the session has no token.
                No request is sent.
            TransportTimeoutError: Connect or read timeout.
            TransportError: Any other connection-level or protocol failure,
                or an unfollowed 1xx/3xx status.
            RemoteRejectionError: HTTP status >= 400.
            NotFoundError: 2xx with an empty or non-JSON body.
            DecodeError: Body could not be decompressed, or did not
                validate against the result shape.
        """
        url, params = method.resolve(self._config.base_url)

        if method.requires_auth and not session.has_token():
            log.warning(
                "request_rejected_not_logged_in",
                verb=method.verb.value,
                url=url,
            )
            raise NotLoggedInError(
                f"{method.verb.value} {url} requires login. Call login() first."
            )

        headers: dict[str, str] = {}
        if session.token is not None:
            headers["Authorization"] = f"{self._config.token_type} {session.token}"

        set_request_id(uuid.uuid4().hex[:12])
        log.debug("request_started", verb=method.verb.value, url=url)
        started = time.monotonic()

        try:
            response = self._client.request(
                method.verb.value,
                url,
                params=params if method.verb is not Verb.POST and params else None,
                data=params if method.verb is Verb.POST and params else None,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            log.warning("request_failed", verb=method.verb.value, url=url, error=str(e))
            raise TransportTimeoutError(
                f"Timed out calling {method.verb.value} {url}: {e}"
            ) from e
        except httpx.TransportError as e:
            log.warning("request_failed", verb=method.verb.value, url=url, error=str(e))
            raise TransportError(
                f"Could not reach {method.verb.value} {url}: {e}"
            ) from e
        except httpx.DecodingError as e:
            log.warning("request_failed", verb=method.verb.value, url=url, error=str(e))
            raise DecodeError(
                f"Could not decode body of {method.verb.value} {url}: {e}"
            ) from e
        except httpx.RequestError as e:
            # redirect loops and other protocol-level failures
            log.warning("request_failed", verb=method.verb.value, url=url, error=str(e))
            raise TransportError(f"Request {method.verb.value} {url} failed: {e}") from e

        log.info(
            "request_finished",
            verb=method.verb.value,
            url=url,
            status=response.status_code,
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return self._classify(method, url, response)

    def _classify(self, method: ApiMethod, url: str, response: httpx.Response) -> Any:
        """Map a completed exchange to a decoded value or a classified error."""
        if response.status_code >= 400:
            raise RemoteRejectionError(response.status_code, _error_message(response))
        if not response.is_success:
            # redirects are not followed; a 1xx/3xx here never carries a result
            location = response.headers.get("Location", "")
            raise TransportError(
                f"Unexpected {response.status_code} from {url}"
                + (f" redirecting to {location}" if location else "")
            )

        if method.result_shape is None:
            return None

        if not response.content.strip():
            raise NotFoundError(f"Empty response from {url}")
        try:
            payload = response.json()
        except ValueError as e:
            raise NotFoundError(f"Response from {url} is not JSON") from e
        if payload is None:
            raise NotFoundError(f"Null response from {url}")

        try:
            return _adapter_for(method.result_shape).validate_python(payload)
        except ValidationError as e:
            raise DecodeError(f"Unexpected response shape from {url}: {e}") from e

    def close(self) -> None:
        """Release the underlying connection pool."""
        self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        self.close()

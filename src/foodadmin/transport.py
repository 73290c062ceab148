"""httpx-backed transport with per-service token attachment."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from foodadmin.config import ApiConfig

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Network or HTTP failure talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(TransportError):
    """The backend rejected the credentials (HTTP 401)."""


class HttpTransport:
    """
    Transport over an `httpx.Client`.

    User-service calls carry the id token in `X-User-IdToken`; every other
    call carries `Authorization: Bearer <access token>` when one is available.
    """

    def __init__(self, config: ApiConfig, client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=config.timeout,
            headers={"Content-Type": "application/json"},
        )

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def auth_headers(self, url: str) -> dict[str, str]:
        if self.config.is_user_service(url) and self.config.id_token:
            id_token = self.config.id_token()
            if id_token:
                return {"X-User-IdToken": id_token}
        if self.config.access_token:
            access_token = self.config.access_token()
            if access_token:
                return {"Authorization": f"Bearer {access_token}"}
        return {}

    def get(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self.send("GET", url, params=params)

    def send(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = self.client.request(
                method,
                url,
                json=body,
                params=params,
                headers=self.auth_headers(url),
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 401:
            logger.warning("Unauthorized: %s %s", method, url)
            raise UnauthorizedError(f"{method} {url} returned 401", status_code=401)
        if response.is_error:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise TransportError(
                f"{method} {url} returned {response.status_code}", status_code=response.status_code
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"{method} {url} returned a non-JSON body") from exc

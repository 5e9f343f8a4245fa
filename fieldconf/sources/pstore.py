"""Remote parameter stores.

Parameters are addressed by path, e.g. ``/billing/DB_PASSWORD`` or
``/global/SENTRY_DSN``. :class:`ConsulParameterStore` reads them from a
Consul KV endpoint over HTTP.

HTTP Client Sharing:
    A shared ``httpx.Client`` can be injected for connection pooling (and
    for tests, with ``httpx.MockTransport``). Without one, the store creates
    and owns its own client; call :meth:`ConsulParameterStore.close` or use
    it as a context manager to release it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from fieldconf.utils.errors import BackendError

logger = logging.getLogger(__name__)

# HTTP status code for Not Found
HTTP_NOT_FOUND = 404


class MappingParameterStore:
    """In-memory parameter store, keyed by full path."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get_parameter(self, path: str) -> str:
        try:
            return self._mapping[path]
        except KeyError as e:
            raise BackendError(f"parameter {path} not found", backend="pstore") from e


class ConsulParameterStore:
    """Parameter store backed by the Consul KV HTTP API.

    Args:
        base_url: Consul agent address, e.g. ``http://127.0.0.1:8500``
        token: Optional ACL token sent as ``X-Consul-Token``
        timeout_seconds: Per-request timeout
        http_client: Optional shared client
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout_seconds: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout_seconds))

    def get_parameter(self, path: str) -> str:
        """Read one raw value from the KV store.

        Raises:
            BackendError: If the key does not exist or the request fails
        """
        url = f"{self.base_url}/v1/kv/{path.lstrip('/')}"
        headers: dict[str, str] = {}
        if self._token:
            headers["X-Consul-Token"] = self._token

        try:
            response = self._client.get(
                url,
                params={"raw": ""},
                headers=headers,
                timeout=httpx.Timeout(self._timeout_seconds),
            )
            if response.status_code == HTTP_NOT_FOUND:
                raise BackendError(f"parameter {path} not found", backend="pstore")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise BackendError(f"failed to read parameter {path}: {e}", backend="pstore") from e

        logger.debug(f"Fetched parameter {path}")
        return response.text

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ConsulParameterStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = [
    "ConsulParameterStore",
    "HTTP_NOT_FOUND",
    "MappingParameterStore",
]

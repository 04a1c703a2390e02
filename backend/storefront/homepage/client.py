# storefront/homepage/client.py
"""
Async client for the storefront REST API.

GET responses are cached through an injected ``ResponseCache`` keyed by
URL plus serialized params. A request carrying the ``_t`` cache-busting
param skips the cache entirely: no read and no write.
"""
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from .cache import ResponseCache

logger = logging.getLogger(__name__)

CACHE_BUST_PARAM = "_t"


class StorefrontAPIError(Exception):
    """Raised when the storefront API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def cache_key(url: str, params: Optional[Dict[str, Any]] = None) -> str:
    return f"{url}_{json.dumps(params or {}, sort_keys=True, default=str)}"


class StorefrontClient:
    def __init__(
        self,
        base_url: str,
        cache: Optional[ResponseCache] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else ResponseCache()
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http is None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        if self._owns_http:
            await self._http.aclose()

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        bust: bool = False,
    ) -> Any:
        """
        GET ``endpoint`` and return the decoded JSON body.

        Args:
            endpoint: Path under the API base URL, e.g. ``/products``
            params: Query parameters; ``None`` values are dropped
            bust: Add a ``_t`` timestamp so the request bypasses the cache

        Raises:
            StorefrontAPIError: On non-2xx responses or transport failures
        """
        url = f"{self.base_url}{endpoint}"
        params = {k: v for k, v in (params or {}).items() if v is not None}

        if bust:
            params[CACHE_BUST_PARAM] = int(time.time() * 1000)

        cacheable = CACHE_BUST_PARAM not in params
        key = cache_key(url, params)

        if cacheable:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit %s", key)
                return cached

        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = f"Storefront API error: {status} for {endpoint}"
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and (body.get("message") or body.get("error")):
                message += f" - {body.get('message') or body.get('error')}"
            raise StorefrontAPIError(message, status_code=status) from exc
        except httpx.RequestError as exc:
            raise StorefrontAPIError(f"Failed to reach storefront API: {exc}") from exc

        if cacheable:
            self.cache.set(key, data)

        return data

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic_core import to_json

from typedwire.config import get_settings
from typedwire.errors import ApiClientError
from typedwire.schemas.api import ApiSchema
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)


class TypedHttpClient:
    """Calls methods of an API schema over HTTP.

    Params are not validated locally and responses are not validated either:
    the server is the authority on both. Any non-200 response raises
    ``ApiClientError`` carrying the raw response text as its message.

    Usage:
        async with TypedHttpClient("http://localhost:8000/api/", schema) as client:
            result = await client.call("divide", {"num1": 10, "num2": 5})
    """

    def __init__(
        self,
        base_url: str,
        schema: ApiSchema,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.schema = schema
        if timeout is None:
            timeout = get_settings().client_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport, timeout=timeout)

    async def call(self, method_name: str, params: Any = None) -> Any:
        if method_name not in self.schema:
            raise KeyError(f"method {method_name!r} is not part of the API schema")
        url = self.base_url + method_name
        logger.debug("POST %s", url)
        resp = await self._client.post(
            url,
            content=to_json(params, inf_nan_mode="null"),
            headers={"content-type": "application/json"},
        )
        if resp.status_code != 200:
            logger.debug("%s failed with status %s", method_name, resp.status_code)
            raise ApiClientError(resp.text, resp.status_code)
        return resp.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TypedHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

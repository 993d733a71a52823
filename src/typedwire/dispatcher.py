"""Server side of the request/response pattern.

Maps one inbound request to a ``HttpResponse``:

* 400 + JSON issue list when the body is not JSON or fails the request schema
* 200 + JSON of the handler result
* the declared status + plain-text message when the handler raises ``ApiError``
* 500 for anything else
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic_core import to_json

from typedwire.errors import ApiError
from typedwire.schemas.api import ApiSchema, MethodSchema
from typedwire.validation import Issue, Rejected, decode_json, serialize_issues
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"
INTERNAL_ERROR_BODY = "Internal Server Error"

ServerHandler = Callable[[Any, Any], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str
    media_type: str = JSON_MEDIA_TYPE


def parse_body(raw_body: Union[bytes, str, None]) -> Any:
    """Decode a raw request body; an empty body decodes to ``None``."""
    if raw_body is None:
        return None
    if isinstance(raw_body, (bytes, bytearray)):
        raw_body = raw_body.decode("utf-8")
    if not raw_body.strip():
        return None
    return decode_json(raw_body)


def _invalid_json_response(exc: ValueError) -> HttpResponse:
    issue = Issue(code="invalid_json", path=[], message=str(exc))
    return HttpResponse(400, serialize_issues([issue]))


class RequestDispatcher:
    """Validates requests against an API schema and invokes registered handlers."""

    def __init__(self, schema: ApiSchema):
        self.schema = schema
        self.handlers: Dict[str, ServerHandler] = {}

    def register(self, method_name: str, handler: ServerHandler) -> None:
        if method_name not in self.schema:
            raise KeyError(f"method {method_name!r} is not part of the API schema")
        self.handlers[method_name] = handler

    def method(self, method_name: str):
        """Decorator form of ``register``."""
        def _decorator(fn: ServerHandler) -> ServerHandler:
            self.register(method_name, fn)
            return fn
        return _decorator

    async def handle(self, method_name: str, raw_body: Union[bytes, str, None], context: Any = None) -> HttpResponse:
        if method_name not in self.schema:
            raise KeyError(f"method {method_name!r} is not part of the API schema")
        try:
            value = parse_body(raw_body)
        except ValueError as exc:
            logger.info("%s: request body is not valid JSON: %s", method_name, exc)
            return _invalid_json_response(exc)
        return await self.handle_value(method_name, value, context)

    async def handle_value(self, method_name: str, value: Any, context: Any = None) -> HttpResponse:
        method: MethodSchema = self.schema[method_name]
        handler = self.handlers.get(method_name)
        if handler is None:
            raise KeyError(f"no handler registered for method {method_name!r}")

        result = method.request.validate(value)
        if isinstance(result, Rejected):
            logger.info("%s: request rejected with %d issue(s)", method_name, len(result.issues))
            return HttpResponse(400, result.to_json())

        try:
            out = handler(result.value, context)
            if inspect.isawaitable(out):
                out = await out
            body = to_json(out, inf_nan_mode="null").decode("utf-8")
        except ApiError as err:
            logger.info("%s: declared error %s: %s", method_name, err.status_code, err.message)
            return HttpResponse(err.status_code, err.message, TEXT_MEDIA_TYPE)
        except Exception:
            logger.exception("%s: handler failed", method_name)
            return HttpResponse(500, INTERNAL_ERROR_BODY, TEXT_MEDIA_TYPE)

        logger.debug("%s: handled ok", method_name)
        return HttpResponse(200, body)


def create_http_handler(
    schema: ApiSchema,
    method_name: str,
    handler: ServerHandler,
) -> Callable[[Union[bytes, str, None], Optional[Any]], Awaitable[HttpResponse]]:
    """Single-method dispatcher: ``await fn(raw_body, context) -> HttpResponse``."""
    dispatcher = RequestDispatcher({method_name: schema[method_name]})
    dispatcher.register(method_name, handler)

    async def _handle(raw_body: Union[bytes, str, None], context: Any = None) -> HttpResponse:
        return await dispatcher.handle(method_name, raw_body, context)

    return _handle

"""FastAPI binding for both patterns.

``create_route``/``create_routes`` expose API schema methods as POST routes;
``create_peer_route`` runs a ``Peer`` per WebSocket connection.
"""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import Response

from typedwire.dispatcher import ServerHandler, create_http_handler
from typedwire.errors import UnsupportedFrameError
from typedwire.peer import LoggingPeerListener, Peer, PeerListener
from typedwire.schemas.api import ApiSchema
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)

SendText = Callable[[str], Awaitable[None]]
PeerSetup = Callable[[Peer, SendText], Union[None, Awaitable[None]]]


def create_route(router: APIRouter, schema: ApiSchema, method_name: str, handler: ServerHandler) -> None:
    """Add ``POST /<method_name>`` implementing one schema method.

    The handler is called as ``handler(params, request)``.
    """
    http_handler = create_http_handler(schema, method_name, handler)

    async def _endpoint(request: Request) -> Response:
        resp = await http_handler(await request.body(), request)
        return Response(content=resp.body, status_code=resp.status, media_type=resp.media_type)

    router.add_api_route("/" + method_name, _endpoint, methods=["POST"], name=method_name)
    logger.debug("registered route for %r", method_name)


def create_routes(router: APIRouter, schema: ApiSchema, impl: Any) -> None:
    """Add a route for every schema method, taken from ``impl``.

    ``impl`` is either a mapping of method name to handler or an object with one
    attribute per method name. Every method of the schema must be implemented.
    """
    for method_name in schema:
        if isinstance(impl, Mapping):
            handler = impl.get(method_name)
        else:
            handler = getattr(impl, method_name, None)
        if handler is None:
            raise TypeError(f"implementation does not provide method {method_name!r}")
        create_route(router, schema, method_name, handler)


def create_peer_route(
    router: APIRouter,
    path: str,
    incoming: Mapping[str, Any],
    outgoing: Mapping[str, Any],
    setup: PeerSetup,
    listener_factory: Optional[Callable[[WebSocket], PeerListener]] = None,
) -> None:
    """Add a WebSocket route where every connection gets its own ``Peer``.

    ``setup(peer, send)`` registers the peer's handlers; ``send`` writes one
    text frame (typically ``peer.serialize(...)``) back to the client.
    """

    async def _endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        if listener_factory is not None:
            listener = listener_factory(websocket)
        else:
            listener = LoggingPeerListener(name=f"ws {websocket.client}")
        peer = Peer(incoming, outgoing, listener)

        async def send(text: str) -> None:
            await websocket.send_text(text)

        out = setup(peer, send)
        if inspect.isawaitable(out):
            await out

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
                raw = message.get("text")
                if raw is None:
                    peer.listener.on_parse_error(UnsupportedFrameError("binary frames are not supported, send text"))
                    continue
                peer.on_message(raw)
        except WebSocketDisconnect:
            logger.info("ws disconnected for %s", websocket.client)
        finally:
            await peer.drain()

    router.add_api_websocket_route(path, _endpoint)

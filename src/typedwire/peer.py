"""Bidirectional messaging over ``{"type": ..., "params": ...}`` envelopes.

A ``Peer`` owns an incoming schema (what it may receive), an outgoing schema
(what it may send) and a handler table. Routing of one inbound frame is
synchronous and ends in exactly one of:

    parse failed -> listener.on_parse_error(ValueError)
    bad envelope -> listener.on_parse_error(SchemaValidationError)
    no handler   -> listener.on_missing_handler(type)
    bad params   -> listener.on_parse_error(SchemaValidationError)
    dispatched   -> handler scheduled on the running loop, not awaited

Failures of a dispatched handler are logged and go nowhere else.
"""
from __future__ import annotations

import asyncio
import inspect
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol, Set

from pydantic_core import to_json

from typedwire.errors import SchemaValidationError
from typedwire.schemas.api import PeerSchema, define_peer_schema
from typedwire.schemas.envelope import Envelope
from typedwire.validation import Issue, Rejected, Validator, decode_json
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)

PeerHandler = Callable[[Any], Awaitable[None]]


class PeerListener(Protocol):
    def on_parse_error(self, error: Exception) -> None:
        ...

    def on_missing_handler(self, msg_type: str) -> None:
        ...


class LoggingPeerListener:
    """Listener that only reports to the log."""

    def __init__(self, name: str = "peer"):
        self.name = name

    def on_parse_error(self, error: Exception) -> None:
        logger.warning("%s: parse error: %s", self.name, error)

    def on_missing_handler(self, msg_type: str) -> None:
        logger.warning("%s: missing handler for %r", self.name, msg_type)


class Peer:
    def __init__(self, incoming: Mapping[str, Any], outgoing: Mapping[str, Any], listener: Optional[PeerListener] = None):
        self.incoming: PeerSchema = define_peer_schema(incoming)
        # only constrains what callers are expected to send; never checked at runtime
        self.outgoing: PeerSchema = define_peer_schema(outgoing)
        self.listener = listener if listener is not None else LoggingPeerListener()
        self.handlers: Dict[str, PeerHandler] = {}
        self._envelope = Validator(Envelope)
        self._tasks: Set[asyncio.Future] = set()

    def set_handler(self, msg_type: str, handler: PeerHandler) -> None:
        self.handlers[msg_type] = handler

    def handler(self, msg_type: str):
        """Decorator form of ``set_handler``."""
        def _decorator(fn: PeerHandler) -> PeerHandler:
            self.set_handler(msg_type, fn)
            return fn
        return _decorator

    def on_message(self, raw: str) -> None:
        try:
            data = decode_json(raw)
        except ValueError as exc:
            self.listener.on_parse_error(exc)
            return

        shape = self._envelope.validate(data)
        if isinstance(shape, Rejected):
            self.listener.on_parse_error(shape.error())
            return

        msg_type = shape.value.type
        if msg_type not in self.handlers:
            self.listener.on_missing_handler(msg_type)
            return

        validator = self.incoming.get(msg_type)
        if validator is None:
            issue = Issue(
                code="unrecognized_type",
                path=["type"],
                message=f"message type {msg_type!r} is not part of the incoming schema",
                received="string",
            )
            self.listener.on_parse_error(SchemaValidationError([issue]))
            return

        result = validator.validate(shape.value.params)
        if isinstance(result, Rejected):
            self.listener.on_parse_error(result.error())
            return

        self._dispatch(msg_type, self.handlers[msg_type], result.value)

    def _dispatch(self, msg_type: str, handler: PeerHandler, params: Any) -> None:
        try:
            out = handler(params)
        except Exception:
            logger.warning("Uncaught error in handler for %r", msg_type, exc_info=True)
            return
        if not inspect.isawaitable(out):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(out):
                out.close()
            raise
        fut = asyncio.ensure_future(out, loop=loop)
        self._tasks.add(fut)
        fut.add_done_callback(partial(self._on_handler_done, msg_type))
        logger.debug("dispatched %r", msg_type)

    def _on_handler_done(self, msg_type: str, fut: asyncio.Future) -> None:
        self._tasks.discard(fut)
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is not None:
            logger.warning("Uncaught error in handler for %r", msg_type, exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every dispatched handler, including ones dispatched meanwhile, has settled."""
        while self._tasks:
            waiting = [t for t in self._tasks if not t.done()]
            if waiting:
                await asyncio.wait(waiting)
            else:
                # let pending done-callbacks run
                await asyncio.sleep(0)

    def serialize(self, msg_type: str, params: Any = None) -> str:
        # NaN and infinities have no JSON form and go out as null
        return to_json({"type": msg_type, "params": params}, inf_nan_mode="null").decode("utf-8")

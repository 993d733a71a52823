"""Calculator service used by the demo app and the tests.

HTTP methods ``divide`` and ``sayHi``; over WebSocket the same two calls are
messages, answered with ``divideResult`` and ``sayHiResult``.
"""
from __future__ import annotations

from pydantic import BaseModel

from typedwire.errors import ApiError
from typedwire.schemas.api import MethodSchema, define_api, define_peer_schema


class DivideParams(BaseModel):
    num1: float
    num2: float


class SayHiParams(BaseModel):
    name: str


api_schema = define_api({
    "divide": MethodSchema(request=DivideParams, response=float),
    "sayHi": MethodSchema(request=SayHiParams, response=str),
})

# what the server peer receives / sends
calculator_requests = define_peer_schema({"divide": DivideParams, "sayHi": SayHiParams})
calculator_results = define_peer_schema({"divideResult": float, "sayHiResult": str})


def divide(params: DivideParams, request=None) -> float:
    if params.num2 == 0:
        raise ApiError("Can't divide by 0", 400)
    return params.num1 / params.num2


async def say_hi(params: SayHiParams, request=None) -> str:
    return "Hi " + params.name


calculator_impl = {"divide": divide, "sayHi": say_hi}


def setup_calculator_peer(peer, send) -> None:
    """Register handlers that answer each request message with a result message."""

    @peer.handler("divide")
    async def _divide(params: DivideParams) -> None:
        # ApiError raised here is only logged: there is no reply channel for it
        await send(peer.serialize("divideResult", divide(params)))

    @peer.handler("sayHi")
    async def _say_hi(params: SayHiParams) -> None:
        await send(peer.serialize("sayHiResult", await say_hi(params)))

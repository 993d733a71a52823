from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from typedwire.validation import Validator, as_validator


@dataclass(frozen=True)
class MethodSchema:
    """Request and response validators of one RPC method.

    Either side may be given as a plain type (``float``, a ``BaseModel``
    subclass, ...) and is wrapped in a ``Validator`` once, at construction.
    """

    request: Validator
    response: Validator

    def __init__(self, request: Any, response: Any):
        object.__setattr__(self, "request", as_validator(request))
        object.__setattr__(self, "response", as_validator(response))


ApiSchema = Mapping[str, MethodSchema]
PeerSchema = Mapping[str, Validator]


def define_api(methods: Mapping[str, Any]) -> ApiSchema:
    """Build a read-only API schema.

    Values may be ``MethodSchema`` instances or ``(request, response)`` pairs.
    """
    out = {}
    for name, method in methods.items():
        if not isinstance(method, MethodSchema):
            request, response = method
            method = MethodSchema(request, response)
        out[name] = method
    return MappingProxyType(out)


def define_peer_schema(messages: Mapping[str, Any]) -> PeerSchema:
    """Build a read-only message-type -> payload validator map."""
    return MappingProxyType({name: as_validator(shape) for name, shape in messages.items()})

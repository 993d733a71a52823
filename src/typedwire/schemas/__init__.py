"""Schema models: API method schemas, peer message schemas and the envelope.

Schemas are plain pydantic types wrapped in validators; they hold no dispatch
logic of their own.
"""
from .api import ApiSchema, MethodSchema, PeerSchema, define_api, define_peer_schema
from .envelope import Envelope

__all__ = ["ApiSchema", "MethodSchema", "PeerSchema", "Envelope", "define_api", "define_peer_schema"]

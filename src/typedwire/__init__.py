"""Schema-validated request/response RPC and bidirectional peer messaging."""
from typedwire.client import TypedHttpClient
from typedwire.dispatcher import HttpResponse, RequestDispatcher, create_http_handler
from typedwire.errors import ApiClientError, ApiError, SchemaValidationError, TypedWireError
from typedwire.peer import LoggingPeerListener, Peer, PeerListener
from typedwire.schemas import Envelope, MethodSchema, define_api, define_peer_schema
from typedwire.validation import Accepted, Issue, Rejected, Validator, validate

__all__ = [
    "Accepted",
    "ApiClientError",
    "ApiError",
    "Envelope",
    "HttpResponse",
    "Issue",
    "LoggingPeerListener",
    "MethodSchema",
    "Peer",
    "PeerListener",
    "Rejected",
    "RequestDispatcher",
    "SchemaValidationError",
    "TypedHttpClient",
    "TypedWireError",
    "Validator",
    "create_http_handler",
    "define_api",
    "define_peer_schema",
    "validate",
]

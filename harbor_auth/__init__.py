from .auth import Auth
from .client import (
    HarborAuthClient,
    HarborAuthError,
    HTTPStatusError,
    NotSupportedError,
    ParseError,
    ReadError,
    TransportError,
    ValidationError,
    create_auth_client,
)

__all__ = [
    "Auth",
    "HTTPStatusError",
    "HarborAuthClient",
    "HarborAuthError",
    "NotSupportedError",
    "ParseError",
    "ReadError",
    "TransportError",
    "ValidationError",
    "create_auth_client",
]

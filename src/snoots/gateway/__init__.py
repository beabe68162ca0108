"""Gateways to the Reddit API."""

from .anon import AnonGateway
from .base import (
    BasicAuth,
    BearerAuth,
    Gateway,
    Payload,
    Query,
    RateLimit,
    RESULT_WRAPPER_KEY,
)
from .oauth import OAuthGateway

__all__ = [
    "AnonGateway",
    "BasicAuth",
    "BearerAuth",
    "Gateway",
    "OAuthGateway",
    "Payload",
    "Query",
    "RateLimit",
    "RESULT_WRAPPER_KEY",
]

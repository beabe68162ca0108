"""snoots - an asyncio Reddit API client."""

from .client import Client
from .config import SnootsSettings
from .errors import ApiError, AuthError, ConfigError, SnootsError, TransportError
from .gateway import RateLimit
from .oauth.models import AppOnlyAuth, Auth, Credentials, Token, TokenAuth, UsernameAuth

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "AppOnlyAuth",
    "Auth",
    "AuthError",
    "Client",
    "ConfigError",
    "Credentials",
    "RateLimit",
    "SnootsError",
    "SnootsSettings",
    "Token",
    "TokenAuth",
    "TransportError",
    "UsernameAuth",
]

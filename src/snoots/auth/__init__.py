"""Token caching for Client sessions."""

from .manager import TokenManager

__all__ = ["TokenManager"]

from .base import Auth

__all__ = ["Auth"]

"""bangarang REST API 연동."""

from .api import SESSION_HEADER_NAME, ApiClient

__all__ = ["ApiClient", "SESSION_HEADER_NAME"]

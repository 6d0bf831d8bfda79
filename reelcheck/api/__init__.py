from .client import User, UserAPIClient
from .validators import APIError, APIValidator

__all__ = ["User", "UserAPIClient", "APIError", "APIValidator"]

"""Database models"""

from newsroom.models.user import User
from newsroom.models.session import UserSession

__all__ = ["User", "UserSession"]

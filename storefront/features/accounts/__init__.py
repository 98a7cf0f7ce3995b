"""Customer accounts (users and their addresses)."""

from .models import Address, User, UserRole

__all__ = ["Address", "User", "UserRole"]

"""Repository package for data access patterns.

This package provides repository implementations following the Repository pattern,
abstracting data access from business logic.
"""
from repositories.session import SessionRepository, get_session_repository

__all__ = ["SessionRepository", "get_session_repository"]

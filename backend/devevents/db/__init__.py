from .base import Base, TimestampMixin
from .connection import ConnectionManager

__all__ = ["Base", "TimestampMixin", "ConnectionManager"]

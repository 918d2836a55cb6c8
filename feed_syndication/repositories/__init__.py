"""Repository implementations package."""
from .memory import InMemoryAttachmentRepository, InMemoryPostRepository

__all__ = [
    "InMemoryAttachmentRepository",
    "InMemoryPostRepository",
]

from .media_domain import MediaRegistry
from .media_store import MediaStore

__all__ = ["MediaRegistry", "MediaStore"]

from .dto import FileIn, StoredObjectOut
from .service import FileService

__all__ = ["FileIn", "FileService", "StoredObjectOut"]

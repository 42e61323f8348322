from .gcs_object_storage import GCSObjectStorage

__all__ = ["GCSObjectStorage"]

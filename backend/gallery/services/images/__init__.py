from .dto import ImageFilterIn, ImageOut, ImagesUploadedOut
from .service import ImageService

__all__ = ["ImageFilterIn", "ImageOut", "ImageService", "ImagesUploadedOut"]

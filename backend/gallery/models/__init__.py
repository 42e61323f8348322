from gallery.models.image import Image
from gallery.models.user import User

__all__ = ["Image", "User"]

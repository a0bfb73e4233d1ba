from .cloudinary_client import (
    CloudinaryConfig,
    CloudinaryMediaStore,
    MediaNotConfigured,
    MediaStorageError,
    StoredMedia,
    mask_secret,
)

__all__ = [
    "CloudinaryConfig",
    "CloudinaryMediaStore",
    "MediaNotConfigured",
    "MediaStorageError",
    "StoredMedia",
    "mask_secret",
]

"""Custom exception classes."""


class PlatifyException(Exception):
    """Base exception for the Platify website."""

    pass


class ImageValidationError(PlatifyException):
    """Raised when an uploaded image is missing or malformed."""

    pass


class UnsupportedImageError(ImageValidationError):
    """Raised when the sniffed content type is not an accepted image kind."""

    pass


class UploadTooLargeError(PlatifyException):
    """Raised when an upload exceeds the storage budget."""

    pass


class StorageError(PlatifyException):
    """Raised when an upload cannot be persisted."""

    pass


class TemplateSetError(PlatifyException):
    """Raised when the template directory cannot be compiled."""

    pass

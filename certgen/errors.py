from __future__ import annotations


class CertificateError(RuntimeError):
    """Base class for certificate generation failures."""


class ValidationError(CertificateError):
    """Raised when a request violates a precondition checked before layout."""


class InvalidImageFormat(ValidationError):
    def __init__(self, field: str, detail: str | None = None):
        self.field = field
        self.detail = detail
        message = f"The {field} is not a valid PNG file!"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ResourceError(CertificateError):
    """Raised by resource loaders and backend embed operations."""


class ResourceNotFound(ResourceError):
    pass


class ResourceDecodeError(ResourceError):
    pass


class FontLoadError(ResourceError):
    pass


class ImageDecodeError(ResourceError):
    pass

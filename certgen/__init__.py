"""Single-page internship certificate generator."""

from .errors import (
    CertificateError,
    FontLoadError,
    ImageDecodeError,
    InvalidImageFormat,
    ResourceError,
    ResourceNotFound,
    ValidationError,
)
from .models import CertificateRequest, Year
from .shared.certificates import RenderResult, generate, render_certificate
from .utils.strings import certificate_filename

__all__ = [
    "CertificateError",
    "CertificateRequest",
    "FontLoadError",
    "ImageDecodeError",
    "InvalidImageFormat",
    "RenderResult",
    "ResourceError",
    "ResourceNotFound",
    "ValidationError",
    "Year",
    "certificate_filename",
    "generate",
    "render_certificate",
]

"""Input normalization applied before layout.

Every free-text field loses tabs and C0/C1 control characters (each
replaced by a single space) and is trimmed. Dates become display strings.
This stage never raises: upstream validation owns rejecting bad input.
"""

from __future__ import annotations

import re

from ..models import CertificateRequest, DEFAULT_CERTIFICATE_TITLE, NormalizedRequest
from .time import fmt_display_date

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def clean_text(value: str | None) -> str:
    if value is None:
        return ""
    return _CONTROL_RE.sub(" ", str(value)).strip()


def _optional_text(value: str | None) -> str | None:
    cleaned = clean_text(value)
    return cleaned or None


def _optional_date(value) -> str | None:
    # Absent stays None; present but unparsable degrades to "".
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return fmt_display_date(value)


def normalize(request: CertificateRequest, images: dict[str, bytes | None] | None = None) -> NormalizedRequest:
    """Return the display-ready form of ``request``.

    ``images`` carries already decoded image bytes keyed by ``logo`` and
    ``signature``; when omitted the request's payloads are used as-is.
    """
    images = images or {}
    logo = images.get("logo", request.logo_image)
    signature = images.get("signature", request.signature_image)
    return NormalizedRequest(
        student_name=clean_text(request.student_name),
        year=request.year,
        course_name=clean_text(request.course_name),
        institution_name=clean_text(request.institution_name),
        visit_date=fmt_display_date(request.visit_date),
        certificate_title=clean_text(request.certificate_title)
        or DEFAULT_CERTIFICATE_TITLE,
        project_title=_optional_text(request.project_title),
        technologies=_optional_text(request.technologies),
        duration=_optional_text(request.duration),
        internship_start_date=_optional_date(request.internship_start_date),
        internship_end_date=_optional_date(request.internship_end_date),
        internship_course=_optional_text(request.internship_course),
        logo_image=logo if isinstance(logo, bytes) and logo else None,
        signature_image=signature if isinstance(signature, bytes) and signature else None,
    )

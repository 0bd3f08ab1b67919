from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping

DEFAULT_CERTIFICATE_TITLE = "Certificate of Participation"


class Year(str, Enum):
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"

    @classmethod
    def parse(cls, value: "Year | str | int") -> "Year":
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return list(cls)[value - 1] if 1 <= value <= len(cls) else cls(str(value))
        return cls(str(value).strip().upper())


DateLike = date | str | None
ImagePayload = bytes | str | None

# camelCase keys posted by the web entry form.
_FIELD_ALIASES: dict[str, str] = {
    "studentName": "student_name",
    "courseName": "course_name",
    "institutionName": "institution_name",
    "visitDate": "visit_date",
    "certificateTitle": "certificate_title",
    "projectTitle": "project_title",
    "internshipStartDate": "internship_start_date",
    "internshipEndDate": "internship_end_date",
    "internshipCourse": "internship_course",
    "logo": "logo_image",
    "logoImage": "logo_image",
    "signature": "signature_image",
    "signatureImage": "signature_image",
}

_OPTIONAL_TEXT = (
    "project_title",
    "technologies",
    "duration",
    "internship_course",
)


@dataclass(frozen=True)
class CertificateRequest:
    student_name: str
    year: Year
    course_name: str
    institution_name: str
    visit_date: DateLike
    certificate_title: str = DEFAULT_CERTIFICATE_TITLE
    project_title: str | None = None
    technologies: str | None = None
    duration: str | None = None
    internship_start_date: DateLike = None
    internship_end_date: DateLike = None
    internship_course: str | None = None
    logo_image: ImagePayload = None
    signature_image: ImagePayload = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CertificateRequest":
        """Build a request from form-style data.

        Accepts both the camelCase keys of the entry form and the field
        names of this class. Unknown keys are ignored and blank optional
        values are treated as absent.
        """
        values: dict[str, Any] = {}
        known = set(cls.__dataclass_fields__)
        for key, value in data.items():
            name = _FIELD_ALIASES.get(key, key)
            if name in known:
                values[name] = value
        for name in _OPTIONAL_TEXT + (
            "internship_start_date",
            "internship_end_date",
            "logo_image",
            "signature_image",
        ):
            value = values.get(name)
            if isinstance(value, str) and not value.strip():
                values[name] = None
        if not (values.get("certificate_title") or "").strip():
            values["certificate_title"] = DEFAULT_CERTIFICATE_TITLE
        values["year"] = Year.parse(values.get("year", Year.I))
        for name in ("student_name", "course_name", "institution_name"):
            values.setdefault(name, "")
        values.setdefault("visit_date", None)
        return cls(**values)


@dataclass(frozen=True)
class NormalizedRequest:
    """Display-ready values; optional fields are ``None`` when absent."""

    student_name: str
    year: Year
    course_name: str
    institution_name: str
    visit_date: str
    certificate_title: str
    project_title: str | None
    technologies: str | None
    duration: str | None
    internship_start_date: str | None
    internship_end_date: str | None
    internship_course: str | None
    logo_image: bytes | None
    signature_image: bytes | None

    @property
    def has_date_range(self) -> bool:
        return (
            self.duration is not None
            and self.internship_start_date is not None
            and self.internship_end_date is not None
        )

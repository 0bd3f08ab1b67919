from __future__ import annotations

import re

_UNSAFE_FILENAME_RE = re.compile(r'[\x00-\x1f\x7f-\x9f/\\:*?"<>|]+')


def certificate_filename(student_name: str | None) -> str:
    """Return ``{studentName}_Certificate.pdf`` as a single safe file name."""
    cleaned = _UNSAFE_FILENAME_RE.sub(" ", student_name or "")
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" .")
    if not cleaned:
        return "Certificate.pdf"
    return f"{cleaned}_Certificate.pdf"

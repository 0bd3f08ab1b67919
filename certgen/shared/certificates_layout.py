from __future__ import annotations

# A4 landscape at 72 units per inch.
PAGE_WIDTH = 842.0
PAGE_HEIGHT = 595.0

WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)
ACCENT_GREEN = (118 / 255, 166 / 255, 68 / 255)

OUTER_MARGIN = 40.0
BORDER_GAP = 4.0
BORDER_WIDTH = 0.75
BORDER_COLOR = BLACK

TITLE_SIZE = 40
TITLE_TOP_OFFSET = 110.0

BODY_TOP_OFFSET = 180.0
LINE_SPACING = 32.0
DESCRIPTION_SPACING_FACTOR = 0.8
TECHNOLOGIES_SPACING_FACTOR = 0.7

CERTIFY_SIZE = 20
INSTITUTION_SIZE = 17
INSTITUTION_SIDE_INSET = 60.0
DESCRIPTION_SIZE = 16
CONTENT_MARGIN = 60.0
WRAP_LINE_HEIGHT_FACTOR = 1.4
DURATION_MAX_CHARS = 70
AT_SIZE = 20
ORGANIZATION_NAME_SIZE = 24
ORGANIZATION_DETAIL_SIZE = 14
WISHES_SIZE = 20
FOOTER_SIZE = 14

LOGO_X = 60.0
LOGO_TOP_OFFSET = 120.0
LOGO_WIDTH = 140.0
LOGO_HEIGHT = 70.0

WATERMARK_WIDTH = 530.0
WATERMARK_HEIGHT = 357.0
WATERMARK_OPACITY = 0.15

DATE_LABEL_X = 60.0
DATE_LABEL_Y = 60.0
SIGNATORY_RIGHT_OFFSET = 200.0
SIGNATORY_Y = 70.0
SIGNATURE_RIGHT_OFFSET = 180.0
SIGNATURE_Y = 40.0
SIGNATURE_WIDTH = 120.0
SIGNATURE_HEIGHT = 90.0

CERTIFY_PREFIX = "This is to certify that Mr/Ms "
INTERNSHIP_LEAD = "as she/he has successfully completed the Internship in "
PROJECT_LEAD = 'a project titled "'
PROJECT_TAIL = '"'
AT_LABEL = "at"
ORGANIZATION_NAME = "AAHA Solutions"
ORGANIZATION_DESCRIPTION = "(a software development company)"
ORGANIZATION_ADDRESS = (
    "Located at No:27, 3rd Cross, SithanKudi, Brindavan Colony, Puducherry-605013"
)
WISHES_LINE = "We wish him/her success and betterment in future."
SIGNATORY_LABEL = "Authorized Signatory"


def certify_suffix(year: str, course_name: str) -> str:
    return f", {year} Year {course_name} from "


def technologies_line(technologies: str) -> str:
    return f"(using {technologies})"


def duration_line(duration: str, start: str, end: str) -> str:
    return f"in {duration} during the period {start} to {end}"


def date_label(visit_date: str) -> str:
    return f"Date: {visit_date}"


def border_margins() -> tuple[float, float]:
    return OUTER_MARGIN, OUTER_MARGIN + BORDER_GAP

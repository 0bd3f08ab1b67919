"""Certificate layout engine.

``render_certificate`` validates image payloads, normalizes the request,
resolves fonts and then walks ``CERTIFICATE_BLOCKS`` top to bottom. Each
block carries a predicate over the normalized request; blocks whose
predicate fails are skipped without moving the cursor, so omitted
optional content never leaves a gap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..config import Settings
from ..errors import InvalidImageFormat
from ..models import CertificateRequest, NormalizedRequest
from ..services.backend import (
    DocumentBackend,
    DrawOp,
    FontHandle,
    ImageOp,
    LineOp,
    RectOp,
    ReportLabBackend,
    TextOp,
    try_embed_image,
)
from ..services.resources import FileResourceLoader, ResourceLoader
from . import certificates_layout as layout
from .fonts import (
    BODY,
    INSTITUTION_NAME,
    ResolvedFontSet,
    build_font_roles,
    resolve_fonts,
)
from .images import decode_image_payload, ensure_png
from .normalize import normalize

logger = logging.getLogger("certgen.render")

IMAGE_FIELDS: tuple[tuple[str, str], ...] = (
    ("logo", "logo_image"),
    ("signature", "signature_image"),
)


class LayoutCursor:
    """Vertical offset that only ever moves down the page."""

    def __init__(self, y: float):
        self.y = y
        self.steps: list[float] = []

    def advance(self, factor: float = 1.0) -> None:
        step = layout.LINE_SPACING * factor
        if step <= 0:
            raise ValueError("cursor steps must move down the page")
        self.y -= step
        self.steps.append(step)


@dataclass
class Page:
    """Per-run drawing state: issued ops, resolved fonts and the cursor."""

    backend: DocumentBackend
    request: NormalizedRequest
    fonts: ResolvedFontSet
    width: float = layout.PAGE_WIDTH
    height: float = layout.PAGE_HEIGHT
    cursor: LayoutCursor = field(init=False)
    ops: list[DrawOp] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cursor = LayoutCursor(self.height - layout.BODY_TOP_OFFSET - layout.LINE_SPACING)

    def issue(self, op: DrawOp) -> None:
        self.ops.append(op)
        op.apply(self.backend)

    def text_width(self, text: str, font: FontHandle, size: float) -> float:
        return self.backend.measure_text_width(text, font, size)

    def center_x(self, text: str, font: FontHandle, size: float) -> float:
        return (self.width - self.text_width(text, font, size)) / 2

    def draw_centered(
        self,
        text: str,
        font: FontHandle,
        size: float,
        y: float | None = None,
        color=layout.BLACK,
        max_width: float | None = None,
        line_height: float | None = None,
    ) -> None:
        self.issue(
            TextOp(
                text,
                self.center_x(text, font, size),
                self.cursor.y if y is None else y,
                size,
                font,
                color,
                max_width=max_width,
                line_height=line_height,
            )
        )

    def draw_wrapped(self, text: str, font: FontHandle, size: float) -> None:
        self.issue(
            TextOp(
                text,
                layout.CONTENT_MARGIN,
                self.cursor.y,
                size,
                font,
                max_width=self.width - 2 * layout.CONTENT_MARGIN,
                line_height=size * layout.WRAP_LINE_HEIGHT_FACTOR,
            )
        )

    def draw_runs(self, runs: Sequence[tuple[str, FontHandle]], size: float) -> float:
        """Draw consecutive runs centered as one unit; return the start x."""
        widths = [self.text_width(text, font, size) for text, font in runs]
        start_x = (self.width - sum(widths)) / 2
        x = start_x
        for (text, font), run_width in zip(runs, widths):
            self.issue(TextOp(text, x, self.cursor.y, size, font))
            x += run_width
        return start_x

    def draw_image_block(
        self, block: str, data: bytes, x: float, y: float, width: float, height: float, opacity: float = 1.0
    ) -> bool:
        result = try_embed_image(self.backend, data)
        if not result.ok:
            self.skipped.append((block, result.reason or "embed failed"))
            logger.warning("[CERT-IMAGE] block=%s skipped reason=%s", block, result.reason)
            return False
        self.issue(ImageOp(result.handle, x, y, width, height, opacity))
        return True


@dataclass(frozen=True)
class Block:
    name: str
    draw: Callable[[Page], bool | None]
    predicate: Callable[[NormalizedRequest], bool] = lambda request: True
    advance: float = 0.0


# Page furniture ------------------------------------------------------------


def _draw_background(page: Page) -> None:
    page.issue(RectOp(0, 0, page.width, page.height, layout.WHITE))


def _draw_frame(page: Page, margin: float) -> None:
    w, h = page.width, page.height
    corners = [
        (margin, h - margin),
        (w - margin, h - margin),
        (w - margin, margin),
        (margin, margin),
    ]
    for start, end in zip(corners, corners[1:] + corners[:1]):
        page.issue(LineOp(start, end, layout.BORDER_WIDTH, layout.BORDER_COLOR))


def _draw_border(page: Page) -> None:
    for margin in layout.border_margins():
        _draw_frame(page, margin)


# Blocks --------------------------------------------------------------------


def _draw_title(page: Page) -> None:
    page.draw_centered(
        page.request.certificate_title,
        page.fonts.title,
        layout.TITLE_SIZE,
        y=page.height - layout.TITLE_TOP_OFFSET,
        color=layout.ACCENT_GREEN,
    )


def _draw_logo(page: Page) -> bool:
    return page.draw_image_block(
        "logo",
        page.request.logo_image,
        layout.LOGO_X,
        page.height - layout.LOGO_TOP_OFFSET,
        layout.LOGO_WIDTH,
        layout.LOGO_HEIGHT,
    )


def _draw_watermark(page: Page) -> bool:
    return page.draw_image_block(
        "watermark",
        page.request.logo_image,
        (page.width - layout.WATERMARK_WIDTH) / 2,
        (page.height - layout.WATERMARK_HEIGHT) / 2,
        layout.WATERMARK_WIDTH,
        layout.WATERMARK_HEIGHT,
        opacity=layout.WATERMARK_OPACITY,
    )


def _draw_certify(page: Page) -> None:
    request, fonts = page.request, page.fonts
    page.draw_runs(
        [
            (layout.CERTIFY_PREFIX, fonts.body),
            (request.student_name, fonts.emphasis),
            (layout.certify_suffix(request.year.value, request.course_name), fonts.body),
        ],
        layout.CERTIFY_SIZE,
    )


def _draw_institution(page: Page) -> None:
    page.draw_centered(
        page.request.institution_name,
        page.fonts.institution_name,
        layout.INSTITUTION_SIZE,
        max_width=page.width - 2 * layout.INSTITUTION_SIDE_INSET,
        line_height=layout.INSTITUTION_SIZE * 1.2,
    )


def internship_lead(request: NormalizedRequest) -> str:
    lead = layout.INTERNSHIP_LEAD
    if request.internship_course:
        lead += f"{request.internship_course} "
    return lead


def _draw_internship(page: Page) -> None:
    request, fonts = page.request, page.fonts
    lead = internship_lead(request)
    if request.project_title:
        page.draw_runs(
            [
                (lead + layout.PROJECT_LEAD, fonts.body),
                (request.project_title, fonts.emphasis),
                (layout.PROJECT_TAIL, fonts.body),
            ],
            layout.DESCRIPTION_SIZE,
        )
    else:
        page.draw_wrapped(lead, fonts.body, layout.DESCRIPTION_SIZE)


def _draw_technologies(page: Page) -> None:
    page.draw_centered(
        layout.technologies_line(page.request.technologies),
        page.fonts.body,
        layout.DESCRIPTION_SIZE,
    )


def duration_text(request: NormalizedRequest) -> str:
    return layout.duration_line(
        request.duration,
        request.internship_start_date,
        request.internship_end_date,
    )


def _draw_duration(page: Page) -> None:
    text = duration_text(page.request)
    # Character count stands in for a width check.
    if len(text) <= layout.DURATION_MAX_CHARS:
        page.draw_centered(text, page.fonts.body, layout.DESCRIPTION_SIZE)
    else:
        page.draw_wrapped(text, page.fonts.body, layout.DESCRIPTION_SIZE)


def _static_line(text: str, role: str, size: float, color=layout.BLACK) -> Callable[[Page], None]:
    def draw(page: Page) -> None:
        page.draw_centered(text, page.fonts[role], size, color=color)

    return draw


def _draw_date(page: Page) -> None:
    page.issue(
        TextOp(
            layout.date_label(page.request.visit_date),
            layout.DATE_LABEL_X,
            layout.DATE_LABEL_Y,
            layout.FOOTER_SIZE,
            page.fonts.emphasis,
        )
    )


def _draw_signatory(page: Page) -> None:
    page.issue(
        TextOp(
            layout.SIGNATORY_LABEL,
            page.width - layout.SIGNATORY_RIGHT_OFFSET,
            layout.SIGNATORY_Y,
            layout.FOOTER_SIZE,
            page.fonts.emphasis,
        )
    )


def _draw_signature(page: Page) -> bool:
    return page.draw_image_block(
        "signature",
        page.request.signature_image,
        page.width - layout.SIGNATURE_RIGHT_OFFSET,
        layout.SIGNATURE_Y,
        layout.SIGNATURE_WIDTH,
        layout.SIGNATURE_HEIGHT,
    )


CERTIFICATE_BLOCKS: tuple[Block, ...] = (
    Block("title", _draw_title),
    Block("logo", _draw_logo, lambda r: r.logo_image is not None),
    Block("watermark", _draw_watermark, lambda r: r.logo_image is not None),
    Block("certify", _draw_certify, advance=1.0),
    Block("institution", _draw_institution, advance=1.0),
    Block("internship", _draw_internship, advance=layout.DESCRIPTION_SPACING_FACTOR),
    Block(
        "technologies",
        _draw_technologies,
        lambda r: r.technologies is not None,
        advance=layout.TECHNOLOGIES_SPACING_FACTOR,
    ),
    Block("duration", _draw_duration, lambda r: r.has_date_range, advance=1.0),
    Block("at", _static_line(layout.AT_LABEL, BODY, layout.AT_SIZE), advance=1.0),
    Block(
        "organization_name",
        _static_line(
            layout.ORGANIZATION_NAME,
            INSTITUTION_NAME,
            layout.ORGANIZATION_NAME_SIZE,
            color=layout.ACCENT_GREEN,
        ),
        advance=1.0,
    ),
    Block(
        "organization_description",
        _static_line(layout.ORGANIZATION_DESCRIPTION, BODY, layout.ORGANIZATION_DETAIL_SIZE),
        advance=1.0,
    ),
    Block(
        "organization_address",
        _static_line(layout.ORGANIZATION_ADDRESS, BODY, layout.ORGANIZATION_DETAIL_SIZE),
        advance=1.0,
    ),
    Block("wishes", _static_line(layout.WISHES_LINE, BODY, layout.WISHES_SIZE), advance=1.0),
    Block("date", _draw_date),
    Block("signatory", _draw_signatory),
    Block("signature", _draw_signature, lambda r: r.signature_image is not None),
)


def selected_blocks(request: NormalizedRequest, blocks: Sequence[Block] = CERTIFICATE_BLOCKS) -> list[str]:
    """Names of the blocks whose predicate holds for ``request``."""
    return [block.name for block in blocks if block.predicate(request)]


@dataclass(frozen=True)
class RenderResult:
    pdf: bytes
    ops: tuple[DrawOp, ...]
    blocks: tuple[str, ...]
    skipped: tuple[tuple[str, str], ...]
    fonts: ResolvedFontSet
    cursor_steps: tuple[float, ...]


def validate_images(request: CertificateRequest) -> dict[str, bytes | None]:
    """Decode and check logo/signature payloads; raises ``InvalidImageFormat``."""
    images: dict[str, bytes | None] = {}
    for field_name, attr in IMAGE_FIELDS:
        payload = getattr(request, attr)
        if payload is None:
            images[field_name] = None
            continue
        data = decode_image_payload(payload, field_name)
        if data is None:
            if isinstance(payload, (bytes, bytearray)):
                raise InvalidImageFormat(field_name, "empty payload")
            images[field_name] = None
            continue
        ensure_png(data, field_name)
        images[field_name] = data
    return images


def render_certificate(
    request: CertificateRequest,
    *,
    loader: ResourceLoader | None = None,
    backend_factory: Callable[[], DocumentBackend] | None = None,
    settings: Settings | None = None,
    blocks: Sequence[Block] = CERTIFICATE_BLOCKS,
) -> RenderResult:
    settings = settings or Settings.from_env()
    images = validate_images(request)
    normalized = normalize(request, images)

    if loader is None:
        loader = FileResourceLoader(settings.assets_dir)
    if backend_factory is None:
        backend = ReportLabBackend(invariant=settings.invariant)
    else:
        backend = backend_factory()

    backend.add_page(layout.PAGE_WIDTH, layout.PAGE_HEIGHT)
    fonts = resolve_fonts(backend, loader, build_font_roles(settings))
    page = Page(backend=backend, request=normalized, fonts=fonts)

    _draw_background(page)
    _draw_border(page)

    rendered: list[str] = []
    for block in blocks:
        if not block.predicate(normalized):
            continue
        if block.draw(page) is False:
            continue
        rendered.append(block.name)
        if block.advance:
            page.cursor.advance(block.advance)

    pdf = backend.save()
    logger.info(
        "[CERT] student=%s blocks=%s skipped=%s ops=%d bytes=%d",
        normalized.student_name,
        ",".join(rendered),
        ",".join(name for name, _ in page.skipped) or "-",
        len(page.ops),
        len(pdf),
    )
    return RenderResult(
        pdf=pdf,
        ops=tuple(page.ops),
        blocks=tuple(rendered),
        skipped=tuple(page.skipped),
        fonts=fonts,
        cursor_steps=tuple(page.cursor.steps),
    )


def generate(request: CertificateRequest, **kwargs) -> bytes:
    """Render ``request`` and return the serialized single-page document."""
    return render_certificate(request, **kwargs).pdf

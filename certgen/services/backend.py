"""Document backend: page primitives, embedding, measuring and serialization.

The layout engine decides what to draw and where; everything byte-level
lives behind ``DocumentBackend``. ``ReportLabBackend`` is the production
implementation.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Generic, Protocol, TypeVar

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..errors import FontLoadError, ImageDecodeError

Color = tuple[float, float, float]
Point = tuple[float, float]

BLACK: Color = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class FontHandle:
    name: str
    source: str = "standard"


@dataclass(frozen=True)
class ImageHandle:
    key: str
    width: int
    height: int
    reader: Any = field(default=None, compare=False, repr=False)


H = TypeVar("H")


@dataclass(frozen=True)
class EmbedResult(Generic[H]):
    """Outcome of an embed attempt: a handle, or the reason it failed."""

    handle: H | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.handle is not None


class DocumentBackend(Protocol):
    def add_page(self, width: float, height: float) -> None: ...

    def standard_font(self, name: str) -> FontHandle: ...

    def embed_font(self, data: bytes) -> FontHandle: ...

    def embed_image(self, data: bytes) -> ImageHandle: ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        font: FontHandle,
        color: Color = BLACK,
        max_width: float | None = None,
        line_height: float | None = None,
    ) -> None: ...

    def draw_line(self, start: Point, end: Point, thickness: float, color: Color) -> None: ...

    def draw_rectangle(self, x: float, y: float, width: float, height: float, color: Color) -> None: ...

    def draw_image(
        self,
        image: ImageHandle,
        x: float,
        y: float,
        width: float,
        height: float,
        opacity: float = 1.0,
    ) -> None: ...

    def measure_text_width(self, text: str, font: FontHandle, size: float) -> float: ...

    def save(self) -> bytes: ...


def try_embed_font(backend: DocumentBackend, data: bytes) -> EmbedResult[FontHandle]:
    try:
        return EmbedResult(handle=backend.embed_font(data))
    except FontLoadError as exc:
        return EmbedResult(reason=str(exc) or "font load failed")


def try_embed_image(backend: DocumentBackend, data: bytes) -> EmbedResult[ImageHandle]:
    try:
        return EmbedResult(handle=backend.embed_image(data))
    except ImageDecodeError as exc:
        return EmbedResult(reason=str(exc) or "image decode failed")


# Draw operations -----------------------------------------------------------


@dataclass(frozen=True)
class TextOp:
    text: str
    x: float
    y: float
    size: float
    font: FontHandle
    color: Color = BLACK
    max_width: float | None = None
    line_height: float | None = None

    def apply(self, backend: DocumentBackend) -> None:
        backend.draw_text(
            self.text,
            self.x,
            self.y,
            self.size,
            self.font,
            self.color,
            max_width=self.max_width,
            line_height=self.line_height,
        )


@dataclass(frozen=True)
class LineOp:
    start: Point
    end: Point
    thickness: float
    color: Color = BLACK

    def apply(self, backend: DocumentBackend) -> None:
        backend.draw_line(self.start, self.end, self.thickness, self.color)


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    color: Color

    def apply(self, backend: DocumentBackend) -> None:
        backend.draw_rectangle(self.x, self.y, self.width, self.height, self.color)


@dataclass(frozen=True)
class ImageOp:
    image: ImageHandle
    x: float
    y: float
    width: float
    height: float
    opacity: float = 1.0

    def apply(self, backend: DocumentBackend) -> None:
        backend.draw_image(
            self.image, self.x, self.y, self.width, self.height, opacity=self.opacity
        )


DrawOp = TextOp | LineOp | RectOp | ImageOp


class ReportLabBackend:
    """``DocumentBackend`` on top of a reportlab canvas."""

    def __init__(self, invariant: bool = True):
        self.invariant = invariant
        self._buffer = BytesIO()
        self._canvas: canvas.Canvas | None = None

    @property
    def canvas(self) -> canvas.Canvas:
        if self._canvas is None:
            raise RuntimeError("add_page() must be called before drawing")
        return self._canvas

    def add_page(self, width: float, height: float) -> None:
        if self._canvas is None:
            self._canvas = canvas.Canvas(
                self._buffer, pagesize=(width, height), invariant=int(self.invariant)
            )
        else:
            self._canvas.showPage()
            self._canvas.setPageSize((width, height))

    def standard_font(self, name: str) -> FontHandle:
        if name not in pdfmetrics.standardFonts:
            raise FontLoadError(f"{name} is not a standard font")
        return FontHandle(name)

    def embed_font(self, data: bytes) -> FontHandle:
        digest = hashlib.sha256(data).hexdigest()[:12]
        name = f"CertFont-{digest}"
        if name not in pdfmetrics.getRegisteredFontNames():
            try:
                pdfmetrics.registerFont(TTFont(name, BytesIO(data)))
            except Exception as exc:  # TTFError, struct errors on truncated data
                raise FontLoadError(f"could not load TrueType font: {exc}") from exc
        return FontHandle(name, source=f"ttf:{digest}")

    def embed_image(self, data: bytes) -> ImageHandle:
        try:
            img = Image.open(BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
            raise ImageDecodeError(f"could not decode image: {exc}") from exc
        key = hashlib.sha256(data).hexdigest()[:12]
        return ImageHandle(key=key, width=img.width, height=img.height, reader=ImageReader(img))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        size: float,
        font: FontHandle,
        color: Color = BLACK,
        max_width: float | None = None,
        line_height: float | None = None,
    ) -> None:
        c = self.canvas
        c.setFont(font.name, size)
        c.setFillColorRGB(*color)
        if max_width is None:
            c.drawString(x, y, text)
            return
        step = line_height or size * 1.2
        for index, line in enumerate(simpleSplit(text, font.name, size, max_width)):
            c.drawString(x, y - index * step, line)

    def draw_line(self, start: Point, end: Point, thickness: float, color: Color) -> None:
        c = self.canvas
        c.setLineWidth(thickness)
        c.setStrokeColorRGB(*color)
        c.line(start[0], start[1], end[0], end[1])

    def draw_rectangle(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        c = self.canvas
        c.setFillColorRGB(*color)
        c.rect(x, y, width, height, stroke=0, fill=1)

    def draw_image(
        self,
        image: ImageHandle,
        x: float,
        y: float,
        width: float,
        height: float,
        opacity: float = 1.0,
    ) -> None:
        c = self.canvas
        c.saveState()
        if opacity < 1.0:
            c.setFillAlpha(opacity)
        c.drawImage(image.reader, x, y, width=width, height=height, mask="auto")
        c.restoreState()

    def measure_text_width(self, text: str, font: FontHandle, size: float) -> float:
        return pdfmetrics.stringWidth(text, font.name, size)

    def save(self) -> bytes:
        c = self.canvas
        c.showPage()
        c.save()
        return self._buffer.getvalue()

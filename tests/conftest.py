import hashlib
import logging
import pathlib
import sys
from io import BytesIO

import pytest
from PIL import Image

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from certgen.config import Settings
from certgen.errors import FontLoadError, ImageDecodeError
from certgen.models import CertificateRequest, Year
from certgen.services.backend import FontHandle, ImageHandle
from certgen.services.resources import StaticResourceLoader

TITLE_FONT = "Fonts/oldenglish.ttf"
INSTITUTION_FONT = "Fonts/CinzelDecorative-Bold.ttf"
GOOD_FONT_BYTES = b"fake-ttf:good"


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "slow" in item.keywords or "quarantine" in item.keywords:
            continue
        item.add_marker("full")
        if "no_smoke" in item.keywords:
            continue
        item.add_marker("smoke")


class FakeBackend:
    """In-memory backend with deterministic metrics.

    Text width is ``len(text) * size * factor`` where the factor depends on
    the font name, so different fonts measure differently. Embedded fonts
    succeed only for bytes starting with ``fake-ttf:``.
    """

    FACTORS = {"Times-Roman": 0.5, "Helvetica-Bold": 0.6}
    EMBEDDED_FACTOR = 0.7

    def __init__(self, fail_images: bool = False):
        self.fail_images = fail_images
        self.pages: list[tuple[float, float]] = []
        self.calls: list[tuple] = []
        self.saved = False

    def add_page(self, width, height):
        self.pages.append((width, height))

    def standard_font(self, name):
        return FontHandle(name)

    def embed_font(self, data):
        if not data.startswith(b"fake-ttf:"):
            raise FontLoadError("not a font")
        digest = hashlib.sha256(data).hexdigest()[:8]
        return FontHandle(f"Embedded-{digest}", source=f"ttf:{digest}")

    def embed_image(self, data):
        if self.fail_images:
            raise ImageDecodeError("decoder exploded")
        return ImageHandle(key=hashlib.sha256(data).hexdigest()[:12], width=40, height=20)

    def draw_text(self, text, x, y, size, font, color=(0, 0, 0), max_width=None, line_height=None):
        self.calls.append(("text", text, x, y, size, font.name))

    def draw_line(self, start, end, thickness, color):
        self.calls.append(("line", start, end, thickness))

    def draw_rectangle(self, x, y, width, height, color):
        self.calls.append(("rect", x, y, width, height, color))

    def draw_image(self, image, x, y, width, height, opacity=1.0):
        self.calls.append(("image", image.key, x, y, width, height, opacity))

    def measure_text_width(self, text, font, size):
        factor = self.FACTORS.get(font.name, self.EMBEDDED_FACTOR)
        return len(text) * size * factor

    def save(self):
        self.saved = True
        return b"%PDF-fake"


def make_png(size=(40, 20), color=(0, 128, 0, 255)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_request(**overrides) -> CertificateRequest:
    values = dict(
        student_name="Asha Raman",
        year=Year.III,
        course_name="B.Tech CSE",
        institution_name="PONDICHERRY ENGINEERING COLLEGE",
        visit_date="2024-03-10",
    )
    values.update(overrides)
    return CertificateRequest(**values)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def settings(tmp_path):
    return Settings(assets_dir=str(tmp_path / "assets"), output_dir=str(tmp_path))


@pytest.fixture
def empty_loader():
    return StaticResourceLoader()


@pytest.fixture
def font_loader():
    return StaticResourceLoader(
        {TITLE_FONT: GOOD_FONT_BYTES + b"-title", INSTITUTION_FONT: GOOD_FONT_BYTES + b"-inst"}
    )


@pytest.fixture
def fake_backend_factory():
    created: list[FakeBackend] = []

    def factory(**kwargs):
        def build():
            backend = FakeBackend(**kwargs)
            created.append(backend)
            return backend

        return build

    factory.created = created
    return factory


@pytest.fixture(autouse=True)
def _reset_certgen_logger():
    yield
    logger = logging.getLogger("certgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

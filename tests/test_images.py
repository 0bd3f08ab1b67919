import base64
from io import BytesIO

import pytest
from PIL import Image

from certgen.errors import InvalidImageFormat
from certgen.shared.images import decode_image_payload, ensure_png


def _jpeg_bytes():
    buffer = BytesIO()
    Image.new("RGB", (10, 10), "red").save(buffer, format="JPEG")
    return buffer.getvalue()


def test_decode_accepts_raw_bytes_and_png_data_urls(png_bytes):
    assert decode_image_payload(png_bytes, "logo") == png_bytes
    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    assert decode_image_payload(url, "logo") == png_bytes
    assert decode_image_payload("  ", "logo") is None
    assert decode_image_payload(None, "logo") is None


def test_decode_rejects_non_png_data_urls():
    url = "data:image/jpeg;base64," + base64.b64encode(_jpeg_bytes()).decode("ascii")
    with pytest.raises(InvalidImageFormat) as excinfo:
        decode_image_payload(url, "signature")
    assert excinfo.value.field == "signature"
    assert "signature" in str(excinfo.value)


def test_decode_rejects_broken_base64():
    with pytest.raises(InvalidImageFormat):
        decode_image_payload("data:image/png;base64,@@@", "logo")


def test_ensure_png_accepts_png(png_bytes):
    ensure_png(png_bytes, "logo")


@pytest.mark.parametrize(
    "payload",
    [b"", b"GIF89a not a png", _jpeg_bytes(), b"\x89PNG\r\n\x1a\n" + b"\x00" * 16],
)
def test_ensure_png_rejects_other_content(payload):
    with pytest.raises(InvalidImageFormat) as excinfo:
        ensure_png(payload, "logo")
    assert excinfo.value.field == "logo"
    assert str(excinfo.value).startswith("The logo is not a valid PNG file!")

import pytest

from certgen.config import Settings
from certgen.services.resources import StaticResourceLoader
from certgen.shared.fonts import (
    BODY,
    EMPHASIS,
    INSTITUTION_NAME,
    TITLE,
    FontRole,
    build_font_roles,
    resolve_fonts,
)
from conftest import GOOD_FONT_BYTES, INSTITUTION_FONT, TITLE_FONT, FakeBackend


def test_missing_resources_fall_back_along_the_chain(empty_loader, caplog):
    caplog.set_level("WARNING", logger="certgen.fonts")

    fonts = resolve_fonts(FakeBackend(), empty_loader)

    assert fonts.title.name == "Times-Roman"
    assert fonts.body.name == "Times-Roman"
    assert fonts.emphasis.name == "Helvetica-Bold"
    # The institution role borrows the emphasis font, not the serif default.
    assert fonts.institution_name == fonts.emphasis
    assert set(fonts.fallbacks) == {TITLE, INSTITUTION_NAME}
    assert sum("[CERT-FONT]" in message for message in caplog.messages) == 2


def test_loaded_resources_are_embedded(font_loader):
    fonts = resolve_fonts(FakeBackend(), font_loader)

    assert fonts.title.name.startswith("Embedded-")
    assert fonts.institution_name.name.startswith("Embedded-")
    assert fonts.title != fonts.institution_name
    assert fonts.body.name == "Times-Roman"
    assert not fonts.fallbacks


def test_corrupt_font_bytes_fall_back_without_raising(caplog):
    caplog.set_level("WARNING", logger="certgen.fonts")
    loader = StaticResourceLoader({TITLE_FONT: b"\x00garbage", INSTITUTION_FONT: b"junk"})

    fonts = resolve_fonts(FakeBackend(), loader)

    assert fonts.title.name == "Times-Roman"
    assert fonts.institution_name.name == "Helvetica-Bold"
    assert "not a font" in fonts.fallbacks[TITLE]


def test_fallback_role_uses_the_resolved_font_of_its_target():
    roles = {
        BODY: FontRole(BODY, standard="Times-Roman"),
        EMPHASIS: FontRole(EMPHASIS, resource="bold.ttf", standard="Helvetica-Bold"),
        INSTITUTION_NAME: FontRole(INSTITUTION_NAME, resource="missing.ttf", fallback_role=EMPHASIS),
    }
    loader = StaticResourceLoader({"bold.ttf": GOOD_FONT_BYTES})

    fonts = resolve_fonts(FakeBackend(), loader, roles)

    assert fonts.emphasis.name.startswith("Embedded-")
    assert fonts.institution_name == fonts.emphasis


def test_role_resource_names_follow_settings():
    roles = build_font_roles(Settings(title_font="custom/title.ttf"))
    assert roles[TITLE].resource == "custom/title.ttf"
    assert roles[INSTITUTION_NAME].fallback_role == EMPHASIS


@pytest.mark.no_smoke
def test_fallback_cycles_are_rejected(empty_loader):
    roles = {
        "a": FontRole("a", fallback_role="b"),
        "b": FontRole("b", fallback_role="a"),
    }
    with pytest.raises(ValueError, match="cycle"):
        resolve_fonts(FakeBackend(), empty_loader, roles)


def test_resolved_set_is_read_only(empty_loader):
    fonts = resolve_fonts(FakeBackend(), empty_loader)
    with pytest.raises(TypeError):
        fonts.fonts[TITLE] = fonts.body

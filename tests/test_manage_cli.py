import json
import os

from click.testing import CliRunner

from manage import cli


def _write_request(tmp_path, **extra):
    payload = {
        "studentName": "Asha Raman",
        "year": "III",
        "courseName": "B.Tech CSE",
        "institutionName": "PONDICHERRY ENGINEERING COLLEGE",
        "visitDate": "2024-03-10",
        "duration": "15 days",
        "internshipStartDate": "2024-01-05",
        "internshipEndDate": "2024-01-20",
    }
    payload.update(extra)
    path = tmp_path / "request.json"
    path.write_text(json.dumps(payload))
    return str(path)


def test_gen_cert_writes_named_document(tmp_path, monkeypatch, png_bytes):
    monkeypatch.setenv("CERTGEN_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("CERTGEN_ASSETS_DIR", str(tmp_path / "assets"))
    logo = tmp_path / "logo.png"
    logo.write_bytes(png_bytes)

    result = CliRunner().invoke(cli, ["gen_cert", _write_request(tmp_path), "--logo", str(logo)])

    assert result.exit_code == 0, result.output
    expected = os.path.join(str(tmp_path / "out"), "Asha Raman_Certificate.pdf")
    assert expected in result.output
    with open(expected, "rb") as fh:
        assert fh.read().startswith(b"%PDF")


def test_gen_cert_rejects_non_png_logo(tmp_path, monkeypatch):
    monkeypatch.setenv("CERTGEN_OUTPUT_DIR", str(tmp_path / "out"))
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"definitely not an image")

    result = CliRunner().invoke(cli, ["gen_cert", _write_request(tmp_path), "--logo", str(logo)])

    assert result.exit_code != 0
    assert "The logo is not a valid PNG file!" in result.output
    assert not (tmp_path / "out").exists()


def test_inspect_prints_page_summary(tmp_path, monkeypatch):
    monkeypatch.setenv("CERTGEN_ASSETS_DIR", str(tmp_path / "assets"))
    out = tmp_path / "cert.pdf"
    runner = CliRunner()
    generated = runner.invoke(cli, ["gen_cert", _write_request(tmp_path), "--out", str(out)])
    assert generated.exit_code == 0, generated.output

    result = runner.invoke(cli, ["inspect", str(out)])

    assert result.exit_code == 0, result.output
    assert "pages: 1" in result.output
    assert "page 1: 842x595" in result.output
    assert "in 15 days during the period 05/01/2024 to 20/01/2024" in result.output

import json
import os

import click
from PyPDF2 import PdfReader

from certgen.config import Settings, configure_logging
from certgen.errors import ValidationError
from certgen.models import CertificateRequest
from certgen.shared.certificates import render_certificate
from certgen.utils.storage import write_atomic
from certgen.utils.strings import certificate_filename


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    settings = Settings.from_env()
    configure_logging(settings)
    ctx.obj = settings


@cli.command("gen_cert")
@click.argument("request_json", type=click.File("r"))
@click.option("--logo", "logo_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--signature", "signature_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "out_path", type=click.Path(dir_okay=False))
@click.pass_obj
def gen_cert(settings: Settings, request_json, logo_path, signature_path, out_path):
    """Generate a certificate from a JSON request."""
    try:
        data = json.load(request_json)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid request JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException("Request JSON must be an object")
    for key, path in (("logo", logo_path), ("signature", signature_path)):
        if path:
            with open(path, "rb") as fh:
                data[key] = fh.read()
    try:
        request = CertificateRequest.from_dict(data)
        result = render_certificate(request, settings=settings)
    except (ValidationError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    path = out_path or os.path.join(
        settings.output_dir, certificate_filename(request.student_name)
    )
    write_atomic(path, result.pdf)
    for block, reason in result.skipped:
        click.echo(f"skipped {block}: {reason}", err=True)
    click.echo(path)


@cli.command("inspect")
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
def inspect_pdf(pdf_path: str):
    """Print page count, media box and text of a generated certificate."""
    reader = PdfReader(pdf_path)
    click.echo(f"pages: {len(reader.pages)}")
    for index, page in enumerate(reader.pages, start=1):
        box = page.mediabox
        click.echo(f"page {index}: {float(box.width):g}x{float(box.height):g}")
        click.echo(page.extract_text() or "")


if __name__ == "__main__":
    cli()

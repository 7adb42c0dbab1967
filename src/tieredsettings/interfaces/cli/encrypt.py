from pathlib import Path

import click
from cryptography import x509

from tieredsettings.core.decryption import encrypt_value
from tieredsettings.interfaces.cli.utils import is_debug, output_error


@click.command(name="encrypt")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--cert",
    "cert_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="PEM certificate of the recipient",
)
@click.pass_context
def encrypt(ctx: click.Context, file: Path, cert_path: Path) -> None:
    """Encrypt FILE for a certificate.

    \b
    The output is the content of a secure settings file, e.g.:
        tieredsettings encrypt --cert app.pem DatabaseSettings.json \\
            > .config/Production/DatabaseSettings.json.secure
    """
    try:
        certificate = x509.load_pem_x509_certificate(cert_path.read_bytes())
        click.echo(encrypt_value(file.read_bytes(), certificate))
    except Exception as e:
        output_error(e, debug=is_debug(ctx))

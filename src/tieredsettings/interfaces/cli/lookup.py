import click

from tieredsettings.interfaces.cli.utils import (
    get_resolver,
    is_debug,
    output_error,
    output_result,
)


@click.command(name="lookup")
@click.argument("key")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def lookup(ctx: click.Context, key: str, json_output: bool) -> None:
    """Print the raw value the source chain resolves for KEY.

    \b
    Secure settings are decrypted, so the output may contain secrets.

    \b
    Examples:
        tieredsettings lookup DatabaseSettings
        tieredsettings --precedence Production lookup DatabaseSettings
    """
    try:
        resolver = get_resolver(ctx)
        value = resolver.get_serialized_setting(key)
        if value is None:
            raise click.ClickException(f"No source has a value for key: {key}")
        output_result(value, json_output)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, is_debug(ctx))

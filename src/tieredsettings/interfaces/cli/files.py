import click

from tieredsettings.interfaces.cli.utils import (
    get_resolver,
    is_debug,
    output_error,
    output_result,
)


@click.command(name="files")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def list_files(ctx: click.Context, json_output: bool) -> None:
    """List the files found in the active config directories."""
    try:
        resolver = get_resolver(ctx)
        paths = [str(settings_file.path) for settings_file in resolver.get_files()]
        output_result(paths, json_output)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, is_debug(ctx))

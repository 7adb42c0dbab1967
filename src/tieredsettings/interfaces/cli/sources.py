import click

from tieredsettings.interfaces.cli.utils import (
    get_resolver,
    is_debug,
    output_error,
    output_result,
)


@click.command(name="sources")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def list_sources(ctx: click.Context, json_output: bool) -> None:
    """List the settings sources in the order they are queried."""
    try:
        resolver = get_resolver(ctx)
        names = [source.name for source in resolver.sources]
        if json_output:
            output_result(names, json_output=True)
        else:
            output_result([f"{i}. {name}" for i, name in enumerate(names, start=1)])
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, is_debug(ctx))

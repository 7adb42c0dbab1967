import click

from tieredsettings.core.errors import TieredSettingsError
from tieredsettings.core.resolver import ConfigResolver
from tieredsettings.interfaces.cli.encrypt import encrypt
from tieredsettings.interfaces.cli.files import list_files
from tieredsettings.interfaces.cli.lookup import lookup
from tieredsettings.interfaces.cli.sources import list_sources
from tieredsettings.interfaces.cli.utils import configure_logging, output_error
from tieredsettings.version import PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.option(
    "--root",
    type=click.Path(file_okay=False),
    help="Directory containing the config directory (default: $TIEREDSETTINGS_ROOT or cwd)",
)
@click.option("--config-dir", help="Name of the config directory (default: .config)")
@click.option("--precedence", help="Pipe-delimited tiers, highest precedence first")
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.version_option(PACKAGE_VERSION)
@click.pass_context
def cli(
    ctx: click.Context,
    root: str | None,
    config_dir: str | None,
    precedence: str | None,
    debug: bool,
) -> None:
    """tieredsettings CLI"""
    configure_logging(debug=debug)
    ctx.meta["tieredsettings.debug"] = debug

    try:
        resolver = ConfigResolver(root_directory=root, config_directory_name=config_dir)
    except TieredSettingsError as e:
        output_error(e, debug=debug)
    if precedence:
        resolver.set_precedence(*precedence.split("|"))
    ctx.obj = resolver

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(list_sources)
cli.add_command(lookup)
cli.add_command(list_files)
cli.add_command(encrypt)


if __name__ == "__main__":
    cli()

"""php-integrator CLI."""

import click

from php_integrator.cli.check import check_command
from php_integrator.cli.index import index_command, watch_command
from php_integrator.cli.init import init_command
from php_integrator.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="php-integrator")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """php-integrator - keeps a PHP project's index in step with its sources."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(init_command, name="init")
cli.add_command(check_command, name="check")
cli.add_command(index_command, name="index")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()

"""Create an example secret-files configuration."""

from pathlib import Path

import click

from secret_files.config import ConfigLoadError, create_example_config


@click.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write an example configuration file.

    The file is written to the path given with --config.

    \b
    Examples:
        secret-files init
        secret-files --config tool.yaml init --force
    """
    config_path = ctx.obj["config"]

    if Path(config_path).exists() and not force:
        click.echo(f"Error: {config_path} already exists", err=True)
        click.echo("Use --force to overwrite", err=True)
        raise click.Abort()

    try:
        create_example_config(config_path)
    except ConfigLoadError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Wrote example configuration to {config_path}")

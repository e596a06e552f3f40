"""List the secret files a configuration provisions."""

import click

from secret_files.config import ConfigLoadError, FileSpec, load_config


def _location(spec: FileSpec) -> str:
    if spec.fixed_path:
        return f"fixed path {spec.fixed_path}"
    if spec.filename:
        return f"temp dir as {spec.filename}"
    return "temp dir, random name"


@click.command()
@click.pass_context
def describe(ctx: click.Context) -> None:
    """Show where each configured secret file goes and how it is exposed.

    \b
    Example:
        secret-files describe
    """
    try:
        config = load_config(ctx.obj["config"])
    except ConfigLoadError as e:
        raise click.ClickException(str(e)) from e

    if not config.files:
        click.echo("No files configured.")
        return

    for spec in config.files:
        click.echo(f"{spec.name} (field: {spec.field})")
        click.echo(f"  location: {_location(spec)}")
        if spec.path_env_var:
            click.echo(f"  path env: {spec.path_env_var}")
        if spec.dir_env_var:
            click.echo(f"  dir env:  {spec.dir_env_var}")
        if spec.args is not None:
            click.echo(f"  args:     {' '.join(spec.args)}")

"""Run a command with its secret files provisioned."""

import shlex

import click

from secret_files.config import (
    ConfigLoadError,
    build_provisioners,
    load_config,
    resolve_item_fields,
)
from secret_files.host import (
    CommandNotFound,
    ProvisioningFailed,
    plan_session,
    run_with_secret_files,
)


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the environment and command line without writing files or running",
)
@click.pass_context
def exec_(ctx: click.Context, command: tuple[str, ...], dry_run: bool) -> None:
    """Provision secret files and run COMMAND.

    The command's exit code is passed through. Files are removed once it exits.

    \b
    Examples:
        secret-files exec -- kubectl get pods
        secret-files exec --dry-run -- gcloud auth list
    """
    try:
        config = load_config(ctx.obj["config"])
    except ConfigLoadError as e:
        raise click.ClickException(str(e)) from e

    item_fields = resolve_item_fields(config)
    provisioners = build_provisioners(config)

    try:
        if dry_run:
            with plan_session(provisioners, item_fields, command) as out:
                click.echo("[DRY RUN] Would provision:")
                for path in out.files:
                    click.echo(f"  file: {path}")
                for name, value in out.environment.items():
                    click.echo(f"  env:  {name}={value}")
                click.echo(f"  run:  {shlex.join(out.command_line)}")
            return

        returncode = run_with_secret_files(provisioners, item_fields, command)
    except ProvisioningFailed as e:
        for error in e.errors:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)
    except CommandNotFound as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(127)

    if returncode < 0:
        # Terminated by a signal, report it the way shells do
        returncode = 128 - returncode
    ctx.exit(returncode)

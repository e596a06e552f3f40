"""Main CLI entry point for secret-files."""

import logging
from typing import Optional

import click

from secret_files import __version__
from secret_files.cli.describe import describe as describe_cmd
from secret_files.cli.exec import exec_ as exec_cmd
from secret_files.cli.init import init as init_cmd
from secret_files.config import DEFAULT_CONFIG_PATH

_CONSOLE_HANDLER = "secret-files-console"
_FILE_HANDLER = "secret-files-file"


@click.group()
@click.version_option(version=__version__, prog_name="secret-files")
@click.option(
    "--config",
    type=click.Path(dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    help="Configuration file path",
    show_default=True,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Also write DEBUG logs to this file",
)
@click.pass_context
def cli(ctx: click.Context, config: str, log_level: str, log_file: Optional[str]) -> None:
    """secret-files: provision secrets as files for the commands you run.

    Secrets are written to a private temp dir right before the command starts,
    exposed through environment variables or args, and removed when it exits.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Replace handlers from a previous invocation in the same process
    for handler in list(root_logger.handlers):
        if handler.get_name() in (_CONSOLE_HANDLER, _FILE_HANDLER):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler - user-specified level (stderr, keeps stdout for the command)
    console_handler = logging.StreamHandler()
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(init_cmd, name="init")
cli.add_command(describe_cmd, name="describe")
cli.add_command(exec_cmd, name="exec")


if __name__ == "__main__":
    cli()

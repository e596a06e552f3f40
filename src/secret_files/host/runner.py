"""Run a command with provisioned secret files."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Optional, Sequence

from secret_files.host.session import provision_session
from secret_files.sdk import Provisioner

logger = logging.getLogger(__name__)


class CommandNotFound(Exception):
    """Raised when the command executable does not exist.

    Attributes:
        command: Name of the missing executable
    """

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"command not found: {command}")


def run_with_secret_files(
    provisioners: Sequence[Provisioner],
    item_fields: Dict[str, str],
    command: Sequence[str],
    temp_root: Optional[Path] = None,
) -> int:
    """Provision secret files, run ``command`` and clean up afterwards.

    The child inherits the current environment, overlaid with the variables
    set by the provisioners.

    Returns:
        Exit code of the child process

    Raises:
        ProvisioningFailed: If provisioning or writing the secret files failed
        CommandNotFound: If the command executable does not exist
    """
    with provision_session(provisioners, item_fields, command, temp_root=temp_root) as out:
        env = dict(os.environ)
        env.update(out.environment)
        executable = out.command_line[0] if out.command_line else "<empty>"
        logger.info(f"Running {executable}")
        try:
            result = subprocess.run(out.command_line, env=env)
        except FileNotFoundError as e:
            raise CommandNotFound(executable) from e

    logger.info(f"Command exited with {result.returncode}")
    return result.returncode

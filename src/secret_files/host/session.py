"""Reference host for running provisioners around a child process.

The host owns everything the provisioners only describe: the private temp
directory, writing the secret files with restrictive permissions, and removing
them once the child has exited.
"""

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from secret_files.sdk import (
    DeprovisionInput,
    DeprovisionOutput,
    OutputFile,
    ProvisionInput,
    ProvisionOutput,
    Provisioner,
)

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = "secret-files-"


class ProvisioningFailed(Exception):
    """Raised when one or more provisioners reported errors.

    Attributes:
        errors: Every error collected on the provision output
    """

    def __init__(self, errors: List[Exception]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"provisioning failed with {len(self.errors)} error(s): {details}")


def _run_provisioners(
    provisioners: Sequence[Provisioner],
    item_fields: Dict[str, str],
    command: Sequence[str],
    temp_dir: Path,
) -> ProvisionOutput:
    in_ = ProvisionInput(item_fields=dict(item_fields), temp_dir=temp_dir, home_dir=Path.home())
    out = ProvisionOutput(command_line=list(command))

    for provisioner in provisioners:
        logger.debug(f"Running provisioner: {provisioner.description()}")
        provisioner.provision(in_, out)

    if out.has_errors:
        for error in out.errors:
            logger.error(f"Provisioning error: {error}")
        raise ProvisioningFailed(out.errors)

    return out


def _make_temp_dir(temp_root: Optional[Path]) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=temp_root))
    except OSError as e:
        logger.error(f"Failed to create temp dir: {e}")
        raise ProvisioningFailed([e]) from e


def _write_secret_file(path: Path, output_file: OutputFile) -> None:
    """Write a secret file readable only by the current user."""
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, output_file.mode)
    with os.fdopen(fd, "wb") as f:
        f.write(output_file.contents)
    # O_CREAT mode is ignored for files that already existed
    os.chmod(path, output_file.mode)


def _remove_files(paths: List[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove secret file {path}: {e}")


def _deprovision(
    provisioners: Sequence[Provisioner], item_fields: Dict[str, str], temp_dir: Path
) -> None:
    in_ = DeprovisionInput(temp_dir=temp_dir, item_fields=dict(item_fields))
    out = DeprovisionOutput()
    for provisioner in provisioners:
        provisioner.deprovision(in_, out)
    for error in out.errors:
        logger.error(f"Deprovisioning error: {error}")


@contextmanager
def provision_session(
    provisioners: Sequence[Provisioner],
    item_fields: Dict[str, str],
    command: Sequence[str],
    temp_root: Optional[Path] = None,
) -> Iterator[ProvisionOutput]:
    """Provision secret files for the duration of the ``with`` block.

    Args:
        provisioners: Provisioners to run, in order, against one shared output
        item_fields: Field values available to the provisioners
        command: Child command line the provisioners may append args to
        temp_root: Parent directory for the private temp dir (system default if None)

    Yields:
        ProvisionOutput with the final environment and command line

    Raises:
        ProvisioningFailed: If any provisioner reported an error, or the temp
            dir or a secret file cannot be written

    Example:
        with provision_session([kube], fields, ["kubectl", "get", "pods"]) as out:
            subprocess.run(out.command_line, env={**os.environ, **out.environment})
    """
    temp_dir = _make_temp_dir(temp_root)
    logger.info(f"Created temp dir {temp_dir}")
    written: List[Path] = []

    try:
        out = _run_provisioners(provisioners, item_fields, command, temp_dir)

        for path_str, output_file in out.files.items():
            path = Path(path_str)
            try:
                _write_secret_file(path, output_file)
            except OSError as e:
                logger.error(f"Failed to write secret file {path}: {e}")
                raise ProvisioningFailed([e]) from e
            written.append(path)
            logger.info(f"Wrote secret file {path}")

        yield out
    finally:
        _deprovision(provisioners, item_fields, temp_dir)
        _remove_files(written)
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.info(f"Removed temp dir {temp_dir}")


@contextmanager
def plan_session(
    provisioners: Sequence[Provisioner],
    item_fields: Dict[str, str],
    command: Sequence[str],
    temp_root: Optional[Path] = None,
) -> Iterator[ProvisionOutput]:
    """Like ``provision_session`` but without writing any file (dry run)."""
    temp_dir = _make_temp_dir(temp_root)
    try:
        yield _run_provisioners(provisioners, item_fields, command, temp_dir)
    finally:
        _deprovision(provisioners, item_fields, temp_dir)
        shutil.rmtree(temp_dir, ignore_errors=True)

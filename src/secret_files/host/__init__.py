"""Reference host that writes provisioned files and launches the child process."""

from secret_files.host.runner import CommandNotFound, run_with_secret_files
from secret_files.host.session import (
    ProvisioningFailed,
    plan_session,
    provision_session,
)

__all__ = [
    "CommandNotFound",
    "ProvisioningFailed",
    "plan_session",
    "provision_session",
    "run_with_secret_files",
]

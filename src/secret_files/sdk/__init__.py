"""Types shared between the host and provisioners."""

from secret_files.sdk.types import (
    DeprovisionInput,
    DeprovisionOutput,
    OutputFile,
    ProvisionInput,
    ProvisionOutput,
    Provisioner,
)

__all__ = [
    "DeprovisionInput",
    "DeprovisionOutput",
    "OutputFile",
    "ProvisionInput",
    "ProvisionOutput",
    "Provisioner",
]

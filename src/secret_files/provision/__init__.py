"""Secret file provisioning.

Materializes a secret as a file for a child process and exposes its location
through environment variables and command-line args.
"""

from secret_files.provision.errors import (
    ContentAcquisitionError,
    ProvisionError,
    RandomGenerationError,
    TemplateError,
)
from secret_files.provision.file_provisioner import (
    FileContents,
    FileOption,
    FileProvisioner,
    add_args,
    at_fixed_path,
    field_as_file,
    filename,
    random_filename,
    set_output_dir_as_env_var,
    set_path_as_env_var,
    temp_file,
    with_random_source,
)

__all__ = [
    "ContentAcquisitionError",
    "FileContents",
    "FileOption",
    "FileProvisioner",
    "ProvisionError",
    "RandomGenerationError",
    "TemplateError",
    "add_args",
    "at_fixed_path",
    "field_as_file",
    "filename",
    "random_filename",
    "set_output_dir_as_env_var",
    "set_path_as_env_var",
    "temp_file",
    "with_random_source",
]

"""Secret file provisioner.

Stores a secret as a file right before a child process is launched and tells
the child where to find it. The output path is resolved in this order:

- a fixed path set with ``at_fixed_path``
- a filename set with ``filename``, placed in the host's temp dir
- a random 32-character hex filename, placed in the host's temp dir

The path can then be exported as environment variables (``set_path_as_env_var``,
``set_output_dir_as_env_var``) and/or as command-line args (``add_args``).

Example:
    provisioner = temp_file(
        field_as_file("kubeconfig"),
        filename("config"),
        set_path_as_env_var("KUBECONFIG"),
    )
"""

import dataclasses
import logging
import os
import secrets
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Tuple

from secret_files.provision.errors import (
    ContentAcquisitionError,
    RandomGenerationError,
    TemplateError,
)
from secret_files.provision.templates import render_args
from secret_files.sdk import (
    DeprovisionInput,
    DeprovisionOutput,
    ProvisionInput,
    ProvisionOutput,
    Provisioner,
)

logger = logging.getLogger(__name__)

# Number of random bytes in a generated filename (32 hex characters)
RANDOM_FILENAME_BYTES = 16

RandomSource = Callable[[int], bytes]


class FileContents(Protocol):
    """Produces the contents of the secret file.

    Implementations raise (preferably ``ContentAcquisitionError``) when the
    contents cannot be produced. The output is passed for inspection only.
    """

    def __call__(self, in_: ProvisionInput, out: ProvisionOutput) -> bytes: ...


def field_as_file(field_name: str) -> FileContents:
    """Use the value of a single item field as the file contents."""

    def contents(in_: ProvisionInput, out: ProvisionOutput) -> bytes:
        if field_name not in in_.item_fields:
            raise ContentAcquisitionError(
                f"no value present in the item for field '{field_name}'"
            )
        return in_.item_fields[field_name].encode("utf-8")

    return contents


def random_filename(random_source: RandomSource = secrets.token_bytes) -> str:
    """Generate an unpredictable filename.

    Raises:
        RandomGenerationError: If the random source fails
    """
    try:
        data = random_source(RANDOM_FILENAME_BYTES)
    except Exception as e:
        raise RandomGenerationError(f"generating random file name: {e}") from e

    if len(data) != RANDOM_FILENAME_BYTES:
        raise RandomGenerationError(
            f"generating random file name: expected {RANDOM_FILENAME_BYTES} bytes, "
            f"got {len(data)}"
        )
    return data.hex()


@dataclass(frozen=True)
class FileProvisioner(Provisioner):
    """Provisions a secret as a temporary file.

    Build instances with ``temp_file``; the fields below are set by options.

    Attributes:
        file_contents: Content source for the file
        outfile_name: Filename inside the host temp dir
        outpath_fixed: Fixed output path, takes precedence over ``outfile_name``
        outpath_env_var: Env var receiving the output path
        outdir_env_var: Env var receiving the output directory
        set_outpath_as_arg: Whether ``outpath_arg_templates`` are appended as args
        outpath_arg_templates: Arg templates referencing the output path
        random_source: Secure random byte source for generated filenames
    """

    file_contents: FileContents
    outfile_name: str = ""
    outpath_fixed: str = ""
    outpath_env_var: str = ""
    outdir_env_var: str = ""
    set_outpath_as_arg: bool = False
    outpath_arg_templates: Tuple[str, ...] = ()
    random_source: RandomSource = secrets.token_bytes

    def provision(self, in_: ProvisionInput, out: ProvisionOutput) -> None:
        try:
            contents = self.file_contents(in_, out)
        except ContentAcquisitionError as e:
            out.add_error(e)
            return
        except Exception as e:
            error = ContentAcquisitionError(f"reading file contents: {e}")
            error.__cause__ = e
            out.add_error(error)
            return

        outpath = self._resolve_outpath(in_, out)
        if outpath is None:
            return

        out.add_secret_file(outpath, contents)

        if self.outpath_env_var:
            out.add_env_var(self.outpath_env_var, outpath)

        if self.outdir_env_var:
            out.add_env_var(self.outdir_env_var, os.path.dirname(outpath) or ".")

        if self.set_outpath_as_arg:
            # "--config-file={{ .Path }}" => "--config-file=/tmp/file"
            try:
                args = render_args(self.outpath_arg_templates, outpath)
            except TemplateError as e:
                out.add_error(e)
                return
            out.add_args(*args)

    def _resolve_outpath(self, in_: ProvisionInput, out: ProvisionOutput) -> Optional[str]:
        if self.outpath_fixed:
            logger.debug("Using fixed output path")
            return self.outpath_fixed

        if self.outfile_name:
            logger.debug(f"Using filename {self.outfile_name!r} in temp dir")
            return in_.from_temp_dir(self.outfile_name)

        try:
            name = random_filename(self.random_source)
        except RandomGenerationError as e:
            out.add_error(e)
            return None
        logger.debug("Using random filename in temp dir")
        return in_.from_temp_dir(name)

    def deprovision(self, in_: DeprovisionInput, out: DeprovisionOutput) -> None:
        # Nothing to do: the host removes the files together with its temp dir.
        pass

    def description(self) -> str:
        return "Provision secret file"


FileOption = Callable[[FileProvisioner], FileProvisioner]


def temp_file(file_contents: FileContents, *opts: FileOption) -> FileProvisioner:
    """Create a file provisioner, applying options in order."""
    p = FileProvisioner(file_contents=file_contents)
    for opt in opts:
        p = opt(p)
    return p


def at_fixed_path(path: str) -> FileOption:
    """Store the file at a specific location instead of the host temp dir.

    Useful for executables that can only load credentials from one place.
    """
    return lambda p: dataclasses.replace(p, outpath_fixed=path)


def filename(name: str) -> FileOption:
    """Store the file under a specific name inside the host temp dir.

    Ignored when ``at_fixed_path`` is also set.
    """
    return lambda p: dataclasses.replace(p, outfile_name=name)


def set_path_as_env_var(env_var_name: str) -> FileOption:
    """Export the output path as an environment variable."""
    return lambda p: dataclasses.replace(p, outpath_env_var=env_var_name)


def set_output_dir_as_env_var(env_var_name: str) -> FileOption:
    """Export the directory of the output file as an environment variable."""
    return lambda p: dataclasses.replace(p, outdir_env_var=env_var_name)


def add_args(*arg_templates: str) -> FileOption:
    """Append args to the command line, with the output path available as ``{{ .Path }}``.

    For example:
        add_args("--config-file", "{{ .Path }}") -> --config-file /path/to/tempfile
        add_args("--config-file={{ .Path }}")    -> --config-file=/path/to/tempfile
    """
    return lambda p: dataclasses.replace(
        p, set_outpath_as_arg=True, outpath_arg_templates=tuple(arg_templates)
    )


def with_random_source(random_source: RandomSource) -> FileOption:
    """Replace the secure random source used for generated filenames."""
    return lambda p: dataclasses.replace(p, random_source=random_source)

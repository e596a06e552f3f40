"""Host-facing types exchanged with provisioners.

The host owns the temp directory, the output accumulator and the child
process. Provisioners only read from ``ProvisionInput`` and append to
``ProvisionOutput``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class ProvisionInput:
    """Per-launch input handed to every provisioner.

    Attributes:
        item_fields: Resolved field values by field name
        temp_dir: Private temporary directory created by the host for this launch
        home_dir: Home directory of the invoking user, if known
    """

    item_fields: Dict[str, str]
    temp_dir: Path
    home_dir: Optional[Path] = None

    def from_temp_dir(self, filename: str) -> str:
        """Return the path of ``filename`` inside the launch temp directory."""
        return str(Path(self.temp_dir) / filename)


@dataclass
class OutputFile:
    """A secret file the host must write before launching the child."""

    contents: bytes
    mode: int = 0o600


@dataclass
class ProvisionOutput:
    """Accumulator shared by all provisioners of a single launch.

    Attributes:
        environment: Environment variables to set for the child process
        files: Secret files to write, keyed by absolute path
        command_line: Child argument list; provisioners only append to it
        errors: Failures reported by provisioners
    """

    environment: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, OutputFile] = field(default_factory=dict)
    command_line: List[str] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)

    def add_error(self, error: Exception) -> None:
        self.errors.append(error)

    def add_secret_file(self, path: str, contents: bytes) -> None:
        self.files[path] = OutputFile(contents=contents)

    def add_env_var(self, name: str, value: str) -> None:
        self.environment[name] = value

    def add_args(self, *args: str) -> None:
        self.command_line.extend(args)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass
class DeprovisionInput:
    """Per-launch input handed to provisioners on teardown."""

    temp_dir: Path
    item_fields: Dict[str, str] = field(default_factory=dict)


@dataclass
class DeprovisionOutput:
    """Failures reported while tearing down."""

    errors: List[Exception] = field(default_factory=list)

    def add_error(self, error: Exception) -> None:
        self.errors.append(error)


class Provisioner(ABC):
    """Something that prepares the environment of a child process."""

    @abstractmethod
    def provision(self, in_: ProvisionInput, out: ProvisionOutput) -> None:
        """Append files, environment variables and args to ``out``."""

    @abstractmethod
    def deprovision(self, in_: DeprovisionInput, out: DeprovisionOutput) -> None:
        """Undo whatever ``provision`` did that the host does not clean up."""

    @abstractmethod
    def description(self) -> str:
        """Short human-readable label."""

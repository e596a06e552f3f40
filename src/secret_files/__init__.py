"""secret-files: provision secrets as ephemeral files for wrapped executables.

This package provides a file provisioner that materializes a secret on disk
right before a child process is launched, and exposes the file location to the
child through environment variables or command-line arguments.
"""

__version__ = "0.20261018.0"
__license__ = "MIT"

__all__ = ["__version__", "__license__"]

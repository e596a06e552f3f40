"""Errors reported by the file provisioner."""


class ProvisionError(Exception):
    """Base class for provisioning failures."""

    pass


class ContentAcquisitionError(ProvisionError):
    """Raised when the content source cannot produce the file contents."""

    pass


class RandomGenerationError(ProvisionError):
    """Raised when the secure random source fails while naming a file."""

    pass


class TemplateError(ProvisionError):
    """Raised when an argument template cannot be parsed or rendered.

    Attributes:
        template: The template string that failed
    """

    def __init__(self, message: str, template: str):
        super().__init__(message)
        self.template = template

"""
Errors raised by the grade export pipeline.

Every failure surfaces to the user as a single message; none are retried
automatically.
"""


class ExportError(Exception):
    """Base class for all grade export failures."""


class ValidationError(ExportError):
    """The export request is incomplete; raised before any query runs."""


class FetchError(ExportError):
    """Reading one of the source tables failed."""

    def __init__(self, resource: str, message: str = ""):
        self.resource = resource
        detail = f": {message}" if message else ""
        super().__init__(f"Failed to load {resource}{detail}")


class SaveError(ExportError):
    """The formatted document could not be written to disk."""

    def __init__(self, path, message: str = ""):
        self.path = path
        detail = f": {message}" if message else ""
        super().__init__(f"Could not save {path}{detail}")

"""Exception hierarchy for CloudGraph."""

from __future__ import annotations


class CloudGraphError(Exception):
    """Base class for all CloudGraph errors."""


class ExtractionError(CloudGraphError):
    """Raised when a decoded document is structurally invalid.

    Caught per document by the pipeline and recorded against the source
    file; the rest of the batch keeps processing.
    """

    def __init__(self, message: str, source_file: str = "") -> None:
        super().__init__(message)
        self.source_file = source_file


class SelectorResolutionError(CloudGraphError):
    """Raised when a pending selector target cannot be interpreted.

    Not caught by the pipeline: it aborts the whole run.
    """

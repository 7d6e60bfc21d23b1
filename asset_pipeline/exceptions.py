"""
Custom exception hierarchy for the asset pipeline.

Every error carries the path it concerns (when known) and the pipeline stage
that failed, so a run can report where and why it stopped.
"""
from typing import Optional


class AssetPipelineError(Exception):
    """Base exception for all asset pipeline errors."""

    def __init__(self, message: str, path: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.stage = stage

    def describe(self) -> str:
        parts = []
        if self.stage:
            parts.append(f"[{self.stage}]")
        if self.path:
            parts.append(f"{self.path}:")
        parts.append(self.message)
        return " ".join(parts)


class FileAccessError(AssetPipelineError):
    """Raised when a file cannot be stated, read or written."""
    pass


class MissingFileError(FileAccessError):
    """Raised when a path does not exist."""
    pass


class TransportError(AssetPipelineError):
    """Raised when the remote shrink service cannot be reached."""
    pass


class RemoteError(AssetPipelineError):
    """
    Raised when the shrink service answered but reported a failure.

    `message` holds the provider's own text; `code` its error identifier.
    """

    def __init__(self, message: str, code: Optional[str] = None,
                 path: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message, path=path, stage=stage)
        self.code = code


class UnsupportedTypeError(AssetPipelineError):
    """Raised when compression is requested for a file kind the compressor does not handle."""
    pass


class ConfigurationError(AssetPipelineError):
    """Raised when required configuration (e.g. the API key) is missing."""
    pass

# target_determinator/exceptions.py

from typing import Any, Dict, Optional


class TargetDeterminatorError(Exception):
    """Base class for every error raised by target-determinator."""

    def __init__(self, message: str, code: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ValidationError(TargetDeterminatorError):
    """Invalid user input (flags, revisions, patterns)."""


class LabelParseError(ValidationError):
    """A label or target pattern string is malformed."""


class ConfigurationError(TargetDeterminatorError):
    """Invalid combination of settings or an unusable environment."""


class ProcessError(TargetDeterminatorError):
    """A git or Bazel operation failed."""


class ProcessTimeoutError(ProcessError):
    """A git or Bazel operation did not finish in time."""


class FileSystemError(TargetDeterminatorError):
    """Reading or writing a local file failed."""

class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class InvalidStateError(PipelineError):
    """Raised when a command is issued in a phase that forbids it."""


class CancellationError(PipelineError):
    """Raised from start() when the run was reset or cancelled mid-flight."""


class UnknownStageError(PipelineError, KeyError):
    """Raised when a stage id is not part of the catalog."""

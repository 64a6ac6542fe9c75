class EvaluationError(Exception):
    """Raised when a stage evaluation fails."""


class EvaluationValidationError(EvaluationError):
    """Raised when an evaluator payload fails domain validation."""


class EvaluationNetworkError(EvaluationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class EvaluationTimeoutError(EvaluationError):
    """Raised when a stage evaluation exceeds its time budget."""

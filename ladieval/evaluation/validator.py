"""Validates raw parsed JSON from an evaluator into an EvaluationPayload."""

from typing import Any

from ladieval.evaluation.exceptions import EvaluationValidationError
from ladieval.evaluation.models import EvaluationPayload

MIN_SCORE = 0.0
MAX_SCORE = 10.0


def validate_and_build(data: dict[str, Any]) -> EvaluationPayload:
    """Build a payload from parsed JSON.

    Raises:
        EvaluationValidationError: if content is missing or empty, or score is
            missing, not a number, or outside 0-10.
    """
    for field in ("content", "score"):
        if field not in data:
            raise EvaluationValidationError(f"Missing required field: {field}")
    content = data["content"]
    if not isinstance(content, str) or not content.strip():
        raise EvaluationValidationError("'content' must be a non-empty string")
    return validate_payload(EvaluationPayload(content=content.strip(), score=data["score"]))


def validate_payload(payload: EvaluationPayload) -> EvaluationPayload:
    """Check a payload's score. Returns it with the score coerced to float."""
    score = payload.score
    # bool is an int subclass
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise EvaluationValidationError(f"'score' must be a number, got {score!r}")
    if not MIN_SCORE <= score <= MAX_SCORE:
        raise EvaluationValidationError(
            f"'score' must be between {MIN_SCORE:g} and {MAX_SCORE:g}, got {score}"
        )
    return EvaluationPayload(content=payload.content, score=float(score))

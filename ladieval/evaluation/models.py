from dataclasses import dataclass


@dataclass(frozen=True)
class EvaluationPayload:
    """Scored feedback produced by an evaluator for one stage."""

    content: str
    score: float | None = None

"""Pure score aggregation over a run's result list.

Safe to call at any time, including on the partial list of a running run.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ladieval.pipeline.models import EvaluationResult, StageStatus

EXCELLENT_THRESHOLD = 8.0
GOOD_THRESHOLD = 6.0


@dataclass(frozen=True)
class ResultSummary:
    """Counts and aggregate score for display and export."""

    total: int
    completed: int
    errored: int
    average_score: float
    average_percentage: int

    @property
    def all_succeeded(self) -> bool:
        return self.completed > 0 and self.errored == 0

    @property
    def has_failures(self) -> bool:
        return self.errored > 0

    @property
    def exportable(self) -> bool:
        """A report can be exported once at least one stage completed."""
        return self.completed > 0


def completed_results(results: Iterable[EvaluationResult]) -> list[EvaluationResult]:
    return [r for r in results if r.status is StageStatus.COMPLETED]


def errored_results(results: Iterable[EvaluationResult]) -> list[EvaluationResult]:
    return [r for r in results if r.status is StageStatus.ERROR]


def average_score(results: Iterable[EvaluationResult]) -> float:
    """Mean score of completed results, rounded half-up to one decimal. 0.0 if none."""
    scores = [r.score for r in completed_results(results) if r.score is not None]
    if not scores:
        return 0.0
    return _round_half_up(sum(scores) / len(scores), digits=1)


def average_percentage(results: Iterable[EvaluationResult]) -> int:
    percentage = int(_round_half_up(average_score(results) * 10))
    return max(0, min(100, percentage))


def score_percentage(score: float | None) -> float:
    if score is None:
        return 0.0
    return score * 10


def score_label(score: float | None) -> str:
    if score is None:
        return "N/A"
    if score >= EXCELLENT_THRESHOLD:
        return "Excellent"
    if score >= GOOD_THRESHOLD:
        return "Good"
    return "Needs Improvement"


def summarize(results: Sequence[EvaluationResult]) -> ResultSummary:
    return ResultSummary(
        total=len(results),
        completed=len(completed_results(results)),
        errored=len(errored_results(results)),
        average_score=average_score(results),
        average_percentage=average_percentage(results),
    )


def _round_half_up(value: float, digits: int = 0) -> float:
    # round() is banker's rounding; scores need 7.25 -> 7.3
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor

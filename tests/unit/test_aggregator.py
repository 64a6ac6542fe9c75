import pytest

from ladieval.pipeline.aggregator import (
    average_percentage,
    average_score,
    completed_results,
    errored_results,
    score_label,
    score_percentage,
    summarize,
)
from ladieval.pipeline.models import EvaluationResult, StageStatus


def _completed(stage_id: str, score: float) -> EvaluationResult:
    return EvaluationResult(
        stage_id=stage_id,
        name=stage_id.title(),
        description="",
        content="feedback",
        status=StageStatus.COMPLETED,
        score=score,
    )


def _errored(stage_id: str) -> EvaluationResult:
    return EvaluationResult(
        stage_id=stage_id,
        name=stage_id.title(),
        description="",
        content="provider down",
        status=StageStatus.ERROR,
    )


class TestFilters:
    def test_splits_completed_and_errored(self) -> None:
        results = [_completed("a", 7), _errored("b"), _completed("c", 9)]

        assert [r.stage_id for r in completed_results(results)] == ["a", "c"]
        assert [r.stage_id for r in errored_results(results)] == ["b"]


class TestAverageScore:
    def test_empty_list_is_zero(self) -> None:
        assert average_score([]) == 0
        assert average_percentage([]) == 0

    def test_all_errors_is_zero(self) -> None:
        results = [_errored("a"), _errored("b")]
        assert average_score(results) == 0
        assert average_percentage(results) == 0

    def test_six_eight_ten(self) -> None:
        results = [_completed("a", 6), _completed("b", 8), _completed("c", 10)]
        assert average_score(results) == 8.0
        assert average_percentage(results) == 80

    def test_ignores_errored_results(self) -> None:
        results = [_completed("a", 7), _errored("b"), _completed("c", 9)]
        assert average_score(results) == 8.0

    def test_rounds_half_up_to_one_decimal(self) -> None:
        results = [_completed("a", 7), _completed("b", 7.5)]
        assert average_score(results) == 7.3
        assert average_percentage(results) == 73

    def test_rounds_down_below_half(self) -> None:
        results = [_completed("a", 7), _completed("b", 7), _completed("c", 8)]
        assert average_score(results) == 7.3

    def test_perfect_scores_cap_at_100(self) -> None:
        assert average_percentage([_completed("a", 10)]) == 100


class TestScoreLabels:
    @pytest.mark.parametrize(
        ("score", "label"),
        [
            (None, "N/A"),
            (10.0, "Excellent"),
            (8.0, "Excellent"),
            (7.9, "Good"),
            (6.0, "Good"),
            (5.9, "Needs Improvement"),
            (0.0, "Needs Improvement"),
        ],
    )
    def test_label(self, score: float | None, label: str) -> None:
        assert score_label(score) == label

    def test_percentage(self) -> None:
        assert score_percentage(7.0) == 70
        assert score_percentage(None) == 0


class TestSummarize:
    def test_partial_failure(self) -> None:
        summary = summarize([_completed("a", 6), _errored("b"), _completed("c", 8)])

        assert summary.total == 3
        assert summary.completed == 2
        assert summary.errored == 1
        assert summary.average_score == 7.0
        assert summary.average_percentage == 70
        assert summary.has_failures
        assert not summary.all_succeeded
        assert summary.exportable

    def test_total_failure_is_not_exportable(self) -> None:
        summary = summarize([_errored("a"), _errored("b")])

        assert summary.completed == 0
        assert not summary.exportable
        assert not summary.all_succeeded

    def test_all_succeeded(self) -> None:
        summary = summarize([_completed("a", 9)])
        assert summary.all_succeeded
        assert not summary.has_failures

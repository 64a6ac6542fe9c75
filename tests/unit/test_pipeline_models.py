import pytest

from ladieval.evaluation.models import EvaluationPayload
from ladieval.pipeline.catalog import STAGE_CATALOG
from ladieval.pipeline.exceptions import InvalidStateError
from ladieval.pipeline.models import (
    EvaluationResult,
    RunPhase,
    RunState,
    StageRunState,
    StageStatus,
)


class TestStageRunStateTransitions:
    @pytest.mark.parametrize("final", [StageStatus.COMPLETED, StageStatus.ERROR])
    def test_forward_transitions(self, final: StageStatus) -> None:
        state = StageRunState(stage_id="plot-evaluation")

        processing = state.advance(StageStatus.PROCESSING)
        finished = processing.advance(final)

        assert state.status is StageStatus.PENDING
        assert processing.status is StageStatus.PROCESSING
        assert finished.status is final

    @pytest.mark.parametrize(
        ("start", "target"),
        [
            (StageStatus.PENDING, StageStatus.COMPLETED),
            (StageStatus.PENDING, StageStatus.ERROR),
            (StageStatus.PROCESSING, StageStatus.PENDING),
            (StageStatus.COMPLETED, StageStatus.PROCESSING),
            (StageStatus.ERROR, StageStatus.COMPLETED),
            (StageStatus.COMPLETED, StageStatus.COMPLETED),
        ],
    )
    def test_rejects_other_transitions(self, start: StageStatus, target: StageStatus) -> None:
        with pytest.raises(InvalidStateError, match="cannot move"):
            StageRunState(stage_id="plot-evaluation", status=start).advance(target)


class TestEvaluationResult:
    def test_completed_copies_stage_and_payload(self) -> None:
        stage = STAGE_CATALOG[1]
        result = EvaluationResult.completed(stage, EvaluationPayload(content="Tight.", score=8.5))

        assert result.stage_id == stage.id
        assert result.name == stage.name
        assert result.description == stage.description
        assert result.content == "Tight."
        assert result.score == 8.5
        assert result.status is StageStatus.COMPLETED

    def test_failed_has_no_score(self) -> None:
        result = EvaluationResult.failed(STAGE_CATALOG[0], "timed out")

        assert result.status is StageStatus.ERROR
        assert result.score is None
        assert result.content == "timed out"


class TestRunStateInitial:
    def test_builds_pending_stages(self) -> None:
        state = RunState.initial(STAGE_CATALOG)

        assert len(state.stages) == len(STAGE_CATALOG)
        assert state.phase is RunPhase.IDLE
        assert not state.has_document
        assert not state.is_running
        assert state.finished_stage_count == 0
        assert state.current_stage_name is None

    def test_stage_names_are_read_only(self) -> None:
        state = RunState.initial(STAGE_CATALOG)
        with pytest.raises(TypeError):
            state.stage_names["plot-evaluation"] = "x"  # type: ignore[index]

    def test_unknown_stage_status_raises(self) -> None:
        with pytest.raises(KeyError):
            RunState.initial(STAGE_CATALOG).stage_status("epilogue")

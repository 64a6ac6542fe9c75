from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.models import EvaluationPayload
from ladieval.pipeline.catalog import Stage
from ladieval.pipeline.exceptions import InvalidStateError


class StageStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_finished(self) -> bool:
        return self in (StageStatus.COMPLETED, StageStatus.ERROR)


class RunPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


_ALLOWED_TRANSITIONS: dict[StageStatus, frozenset[StageStatus]] = {
    StageStatus.PENDING: frozenset({StageStatus.PROCESSING}),
    StageStatus.PROCESSING: frozenset({StageStatus.COMPLETED, StageStatus.ERROR}),
    StageStatus.COMPLETED: frozenset(),
    StageStatus.ERROR: frozenset(),
}


@dataclass(frozen=True)
class StageRunState:
    """Status of one stage within the current run."""

    stage_id: str
    status: StageStatus = StageStatus.PENDING

    def advance(self, status: StageStatus) -> StageRunState:
        """Return a copy moved forward to `status`.

        Raises:
            InvalidStateError: on any transition other than
                pending -> processing -> completed | error.
        """
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateError(
                f"Stage '{self.stage_id}' cannot move from "
                f"{self.status.value} to {status.value}"
            )
        return StageRunState(stage_id=self.stage_id, status=status)


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of one stage. Completed results always carry a score, errors never do."""

    stage_id: str
    name: str
    description: str
    content: str
    status: StageStatus
    score: float | None = None

    @classmethod
    def completed(cls, stage: Stage, payload: EvaluationPayload) -> EvaluationResult:
        return cls(
            stage_id=stage.id,
            name=stage.name,
            description=stage.description,
            content=payload.content,
            status=StageStatus.COMPLETED,
            score=payload.score,
        )

    @classmethod
    def failed(cls, stage: Stage, message: str) -> EvaluationResult:
        return cls(
            stage_id=stage.id,
            name=stage.name,
            description=stage.description,
            content=message,
            status=StageStatus.ERROR,
        )


@dataclass(frozen=True)
class RunState:
    """Immutable snapshot of the single active evaluation run."""

    document: DocumentHandle | None
    stages: tuple[StageRunState, ...]
    results: tuple[EvaluationResult, ...] = ()
    overall_progress: float = 0.0
    current_stage_id: str | None = None
    phase: RunPhase = RunPhase.IDLE
    stage_names: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )

    @classmethod
    def initial(
        cls,
        stages: Sequence[Stage],
        document: DocumentHandle | None = None,
    ) -> RunState:
        return cls(
            document=document,
            stages=tuple(StageRunState(stage_id=stage.id) for stage in stages),
            stage_names=MappingProxyType({stage.id: stage.name for stage in stages}),
        )

    @property
    def has_document(self) -> bool:
        return self.document is not None

    @property
    def is_running(self) -> bool:
        return self.phase is RunPhase.RUNNING

    @property
    def finished_stage_count(self) -> int:
        return sum(1 for stage in self.stages if stage.status.is_finished)

    @property
    def current_stage_name(self) -> str | None:
        """Display name of the stage being evaluated, if any."""
        if self.current_stage_id is None:
            return None
        return self.stage_names.get(self.current_stage_id)

    def stage_status(self, stage_id: str) -> StageStatus:
        for stage in self.stages:
            if stage.stage_id == stage_id:
                return stage.status
        raise KeyError(stage_id)

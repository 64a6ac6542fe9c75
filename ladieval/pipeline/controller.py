import asyncio
from collections.abc import Callable, Sequence
from dataclasses import replace

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.base import BaseEvaluator
from ladieval.evaluation.exceptions import EvaluationError, EvaluationTimeoutError
from ladieval.evaluation.models import EvaluationPayload
from ladieval.evaluation.validator import validate_payload
from ladieval.logging.logger import Log
from ladieval.pipeline.aggregator import ResultSummary, summarize
from ladieval.pipeline.catalog import STAGE_CATALOG, Stage
from ladieval.pipeline.exceptions import CancellationError, InvalidStateError
from ladieval.pipeline.models import (
    EvaluationResult,
    RunPhase,
    RunState,
    StageRunState,
    StageStatus,
)

StateListener = Callable[[RunState], None]


class PipelineController:
    """Runs one manuscript through the evaluation stages, one stage at a time.

    Owns the single active RunState. Every transition replaces the snapshot
    and notifies subscribers, so presentation code only ever sees immutable
    states in stage order.

    Lifecycle: select_document -> start -> (completed) -> select_document or
    reset. A stage that fails is recorded as an error result and the run moves
    on to the next stage. reset() and cancel() abort a running run; the
    pending start() then raises CancellationError and any late evaluator
    outcome is dropped.
    """

    def __init__(
        self,
        evaluator: BaseEvaluator,
        stages: Sequence[Stage] = STAGE_CATALOG,
        stage_timeout_seconds: float | None = None,
    ) -> None:
        if not stages:
            raise ValueError("At least one stage is required")
        if stage_timeout_seconds is not None and stage_timeout_seconds <= 0:
            raise ValueError("stage_timeout_seconds must be positive")
        self._evaluator = evaluator
        self._stages = tuple(stages)
        self._stage_timeout_seconds = stage_timeout_seconds
        self._state = RunState.initial(self._stages)
        self._listeners: list[StateListener] = []
        # bumped on every start/reset/cancel; outcomes from an older run are dropped
        self._generation = 0
        self._inflight: asyncio.Task[EvaluationPayload] | None = None

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def results(self) -> tuple[EvaluationResult, ...]:
        return self._state.results

    def get_state(self) -> RunState:
        return self._state

    def summary(self) -> ResultSummary:
        return summarize(self._state.results)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener for every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def select_document(self, document: DocumentHandle) -> None:
        self._require_not_running("select a document")
        self._publish(RunState.initial(self._stages, document))
        Log.info("Document selected", document=document.name, size=document.size_bytes)

    def remove_document(self) -> None:
        self._require_not_running("remove the document")
        self._publish(RunState.initial(self._stages))
        Log.info("Document removed")

    def reset(self) -> None:
        """Return to the initial idle state from any phase, dropping the document."""
        if self._state.is_running:
            run = self._generation
            self._abort_run()
            Log.info("Evaluation run reset while running", run=run)
        self._publish(RunState.initial(self._stages))

    def cancel(self) -> None:
        """Abort a running run but keep the selected document. No-op otherwise."""
        if not self._state.is_running:
            return
        document = self._state.document
        run = self._generation
        self._abort_run()
        Log.info("Evaluation run cancelled", run=run)
        self._publish(RunState.initial(self._stages, document))

    async def start(self) -> RunState:
        """Evaluate the selected document against every stage in order.

        Returns:
            The completed RunState.

        Raises:
            InvalidStateError: if no document is selected or the phase is not idle.
            CancellationError: if reset() or cancel() aborted this run.
        """
        state = self._state
        if state.document is None:
            raise InvalidStateError("Cannot start: no document selected")
        if state.phase is not RunPhase.IDLE:
            raise InvalidStateError(f"Cannot start while phase is {state.phase.value}")

        document = state.document
        self._generation += 1
        generation = self._generation
        Log.info(
            "Evaluation run started",
            run=generation,
            document=document.name,
            stages=len(self._stages),
        )
        self._publish(replace(state, phase=RunPhase.RUNNING))

        try:
            for index, stage in enumerate(self._stages):
                self._ensure_current(generation, stage.id)
                self._mark_processing(index, stage)
                # a listener may have reset or cancelled on the processing snapshot
                self._ensure_current(generation, stage.id)
                result = await self._run_stage(document, stage, generation)
                self._record(index, result)
        except asyncio.CancelledError:
            # the task awaiting start() was cancelled from outside
            if generation == self._generation:
                Log.warning("Evaluation run interrupted", run=generation)
                self._abort_run()
                self._publish(RunState.initial(self._stages, document))
            raise

        self._ensure_current(generation, None)
        final = replace(self._state, phase=RunPhase.COMPLETED, current_stage_id=None)
        self._publish(final)
        summary = summarize(final.results)
        Log.info(
            "Evaluation run completed",
            run=generation,
            completed=summary.completed,
            errored=summary.errored,
            average_score=summary.average_score,
        )
        return final

    async def _run_stage(
        self,
        document: DocumentHandle,
        stage: Stage,
        generation: int,
    ) -> EvaluationResult:
        task = asyncio.ensure_future(self._evaluate(document, stage))
        self._inflight = task
        try:
            payload = await task
        except asyncio.CancelledError:
            self._ensure_current(generation, stage.id)
            raise
        except EvaluationError as exc:
            self._ensure_current(generation, stage.id)
            Log.warning("Stage failed", run=generation, stage=stage.id, error=exc)
            return EvaluationResult.failed(stage, str(exc))
        except Exception as exc:
            self._ensure_current(generation, stage.id)
            Log.exception("Stage raised unexpected error", run=generation, stage=stage.id)
            return EvaluationResult.failed(stage, f"Unexpected evaluator error: {exc}")
        finally:
            if self._inflight is task:
                self._inflight = None

        self._ensure_current(generation, stage.id)
        Log.info("Stage completed", run=generation, stage=stage.id, score=payload.score)
        return EvaluationResult.completed(stage, payload)

    async def _evaluate(self, document: DocumentHandle, stage: Stage) -> EvaluationPayload:
        try:
            payload = await asyncio.wait_for(
                self._evaluator.evaluate(document, stage),
                timeout=self._stage_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise EvaluationTimeoutError(
                f"Stage '{stage.id}' timed out after {self._stage_timeout_seconds}s"
            ) from exc
        return validate_payload(payload)

    def _mark_processing(self, index: int, stage: Stage) -> None:
        state = self._state
        stages = self._advance(state.stages, index, StageStatus.PROCESSING)
        self._publish(replace(state, stages=stages, current_stage_id=stage.id))
        Log.info("Stage started", stage=stage.id, position=f"{index + 1}/{len(stages)}")

    def _record(self, index: int, result: EvaluationResult) -> None:
        state = self._state
        stages = self._advance(state.stages, index, result.status)
        finished = sum(1 for s in stages if s.status.is_finished)
        self._publish(
            replace(
                state,
                stages=stages,
                results=state.results + (result,),
                overall_progress=100 * finished / len(stages),
            )
        )

    @staticmethod
    def _advance(
        stages: tuple[StageRunState, ...],
        index: int,
        status: StageStatus,
    ) -> tuple[StageRunState, ...]:
        updated = list(stages)
        updated[index] = updated[index].advance(status)
        return tuple(updated)

    def _abort_run(self) -> None:
        self._generation += 1
        task = self._inflight
        self._inflight = None
        if task is not None and not task.done():
            task.cancel()

    def _ensure_current(self, generation: int, stage_id: str | None) -> None:
        if generation == self._generation:
            return
        Log.info("Discarding outcome of aborted run", run=generation, stage=stage_id)
        raise CancellationError(f"Evaluation run {generation} was aborted")

    def _require_not_running(self, action: str) -> None:
        if self._state.is_running:
            raise InvalidStateError(f"Cannot {action} while an evaluation is running")

    def _publish(self, state: RunState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                Log.exception("State listener failed")

"""Offline evaluator for local development and demos.

Produces canned feedback and scores without any network calls. Use it as a
reference when implementing new evaluators: subclass BaseEvaluator and
register the provider in EvaluatorFactory.
"""

import asyncio
import random
from collections.abc import Iterable

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.base import BaseEvaluator
from ladieval.evaluation.exceptions import EvaluationError
from ladieval.evaluation.models import EvaluationPayload
from ladieval.pipeline.catalog import Stage

FEEDBACK_TEMPLATE = (
    "This is a comprehensive evaluation of the {aspect} aspect of '{document}'. "
    "The analysis reveals several strengths and areas for improvement. Overall, "
    "the document demonstrates good potential with room for enhancement in "
    "specific areas."
)


class ExampleEvaluator(BaseEvaluator):
    """Returns scores between 6 and 9 after an optional delay.

    Scores come from a private random.Random, so a fixed seed gives the same
    scores for the same sequence of calls.
    """

    MIN_SCORE = 6
    MAX_SCORE = 9

    def __init__(
        self,
        *,
        delay_seconds: float = 0.0,
        seed: int | None = None,
        failing_stage_ids: Iterable[str] = (),
    ) -> None:
        self._delay_seconds = delay_seconds
        self._random = random.Random(seed)
        self._failing_stage_ids = frozenset(failing_stage_ids)

    async def evaluate(self, document: DocumentHandle, stage: Stage) -> EvaluationPayload:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        if stage.id in self._failing_stage_ids:
            raise EvaluationError(f"Example evaluator configured to fail '{stage.id}'")
        return EvaluationPayload(
            content=FEEDBACK_TEMPLATE.format(aspect=stage.name.lower(), document=document.name),
            score=float(self._random.randint(self.MIN_SCORE, self.MAX_SCORE)),
        )

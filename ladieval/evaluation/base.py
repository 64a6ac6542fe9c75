from abc import ABC, abstractmethod

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.models import EvaluationPayload
from ladieval.pipeline.catalog import Stage


class BaseEvaluator(ABC):
    """Contract for all stage evaluators."""

    @abstractmethod
    async def evaluate(self, document: DocumentHandle, stage: Stage) -> EvaluationPayload:
        """Evaluate one manuscript against one stage's criterion.

        May suspend for a long time. Implementations must let
        asyncio.CancelledError propagate so a reset can abort the call.

        Returns:
            EvaluationPayload with feedback content and a 0-10 score.

        Raises:
            EvaluationError: on any failure.
        """

    async def aclose(self) -> None:
        """Release provider resources. Evaluators without any keep this no-op."""

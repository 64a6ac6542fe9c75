from ladieval.evaluation.base import BaseEvaluator
from ladieval.evaluation.factory import EvaluatorFactory
from ladieval.evaluation.llm_evaluator import LlmEvaluator
from ladieval.evaluation.models import EvaluationPayload

__all__ = ["BaseEvaluator", "EvaluationPayload", "EvaluatorFactory", "LlmEvaluator"]

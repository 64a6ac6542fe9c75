"""AI-powered stage evaluator."""

import json
from collections.abc import Callable
from pathlib import Path

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.base import BaseEvaluator
from ladieval.evaluation.client_base import BaseEvaluationClient
from ladieval.evaluation.exceptions import EvaluationError
from ladieval.evaluation.models import EvaluationPayload
from ladieval.evaluation.prompt_loader import load_json_schema, load_prompt_template
from ladieval.evaluation.validator import validate_and_build
from ladieval.logging.logger import Log
from ladieval.pipeline.catalog import Stage

TextExtractor = Callable[[DocumentHandle], str]

DEFAULT_SYSTEM_PROMPT = (
    "You are an experienced developmental editor. "
    "You answer with JSON only."
)


def decode_text(document: DocumentHandle) -> str:
    """Fallback extractor: treat the document bytes as UTF-8 text."""
    return document.content.decode("utf-8", errors="replace")


class LlmEvaluator(BaseEvaluator):
    """Evaluates a manuscript one stage at a time using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseEvaluationClient,
        model: str,
        temperature: float = 0.2,
        max_document_chars: int = 200_000,
        text_extractor: TextExtractor = decode_text,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_document_chars = max_document_chars
        self._text_extractor = text_extractor
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._json_schema, self._json_schema_dict = load_json_schema(json_schema_path)

    async def evaluate(self, document: DocumentHandle, stage: Stage) -> EvaluationPayload:
        prompt = self._build_prompt(document, stage)
        Log.debug(f"Evaluation prompt for {stage.id}:\n{prompt}")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )
        Log.debug(f"AI raw response for {stage.id}:\n{raw_response}")

        return validate_and_build(self._parse_json(raw_response))

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_prompt(self, document: DocumentHandle, stage: Stage) -> str:
        text = self._text_extractor(document)
        if len(text) > self._max_document_chars:
            Log.warning(
                "Manuscript truncated for evaluation",
                document=document.name,
                chars=len(text),
                limit=self._max_document_chars,
            )
            text = text[: self._max_document_chars]
        return self._prompt_template.format(
            document_name=document.name,
            stage_name=stage.name,
            stage_description=stage.description,
            manuscript=text,
            json_schema=self._json_schema,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise EvaluationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise EvaluationError("JSON response must be an object")
        return parsed

"""Tests for the LlmEvaluator (AI-powered stage evaluation)."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from ladieval.document.models import DocumentHandle
from ladieval.evaluation.exceptions import EvaluationError, EvaluationValidationError
from ladieval.evaluation.llm_evaluator import LlmEvaluator
from ladieval.pipeline.catalog import STAGE_CATALOG

PLOT = STAGE_CATALOG[1]


def _make_evaluator(
    response: str,
    **kwargs: object,
) -> tuple[LlmEvaluator, AsyncMock]:
    client = AsyncMock()
    client.create_chat_completion.return_value = response
    evaluator = LlmEvaluator(client=client, model="gpt-test", **kwargs)
    return evaluator, client


class TestEvaluate:
    @pytest.mark.asyncio
    async def test_returns_validated_payload(self, manuscript: DocumentHandle) -> None:
        evaluator, _client = _make_evaluator(
            json.dumps({"content": "Pacing sags in act two.", "score": 6.5})
        )

        payload = await evaluator.evaluate(manuscript, PLOT)

        assert payload.content == "Pacing sags in act two."
        assert payload.score == 6.5

    @pytest.mark.asyncio
    async def test_prompt_contains_stage_and_manuscript(self, manuscript: DocumentHandle) -> None:
        evaluator, client = _make_evaluator('{"content": "ok", "score": 7}')

        await evaluator.evaluate(manuscript, PLOT)

        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert "Plot Evaluation" in kwargs["user_prompt"]
        assert PLOT.description in kwargs["user_prompt"]
        assert "lighthouse keeper" in kwargs["user_prompt"]
        assert "lighthouse.docx" in kwargs["user_prompt"]
        assert kwargs["json_schema"]["required"] == ["content", "score"]

    @pytest.mark.asyncio
    async def test_strips_markdown_fences(self, manuscript: DocumentHandle) -> None:
        evaluator, _client = _make_evaluator('```json\n{"content": "ok", "score": 9}\n```')

        payload = await evaluator.evaluate(manuscript, PLOT)

        assert payload.score == 9.0

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, manuscript: DocumentHandle) -> None:
        evaluator, _client = _make_evaluator("not json")

        with pytest.raises(EvaluationError, match="Invalid JSON"):
            await evaluator.evaluate(manuscript, PLOT)

    @pytest.mark.asyncio
    async def test_non_object_json_raises(self, manuscript: DocumentHandle) -> None:
        evaluator, _client = _make_evaluator("[1, 2]")

        with pytest.raises(EvaluationError, match="must be an object"):
            await evaluator.evaluate(manuscript, PLOT)

    @pytest.mark.asyncio
    async def test_out_of_range_score_raises(self, manuscript: DocumentHandle) -> None:
        evaluator, _client = _make_evaluator('{"content": "ok", "score": 12}')

        with pytest.raises(EvaluationValidationError):
            await evaluator.evaluate(manuscript, PLOT)

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self, manuscript: DocumentHandle) -> None:
        evaluator, client = _make_evaluator("")
        client.create_chat_completion.side_effect = EvaluationError("network down")

        with pytest.raises(EvaluationError, match="network down"):
            await evaluator.evaluate(manuscript, PLOT)


    @pytest.mark.asyncio
    async def test_aclose_closes_client(self) -> None:
        evaluator, client = _make_evaluator("")

        await evaluator.aclose()

        client.aclose.assert_awaited_once()


class TestPromptBuilding:
    @pytest.mark.asyncio
    async def test_truncates_long_manuscripts(self) -> None:
        document = DocumentHandle(name="long.doc", size_bytes=50, content=b"a" * 40 + b"b" * 10)
        evaluator, client = _make_evaluator('{"content": "ok", "score": 5}', max_document_chars=40)

        await evaluator.evaluate(document, PLOT)

        prompt = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "a" * 40 in prompt
        assert "b" not in prompt.split("<<<")[1]

    @pytest.mark.asyncio
    async def test_uses_custom_text_extractor(self, manuscript: DocumentHandle) -> None:
        evaluator, client = _make_evaluator(
            '{"content": "ok", "score": 5}',
            text_extractor=lambda _doc: "EXTRACTED TEXT",
        )

        await evaluator.evaluate(manuscript, PLOT)

        prompt = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "EXTRACTED TEXT" in prompt
        assert "lighthouse keeper" not in prompt

    def test_clamps_temperature(self) -> None:
        evaluator, _client = _make_evaluator("", temperature=3.0)
        assert evaluator._temperature == 1.0

    def test_custom_template(self, tmp_path: Path) -> None:
        template = tmp_path / "prompt.txt"
        template.write_text("{stage_name}|{manuscript}", encoding="utf-8")
        evaluator, _client = _make_evaluator("", prompt_template_path=template)

        prompt = evaluator._build_prompt(
            DocumentHandle(name="x.pdf", size_bytes=2, content=b"hi"), PLOT
        )

        assert prompt == "Plot Evaluation|hi"

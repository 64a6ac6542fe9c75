"""Bundled prompt resources for the AI evaluator.

Both files ship as package data under prompts/. Callers may point at their
own copies; a missing or unreadable file surfaces as EvaluationError so the
factory fails before any stage runs.
"""

import json
from pathlib import Path

from ladieval.evaluation.exceptions import EvaluationError

PROMPTS_DIR = Path(__file__).parent / "prompts"
PROMPT_TEMPLATE_FILE = "evaluation_prompt.txt"
JSON_SCHEMA_FILE = "evaluation_schema.json"


def _read_bundled(file_name: str, path: Path | None, label: str) -> str:
    source = path if path is not None else PROMPTS_DIR / file_name
    try:
        return source.read_text(encoding="utf-8")
    except OSError as exc:
        raise EvaluationError(f"Failed to load {label}: {exc}") from exc


def load_prompt_template(path: Path | None = None) -> str:
    """Template with {document_name}, {stage_name}, {stage_description}, {json_schema}, {manuscript}."""
    return _read_bundled(PROMPT_TEMPLATE_FILE, path, "prompt template")


def load_json_schema(path: Path | None = None) -> tuple[str, dict[str, object]]:
    """Return the response schema both as raw text for the prompt and parsed for the API call.

    Raises:
        EvaluationError: if the file cannot be read or is not a JSON object.
    """
    raw = _read_bundled(JSON_SCHEMA_FILE, path, "JSON schema")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EvaluationError(f"JSON schema is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise EvaluationError("JSON schema must be an object")
    return raw, parsed

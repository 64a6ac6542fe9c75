"""Command-line entry point: evaluate one manuscript and print the report.

Usage:
    python -m ladieval.main manuscript.docx
    python -m ladieval.main manuscript.pdf --provider openai --timeout 300
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from ladieval.config.settings import Settings
from ladieval.document.exceptions import DocumentError
from ladieval.document.loader import load_document
from ladieval.document.validator import format_file_size, is_plain_text, validate_document
from ladieval.evaluation.factory import EvaluatorFactory
from ladieval.logging.logger import Log
from ladieval.pipeline.controller import PipelineController
from ladieval.pipeline.models import RunState, StageStatus
from ladieval.report.report_builder import ReportBuilder

EXIT_OK = 0
EXIT_REJECTED = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate a manuscript stage by stage.")
    parser.add_argument("path", type=Path, help="Manuscript file (.pdf, .docx, .doc)")
    parser.add_argument(
        "--provider",
        default=None,
        help="Evaluation provider; overrides EVALUATION_PROVIDER",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-stage timeout in seconds; overrides STAGE_TIMEOUT_SECONDS",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.provider is not None:
        overrides["evaluation_provider"] = args.provider
    if args.timeout is not None:
        overrides["stage_timeout_seconds"] = args.timeout
    return Settings(**overrides)


def log_progress(state: RunState) -> None:
    """Log the most recently finished stage."""
    if not state.results:
        return
    latest = state.results[-1]
    if latest.status is StageStatus.ERROR:
        Log.warning(f"{latest.name}: failed ({latest.content})")
    else:
        Log.info(f"{latest.name}: {latest.score:g}/10 ({state.overall_progress:.0f}%)")


async def run(settings: Settings, path: Path) -> int:
    try:
        document = validate_document(load_document(path), settings)
    except DocumentError as exc:
        Log.error(f"Document rejected: {exc}")
        return EXIT_REJECTED
    Log.info(f"Evaluating {document.name} ({format_file_size(document.size_bytes)})")
    if settings.evaluation_provider.lower() != "example" and not is_plain_text(document.content):
        Log.warning(
            "Document is not plain text; the provider receives its bytes decoded as UTF-8",
            document=document.name,
            provider=settings.evaluation_provider,
        )

    evaluator = EvaluatorFactory.create(settings)
    controller = PipelineController(
        evaluator,
        stage_timeout_seconds=settings.stage_timeout_seconds,
    )
    controller.select_document(document)
    seen: set[int] = set()

    def on_state(state: RunState) -> None:
        if len(state.results) not in seen:
            seen.add(len(state.results))
            log_progress(state)

    unsubscribe = controller.subscribe(on_state)
    try:
        final = await controller.start()
    finally:
        unsubscribe()
        await evaluator.aclose()

    summary = controller.summary()
    if summary.has_failures:
        Log.warning(f"{summary.errored} of {summary.total} stages failed")
    print(json.dumps(ReportBuilder().build(final), indent=2, ensure_ascii=False))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = build_settings(args)
    Log.configure(settings.log_level)
    return asyncio.run(run(settings, args.path))


if __name__ == "__main__":
    sys.exit(main())

from ladieval.pipeline.aggregator import score_label, score_percentage, summarize
from ladieval.pipeline.models import EvaluationResult, RunState


class ReportBuilder:
    """Converts a run snapshot to a JSON-serializable report payload.

    Exporters (docx, pdf, download endpoints) render this payload; nothing
    here writes files.
    """

    def build(self, state: RunState) -> dict[str, object]:
        """Build the report for the state's results.

        Returns:
            Dict with 'document', 'phase', 'summary' and 'results' keys.
        """
        summary = summarize(state.results)
        document = state.document
        return {
            "document": (
                {"name": document.name, "size_bytes": document.size_bytes}
                if document is not None
                else None
            ),
            "phase": state.phase.value,
            "summary": {
                "total": summary.total,
                "completed": summary.completed,
                "errored": summary.errored,
                "average_score": summary.average_score,
                "average_percentage": summary.average_percentage,
                "label": score_label(summary.average_score if summary.completed else None),
            },
            "results": [self._result_to_dict(r) for r in state.results],
        }

    def _result_to_dict(self, result: EvaluationResult) -> dict[str, object]:
        return {
            "stage_id": result.stage_id,
            "name": result.name,
            "description": result.description,
            "status": result.status.value,
            "content": result.content,
            "score": result.score,
            "percentage": score_percentage(result.score),
            "label": score_label(result.score),
        }

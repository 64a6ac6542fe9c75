from collections.abc import Sequence
from dataclasses import dataclass

from ladieval.pipeline.exceptions import UnknownStageError


@dataclass(frozen=True)
class Stage:
    """One evaluation criterion. Catalog order is evaluation order."""

    id: str
    name: str
    description: str


STAGE_CATALOG: tuple[Stage, ...] = (
    Stage(
        id="line-editing",
        name="Line & Copy Editing",
        description="Grammar, syntax, clarity, and prose fluidity",
    ),
    Stage(
        id="plot-evaluation",
        name="Plot Evaluation",
        description="Story structure, pacing, narrative tension, and resolution",
    ),
    Stage(
        id="character-evaluation",
        name="Character Evaluation",
        description="Character depth, motivation, consistency, and emotional impact",
    ),
    Stage(
        id="book-flow",
        name="Book Flow Evaluation",
        description="Rhythm, transitions, escalation patterns, and narrative cohesion",
    ),
    Stage(
        id="worldbuilding",
        name="Worldbuilding & Setting",
        description="Depth, continuity, and immersive quality of the world",
    ),
    Stage(
        id="overall-assessment",
        name="Overall Assessment",
        description="Comprehensive evaluation and recommendations",
    ),
)


def get_stage(stage_id: str, stages: Sequence[Stage] = STAGE_CATALOG) -> Stage:
    for stage in stages:
        if stage.id == stage_id:
            return stage
    raise UnknownStageError(stage_id)

"""Timeline compositor: workflow steps interleaved with dossier side events."""

from caseflow.application.use_cases.timeline.compose_timeline import (
    ComposeTimelineUseCase,
    compose_timeline,
    step_anchor,
)

__all__ = ["ComposeTimelineUseCase", "compose_timeline", "step_anchor"]

"""Timeline compositor: interleave side events between workflow steps.

Each step gets an anchor time (completed_at, else started_at, else `now`).
Steps are ordered chronologically by (anchor, step_number) and an event
with timestamp t belongs to step S iff prev(S).anchor < t <= S.anchor. The
earliest window is open below and the latest is open above, so every event
lands in exactly one group. Groups are returned most recent first.
"""

from __future__ import annotations

from bisect import bisect_left
from datetime import datetime

from caseflow.application.dtos.progress import ProgressResult
from caseflow.application.dtos.timeline import (
    LANE_A_KINDS,
    DossierTimeline,
    SideEvent,
    TimelineGroup,
)
from caseflow.application.interfaces.repositories import (
    IDossierRepository,
    IProgressRepository,
    ISideEventRepository,
    IWorkflowRepository,
)
from caseflow.application.use_cases.workflow.progress_operations import (
    get_dossier_or_raise,
    load_dossier_graph,
    summarize_progress,
)
from caseflow.domain.entities.actor import ActingUser
from caseflow.domain.entities.workflow import WorkflowGraph, WorkflowStepEntity
from caseflow.domain.enums import ProgressStatus
from caseflow.shared.utils import ensure_utc, utc_now


def step_anchor(progress: ProgressResult | None, now: datetime) -> datetime:
    """Anchor time of a step on the timeline."""
    if progress is not None:
        if progress.status == ProgressStatus.COMPLETED and progress.completed_at:
            return ensure_utc(progress.completed_at)  # type: ignore[return-value]
        if progress.started_at:
            return ensure_utc(progress.started_at)  # type: ignore[return-value]
    return now


def _newest_first(events: list[SideEvent]) -> list[SideEvent]:
    ordered = sorted(events, key=lambda e: e.id)
    ordered.sort(key=lambda e: e.timestamp, reverse=True)
    return ordered


def compose_timeline(
    graph: WorkflowGraph,
    progress: list[ProgressResult],
    events: list[SideEvent],
    now: datetime,
    *,
    pin_tagged_events: bool = False,
) -> list[TimelineGroup]:
    """Group side events under the step whose window contains them.

    Args:
        graph: Template steps.
        progress: The dossier's progress rows (steps without a row anchor at now).
        events: Side events of the dossier.
        now: Anchor for undated steps.
        pin_tagged_events: Place events with a workflow_step_id of this
            template in that step's group instead of their temporal window.

    Returns:
        One group per step, most recent first. Empty when the graph has no steps.
    """
    if not len(graph):
        return []
    now = ensure_utc(now)  # type: ignore[assignment]
    by_step = {p.workflow_step_id: p for p in progress}

    anchored: list[tuple[datetime, WorkflowStepEntity]] = sorted(
        ((step_anchor(by_step.get(step.id), now), step) for step in graph),
        key=lambda item: (item[0], item[1].step_number),
    )
    anchors = [anchor for anchor, _ in anchored]
    position = {step.id: i for i, (_, step) in enumerate(anchored)}
    buckets: list[list[SideEvent]] = [[] for _ in anchored]

    for event in events:
        if pin_tagged_events and event.workflow_step_id in position:
            buckets[position[event.workflow_step_id]].append(event)
            continue
        ts = ensure_utc(event.timestamp)
        index = bisect_left(anchors, ts)
        buckets[min(index, len(anchored) - 1)].append(event)

    groups: list[TimelineGroup] = []
    for (anchor, step), bucket in zip(anchored, buckets, strict=True):
        groups.append(
            TimelineGroup(
                step=step,
                progress=by_step.get(step.id),
                anchor=anchor,
                lane_a=_newest_first([e for e in bucket if e.kind in LANE_A_KINDS]),
                lane_b=_newest_first([e for e in bucket if e.kind not in LANE_A_KINDS]),
            )
        )
    groups.reverse()
    return groups


class ComposeTimelineUseCase:
    """Loads steps, progress and side events of a dossier and composes its timeline."""

    def __init__(
        self,
        dossier_repo: IDossierRepository,
        workflow_repo: IWorkflowRepository,
        progress_repo: IProgressRepository,
        side_event_repo: ISideEventRepository,
        *,
        pin_tagged_events: bool = False,
    ) -> None:
        self._dossier_repo = dossier_repo
        self._workflow_repo = workflow_repo
        self._progress_repo = progress_repo
        self._side_event_repo = side_event_repo
        self._pin_tagged_events = pin_tagged_events

    async def execute(
        self,
        dossier_id: str,
        acting_user: ActingUser,
        now: datetime | None = None,
    ) -> DossierTimeline:
        """Compose the dossier timeline.

        Raises:
            ResourceNotFoundException: dossier or template missing.
            AuthorizationException: user may not read the dossier's world.
        """
        dossier = await get_dossier_or_raise(self._dossier_repo, dossier_id)
        acting_user.require_read(dossier.world_id)
        progress = await self._progress_repo.get_progress(dossier_id)
        graph = await load_dossier_graph(self._workflow_repo, dossier, progress)
        events = await self._side_event_repo.list_for_dossier(dossier_id, graph.step_ids())
        groups = compose_timeline(
            graph,
            progress,
            events,
            now or utc_now(),
            pin_tagged_events=self._pin_tagged_events,
        )
        return DossierTimeline(
            dossier_id=dossier_id,
            groups=groups,
            summary=summarize_progress(graph, progress),
        )

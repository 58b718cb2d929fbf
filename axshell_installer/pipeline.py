from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import InstallCtx
from .errors import StepError

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step.

    is_satisfied() is the precondition check; apply() performs the state
    transition. Recoverable failures are raised as StepError.
    """

    step_id: str
    fatal: bool

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        ...

    def apply(self, ctx: InstallCtx) -> None:
        ...


class StepStatus(str, enum.Enum):
    PENDING = "pending"
    CHECKING = "checking"
    SKIPPED = "skipped"
    ACTING = "acting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_NEXT = {
    StepStatus.PENDING: {StepStatus.CHECKING},
    StepStatus.CHECKING: {StepStatus.SKIPPED, StepStatus.ACTING, StepStatus.FAILED},
    StepStatus.ACTING: {StepStatus.SUCCEEDED, StepStatus.FAILED},
}


@dataclass(frozen=True)
class StepOutcome:
    step_id: str
    status: StepStatus
    error: Optional[str] = None


@dataclass(frozen=True)
class PipelineResult:
    outcomes: List[StepOutcome]

    def _ids(self, status: StepStatus) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status is status]

    @property
    def ran_steps(self) -> List[str]:
        return self._ids(StepStatus.SUCCEEDED)

    @property
    def skipped_steps(self) -> List[str]:
        return self._ids(StepStatus.SKIPPED)

    @property
    def failed_steps(self) -> List[str]:
        return self._ids(StepStatus.FAILED)


class _Tracker:
    def __init__(self, step_id: str) -> None:
        self.step_id = step_id
        self.status = StepStatus.PENDING

    def to(self, status: StepStatus) -> None:
        if status not in _NEXT.get(self.status, set()):
            raise RuntimeError(f"{self.step_id}: illegal transition {self.status.value} -> {status.value}")
        logger.debug("%s: %s -> %s", self.step_id, self.status.value, status.value)
        self.status = status


def run_step(ctx: InstallCtx, step: Step) -> StepOutcome:
    """Run one step: check, then act only if needed.

    StepError and OSError become a FAILED outcome; for fatal steps they propagate.
    """

    t = _Tracker(step.step_id)
    t.to(StepStatus.CHECKING)
    try:
        if not ctx.force and step.is_satisfied(ctx):
            t.to(StepStatus.SKIPPED)
            logger.info("Skipping step %s (already satisfied)", step.step_id)
            return StepOutcome(step.step_id, t.status)

        t.to(StepStatus.ACTING)
        logger.info("Running step %s", step.step_id)
        step.apply(ctx)
    except (StepError, OSError) as e:
        if getattr(step, "fatal", False):
            logger.error("Step %s failed: %s", step.step_id, e)
            raise
        t.to(StepStatus.FAILED)
        logger.warning("Step %s failed, continuing: %s", step.step_id, e)
        return StepOutcome(step.step_id, t.status, error=str(e))

    t.to(StepStatus.SUCCEEDED)
    return StepOutcome(step.step_id, t.status)


def run_pipeline(
    *,
    ctx: InstallCtx,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order; each runs to completion before the next starts."""

    outcomes: List[StepOutcome] = []
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        outcomes.append(run_step(ctx, step))

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(outcomes=outcomes)

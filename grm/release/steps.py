"""Step log for multi-request release flows.

A flow appends one ``ResponseStep`` per completed request. The log only feeds
progress display; flows never read it back to make decisions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, TypeVar

from grm.core.result import Err, Ok, Result
from grm.output.console import ConsoleProtocol, Style
from grm.release.errors import ReleaseError

StepIcon = Literal["success", "failure"]

P = TypeVar("P")


@dataclass(frozen=True, slots=True)
class ResponseStep:
    message: str
    secondary_message: str | None = None
    link: str | None = None
    icon: StepIcon | None = None


StepListener = Callable[[ResponseStep, float], None]


class StepLog:
    """Append-only list of completed steps with a progress counter."""

    def __init__(self, on_step: StepListener | None = None) -> None:
        self._steps: list[ResponseStep] = []
        self._total = 0
        self._on_step = on_step

    def begin(self, total: int) -> None:
        """Declare how many steps the flow will take when everything succeeds."""
        self._total = total

    def add(self, step: ResponseStep) -> None:
        self._steps.append(step)
        if self._on_step is not None:
            self._on_step(step, self.progress)

    @property
    def steps(self) -> tuple[ResponseStep, ...]:
        return tuple(self._steps)

    @property
    def total(self) -> int:
        return self._total

    @property
    def progress(self) -> float:
        """Completed steps as a percentage of the declared total."""
        if self._total <= 0:
            return 0.0
        return min(100.0, len(self._steps) / self._total * 100)

    def __len__(self) -> int:
        return len(self._steps)


def console_step_listener(console: ConsoleProtocol) -> StepListener:
    """Render each step as it completes."""

    def listener(step: ResponseStep, progress: float) -> None:
        console.progress(progress, step.message)
        if step.secondary_message:
            console.print(f"       {step.secondary_message}", Style.DIM)
        if step.link:
            console.link(step.link)

    return listener


def run_success_callback(
    callback: Callable[[P], None] | None,
    payload: P,
    steps: StepLog,
) -> Result[None, ReleaseError]:
    """Hand a flow's result to the caller-supplied callback, if any.

    The callback is caller code: anything it raises is surfaced as a
    ``callback_failed`` error rather than propagated.
    """
    if callback is None:
        return Ok(None)
    try:
        callback(payload)
    except Exception as e:
        return Err(
            ReleaseError(
                kind="callback_failed",
                message=f"Success callback failed: {e}",
            )
        )
    steps.add(ResponseStep(message="Success callback successfully called", icon="success"))
    return Ok(None)

"""Projection of the merged progress state onto the two progress bars.

The view is recomputed from scratch on every state change and holds no
state of its own.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from core.schemas import ProgressState


class StepIndicator(BaseModel):
    """Discrete ``step X / Y`` indicator.

    Attributes
    ----------
    step : int
        The current step (``0`` when the server has not reported one yet).
    total_steps : int
        Number of steps, always greater than zero.
    percent : int
        Width of the filled bar, ``0`` to ``100``.

    """

    model_config = ConfigDict(frozen=True)

    step: int
    total_steps: int
    percent: int

    @property
    def label(self) -> str:
        """Text shown next to the step bar."""
        return f"step {self.step} / {self.total_steps}"


class ProgressView(BaseModel):
    """Renderable form of a ``ProgressState``.

    Attributes
    ----------
    message : str | None
        Free text shown verbatim, ``None`` when nothing should be printed.
    steps : StepIndicator | None
        The discrete indicator, omitted when the step count is unknown or zero.
    percent : float
        Width of the continuous bar, ``0`` to ``100``.

    """

    model_config = ConfigDict(frozen=True)

    message: str | None = None
    steps: StepIndicator | None = None
    percent: float = 0.0


def step_percent(step: int, total_steps: int) -> int:
    """Return the filled width of the step bar.

    Parameters
    ----------
    step : int
        The current step.
    total_steps : int
        The number of steps, must be positive.

    Returns
    -------
    int
        ``round(min(100, 100 * step / total_steps))``, halves rounded up.

    """
    # Integer arithmetic; counts may exceed the float range.
    if step >= total_steps:
        return 100
    return (200 * step + total_steps) // (2 * total_steps)


def project_progress(state: ProgressState) -> ProgressView:
    """Build the view for ``state``.

    Parameters
    ----------
    state : ProgressState
        The merged progress state.

    Returns
    -------
    ProgressView
        What the progress container must show.

    """
    steps = None
    if state.total_steps:
        step = state.step or 0
        steps = StepIndicator(step=step, total_steps=state.total_steps, percent=step_percent(step, state.total_steps))

    percent = min(100.0, max(0.0, state.progress or 0.0))
    return ProgressView(message=state.message, steps=steps, percent=percent)

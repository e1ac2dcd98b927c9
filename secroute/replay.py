"""Step-by-step replay over a precomputed trace.

`TracePlayer` is a small state machine: an index into an immutable tuple of
steps, clamped to ``[-1, len - 1]`` where ``-1`` means "nothing applied yet".
Navigation never re-runs an engine. Timers are the caller's business: while
playing, each ``tick()`` advances one step.

When bound to a graph, the player remembers the graph's ``revision``. Any
later mutation of the graph makes the trace stale; the player then discards
it and returns to index ``-1``.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.logging import get_logger
from secroute.model.trace import Step

logger = get_logger(__name__)


class TracePlayer:
    """Navigate a step trace forwards, backwards, or to an arbitrary index."""

    def __init__(
        self, steps: Sequence[Step], graph: Optional[StrictMultiGraph] = None
    ) -> None:
        self._steps: Tuple[Step, ...] = tuple(steps)
        self._graph = graph
        self._revision = graph.revision if graph is not None else None
        self._index = -1
        self.is_running = False

    def _check_graph(self) -> None:
        if self._graph is None or not self._steps:
            return
        if self._graph.revision != self._revision:
            logger.debug("Graph changed since the trace was computed; discarding it")
            self.invalidate()

    @property
    def steps(self) -> Tuple[Step, ...]:
        self._check_graph()
        return self._steps

    @property
    def index(self) -> int:
        self._check_graph()
        return self._index

    @property
    def current(self) -> Optional[Step]:
        """Step at the current index, or ``None`` before the first step."""
        self._check_graph()
        if self._index < 0:
            return None
        return self._steps[self._index]

    @property
    def is_finished(self) -> bool:
        self._check_graph()
        return self._index >= len(self._steps) - 1

    def __len__(self) -> int:
        return len(self.steps)

    def seek(self, index: int) -> Optional[Step]:
        """Jump to ``index`` (clamped to ``[-1, len - 1]``) and return the step there."""
        self._check_graph()
        self._index = max(-1, min(index, len(self._steps) - 1))
        return self.current

    def step_forward(self) -> Optional[Step]:
        """Advance one step. Pauses playback when the end is reached."""
        self._check_graph()
        if self._index >= len(self._steps) - 1:
            self.is_running = False
            return self.current
        return self.seek(self._index + 1)

    def step_backward(self) -> Optional[Step]:
        """Go back one step; stepping back always pauses playback."""
        self.is_running = False
        return self.seek(self.index - 1)

    def reset(self) -> None:
        """Pause and return to the state before the first step."""
        self.is_running = False
        self.seek(-1)

    def play(self) -> bool:
        """Start playback; returns False when there is nothing left to play."""
        if self.is_finished:
            self.is_running = False
            return False
        self.is_running = True
        return True

    def pause(self) -> None:
        self.is_running = False

    def tick(self) -> Optional[Step]:
        """Timer callback: advance one step while playing."""
        if not self.is_running:
            return self.current
        return self.step_forward()

    def invalidate(self) -> None:
        """Drop the trace (e.g. after the topology changed) and reset to ``-1``."""
        self._steps = ()
        self._index = -1
        self.is_running = False
        if self._graph is not None:
            self._revision = self._graph.revision

"""Per-scenario tracking state.

A ScenarioTracker is created when the runtime starts a scenario, follows
that scenario's step and hook events, and is discarded when it finishes.
It references the immutable feature tree and never modifies it.
"""

import logging
from collections import deque
from collections.abc import Iterable
from enum import Enum

from featurelink.core.errors import (
    IdentifierReassignmentError,
    OutlineIterationError,
    TrackerClosedError,
    UnknownStepLineError,
)
from featurelink.core.models import (
    Background,
    ItemAttribute,
    ScenarioDefinition,
    ScenarioOutline,
    Status,
    Step,
    Tag,
)
from featurelink.core.stores import OutlineLineCache

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND_INFIX = ": "


class TrackerState(str, Enum):
    """Lifecycle of a scenario tracker."""

    PRIMING = "priming"
    ACTIVE = "active"
    CLOSED = "closed"


def extract_attributes(tags: Iterable[Tag | str]) -> frozenset[ItemAttribute]:
    """Convert tags into deduplicated key-less attributes."""
    return frozenset(
        ItemAttribute(value=tag.name if isinstance(tag, Tag) else str(tag))
        for tag in tags
    )


class ScenarioTracker:
    """Mutable state of one running scenario.

    Attributes:
        uri: URI of the feature the scenario belongs to.
        runtime_line: Line reported by the runtime for this scenario.
        designation: Runtime reference used in error messages.
        attributes: Tag-derived attributes.
        outline_iteration: "[n]" label for outline iterations, else None.
        current_step_id: Item identifier of the open step, if any.
        current_hook_id: Item identifier of the open hook, if any.
        status: Last status reported for the scenario.
    """

    def __init__(
        self,
        uri: str,
        runtime_line: int,
        designation: str | None = None,
        outline_cache: OutlineLineCache | None = None,
        background_infix: str = DEFAULT_BACKGROUND_INFIX,
    ) -> None:
        self.uri = uri
        self.runtime_line = runtime_line
        self.designation = designation
        self.attributes: frozenset[ItemAttribute] = frozenset()
        self.outline_iteration: str | None = None
        self.current_step_id: str | None = None
        self.current_hook_id: str | None = None
        self.status: Status | None = None
        self._outline_cache = (
            outline_cache if outline_cache is not None else OutlineLineCache()
        )
        self._background_infix = background_infix
        self._scenario: ScenarioDefinition | None = None
        self._background: Background | None = None
        self._background_steps: deque[Step] = deque()
        self._steps_by_line: dict[int, Step] = {}
        self._identifier: str | None = None
        self._state = TrackerState.PRIMING

    # === Priming ===

    def process_tags(self, tags: Iterable[Tag | str]) -> None:
        """Store the runtime tags as deduplicated attributes."""
        self.attributes = extract_attributes(tags)

    def process_scenario(self, scenario: ScenarioDefinition) -> None:
        """Bind the scenario node and index its own steps by line."""
        self._scenario = scenario
        for step in scenario.steps:
            self._steps_by_line[step.line] = step

    def process_background(self, background: Background | None) -> None:
        """Queue the background steps and index them by line.

        Scenario steps keep their line when a background step shares it.
        """
        if background is None:
            return
        self._background = background
        self._background_steps.extend(background.steps)
        for step in background.steps:
            self._steps_by_line.setdefault(step.line, step)

    def resolve_outline_iteration(self, scenario: ScenarioDefinition) -> None:
        """Label the running example row of an outline as "[n]".

        n is the 1-based position of the running line among every example
        row of the outline, in declaration order.
        """
        if not isinstance(scenario, ScenarioOutline):
            return
        lines = self._outline_cache.lines_for(scenario)
        try:
            index = lines.index(self.running_line)
        except ValueError:
            raise OutlineIterationError(
                "No outline iteration number found for scenario",
                uri=self.uri,
                line=self.running_line,
                scenario=self.designation or scenario.name,
            ) from None
        self.outline_iteration = f"[{index + 1}]"

    def activate(self) -> None:
        """Finish priming; step and hook events may follow."""
        self._state = TrackerState.ACTIVE
        logger.debug("Tracking scenario %r at %s:%d", self.name, self.uri, self.running_line)

    def close(self) -> None:
        """Mark the scenario finished. The tracker is not reused."""
        self._state = TrackerState.CLOSED
        logger.debug("Closed scenario %r at %s:%d", self.name, self.uri, self.running_line)

    # === Queries ===

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def scenario(self) -> ScenarioDefinition | None:
        return self._scenario

    @property
    def background(self) -> Background | None:
        return self._background

    @property
    def name(self) -> str:
        return self._scenario.name if self._scenario is not None else ""

    @property
    def keyword(self) -> str:
        return self._scenario.keyword if self._scenario is not None else ""

    @property
    def is_outline(self) -> bool:
        return isinstance(self._scenario, ScenarioOutline)

    @property
    def running_line(self) -> int:
        """Runtime line for an outline iteration, declared line otherwise."""
        if self._scenario is None or self.is_outline:
            return self.runtime_line
        return self._scenario.line

    @property
    def has_background(self) -> bool:
        return self._background is not None

    @property
    def pending_background_steps(self) -> int:
        return len(self._background_steps)

    @property
    def identifier(self) -> str | None:
        return self._identifier

    def step_prefix(self) -> str:
        """Marker for steps reported while background steps are pending."""
        if self._background is not None and self._background_steps:
            return self._background.keyword.upper() + self._background_infix
        return ""

    def lookup_step(self, line: int) -> Step:
        """Return the scenario or background step declared at line."""
        self._ensure_open()
        step = self._steps_by_line.get(line)
        if step is None:
            raise UnknownStepLineError(
                "Trying to get step for unknown line in feature",
                uri=self.uri,
                line=line,
                scenario=self.name,
            )
        return step

    # === Mutations during the scenario ===

    def dequeue_background_step(self) -> Step | None:
        """Consume one pending background step, if any."""
        self._ensure_open()
        if self._background_steps:
            return self._background_steps.popleft()
        return None

    def assign_identifier(self, identifier: str) -> None:
        """Store the report item identifier of this scenario, once."""
        self._ensure_open()
        if self._identifier is not None:
            raise IdentifierReassignmentError(
                "Attempting to re-set scenario ID for unfinished scenario",
                uri=self.uri,
                line=self.running_line,
                scenario=self.name,
            )
        self._identifier = identifier

    def _ensure_open(self) -> None:
        if self._state is TrackerState.CLOSED:
            raise TrackerClosedError(
                "Scenario tracker already closed",
                uri=self.uri,
                line=self.running_line,
                scenario=self.name,
            )

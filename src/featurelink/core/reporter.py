"""Drive a reporting backend from runtime execution events.

FeatureReporter receives the runtime's event stream (sources read, test
cases started and finished, steps and hooks started and finished) and
turns it into a tree of report items: one per feature, one per scenario
run below it, and one per step or hook below that.
"""

import logging
import threading
import time
from dataclasses import dataclass

from featurelink.core.errors import IdentifierReassignmentError
from featurelink.core.feature_index import FeatureCatalog, FeatureIndex
from featurelink.core.formatting import (
    code_ref,
    extract_parameters,
    render_multiline_argument,
    render_name,
    step_name,
)
from featurelink.core.models import (
    UNKNOWN_METADATA,
    FinishItemRequest,
    Hook,
    ItemLog,
    ItemParameter,
    ItemType,
    RuntimeStep,
    StartItemRequest,
    Status,
    StepResult,
    TestCase,
)
from featurelink.core.ports import ReportingPort, StepMetadataPort
from featurelink.core.statuses import hook_type_and_name, map_item_status, map_log_level
from featurelink.core.tracker import DEFAULT_BACKGROUND_INFIX, ScenarioTracker

logger = logging.getLogger(__name__)

COLON_INFIX = ": "


@dataclass
class ReporterConfig:
    """Options for FeatureReporter.

    Attributes:
        report_hooks: Report hooks as items below their scenario.
        log_step_errors: Attach step and hook error messages as logs.
        background_infix: Text between the background keyword and step name.
        outline_iteration_separator: Text between a scenario name and its
            outline iteration label.
    """

    report_hooks: bool = True
    log_step_errors: bool = True
    background_infix: str = DEFAULT_BACKGROUND_INFIX
    outline_iteration_separator: str = " "


class FeatureReporter:
    """Translate runtime events into report item requests.

    Example:
        ```python
        catalog = FeatureCatalog(GherkinParser())
        reporter = FeatureReporter(InMemoryReporting(), catalog)
        reporter.on_source_read(uri, text)
        reporter.on_test_case_started(test_case)
        ```

    Args:
        reporting: Backend receiving item requests.
        catalog: Registered feature sources and their indexes.
        metadata: Step definition metadata provider (always unknown if omitted).
        config: Reporter options.
    """

    def __init__(
        self,
        reporting: ReportingPort,
        catalog: FeatureCatalog,
        metadata: StepMetadataPort | None = None,
        config: ReporterConfig | None = None,
    ) -> None:
        self._reporting = reporting
        self._catalog = catalog
        self._metadata = metadata
        self._config = config or ReporterConfig()
        self._features: dict[str, str] = {}
        self._runs: dict[TestCase, ScenarioTracker] = {}
        self._starting: set[TestCase] = set()
        self._lock = threading.Lock()
        # Innermost open item, per runtime thread
        self._local = threading.local()

    @property
    def config(self) -> ReporterConfig:
        return self._config

    def tracker(self, test_case: TestCase) -> ScenarioTracker:
        """Return the tracker of a running test case.

        Raises:
            KeyError: If the test case is not running.
        """
        return self._runs[test_case]

    # === Sources ===

    def on_source_read(self, uri: str, text: str) -> None:
        """Register the raw text of a feature file."""
        self._catalog.register(uri, text)

    # === Scenarios ===

    def on_test_case_started(self, test_case: TestCase) -> ScenarioTracker:
        """Start the scenario item (and its feature item on first use).

        Raises:
            ScenarioResolutionError: If no scenario matches the test case.
            OutlineIterationError: If an outline row cannot be numbered.
            IdentifierReassignmentError: If the test case is already running.
        """
        with self._lock:
            if test_case in self._runs or test_case in self._starting:
                raise IdentifierReassignmentError(
                    "Test case started while still running",
                    uri=test_case.uri,
                    line=test_case.line,
                    scenario=test_case.name,
                )
            self._starting.add(test_case)
        try:
            tracker = self._start_scenario(test_case)
        finally:
            with self._lock:
                self._starting.discard(test_case)
        self._set_current(tracker.identifier)
        return tracker

    def on_test_case_finished(self, test_case: TestCase, result: StepResult) -> None:
        """Finish the scenario item and discard its tracker."""
        with self._lock:
            tracker = self._runs.pop(test_case)
        tracker.status = result.status
        self._finish(tracker.identifier, result.status)
        tracker.close()
        self._set_current(None)

    def _start_scenario(self, test_case: TestCase) -> ScenarioTracker:
        index = self._catalog.index_for(test_case.uri)
        if index is None:
            tracker = self._untracked(test_case)
            name = render_name(None, test_case.keyword + COLON_INFIX, test_case.name)
        else:
            tracker = index.tracker_for_test_case(
                test_case, background_infix=self._config.background_infix
            )
            suffix = None
            if tracker.outline_iteration is not None:
                suffix = self._config.outline_iteration_separator + tracker.outline_iteration
            name = render_name(None, tracker.keyword + COLON_INFIX, tracker.name, suffix)

        feature_id = self._feature_item(test_case.uri, index)
        request = StartItemRequest(
            name=name,
            type=ItemType.SCENARIO,
            start_time=time.time(),
            description=test_case.uri,
            code_ref=code_ref(test_case.uri, tracker.running_line),
            attributes=tracker.attributes,
        )
        tracker.assign_identifier(self._reporting.start_item(feature_id, request))
        with self._lock:
            self._runs[test_case] = tracker
        return tracker

    # === Steps ===

    def on_test_step_started(self, test_case: TestCase, step: RuntimeStep) -> str:
        """Start a step item below the running scenario.

        Raises:
            UnknownStepLineError: If step.line is not part of the scenario.
        """
        tracker = self._runs[test_case]
        prefix = ""
        parameters: tuple[ItemParameter, ...] = ()
        description = render_multiline_argument(step)
        if tracker.scenario is None:
            name = render_name(None, step.keyword, step_name(step))
        else:
            static = tracker.lookup_step(step.line)
            prefix = tracker.step_prefix()
            name = render_name(prefix, static.keyword, step_name(step))
            parameters = tuple(extract_parameters(static.text, step.arguments))
            description = description or render_multiline_argument(static)

        metadata = self._metadata.lookup(step) if self._metadata else UNKNOWN_METADATA
        request = StartItemRequest(
            name=name,
            type=ItemType.STEP,
            start_time=time.time(),
            description=description,
            code_ref=metadata.code_ref,
            attributes=metadata.attributes or frozenset(),
            parameters=parameters,
            test_case_id=metadata.test_case_id,
        )
        item_id = self._reporting.start_item(tracker.identifier, request)
        tracker.current_step_id = item_id
        if prefix:
            tracker.dequeue_background_step()
        self._set_current(item_id)
        return item_id

    def on_test_step_finished(
        self, test_case: TestCase, step: RuntimeStep, result: StepResult
    ) -> None:
        """Finish the open step item of the running scenario."""
        tracker = self._runs[test_case]
        self._log_error(tracker.current_step_id, result)
        self._finish(tracker.current_step_id, result.status)
        tracker.current_step_id = None
        self._set_current(tracker.identifier)

    # === Hooks ===

    def on_hook_started(self, test_case: TestCase, hook: Hook) -> str | None:
        """Start a hook item below the running scenario, if hooks are reported."""
        if not self._config.report_hooks:
            return None
        tracker = self._runs[test_case]
        item_type, name = hook_type_and_name(hook.hook_type)
        request = StartItemRequest(
            name=name,
            type=item_type,
            start_time=time.time(),
            description=step_name(hook.hook_type),
            code_ref=hook.location,
            has_stats=False,
        )
        item_id = self._reporting.start_item(tracker.identifier, request)
        tracker.current_hook_id = item_id
        self._set_current(item_id)
        return item_id

    def on_hook_finished(self, test_case: TestCase, hook: Hook, result: StepResult) -> None:
        """Finish the open hook item of the running scenario."""
        if not self._config.report_hooks:
            return
        tracker = self._runs[test_case]
        self._log_error(tracker.current_hook_id, result)
        self._finish(tracker.current_hook_id, result.status)
        tracker.current_hook_id = None
        self._set_current(tracker.identifier)

    # === Run ===

    def on_run_finished(self) -> None:
        """Finish every feature item still open."""
        with self._lock:
            features = list(self._features.values())
            self._features.clear()
        end_time = time.time()
        for item_id in features:
            self._reporting.finish_item(item_id, FinishItemRequest(end_time=end_time))

    def emit_log(
        self,
        message: str,
        level: str = "INFO",
        timestamp: float | None = None,
        attributes: dict[str, str | int | float | bool] | None = None,
    ) -> None:
        """Attach a log line to the innermost open item of the calling thread."""
        self._reporting.emit_log(
            ItemLog(
                timestamp=time.time() if timestamp is None else timestamp,
                level=level,
                message=message,
                item_id=getattr(self._local, "item_id", None),
                attributes=attributes or {},
            )
        )

    # === Internals ===

    def _untracked(self, test_case: TestCase) -> ScenarioTracker:
        """Tracker for a test case whose feature source is unusable."""
        tracker = ScenarioTracker(
            uri=test_case.uri,
            runtime_line=test_case.line,
            designation=test_case.designation,
            background_infix=self._config.background_infix,
        )
        tracker.process_tags(test_case.tags)
        tracker.activate()
        return tracker

    def _feature_item(self, uri: str, index: FeatureIndex | None) -> str:
        with self._lock:
            item_id = self._features.get(uri)
            if item_id is not None:
                return item_id
            if index is None:
                request = StartItemRequest(
                    name=uri, type=ItemType.STORY, start_time=time.time(), description=uri
                )
            else:
                feature = index.feature
                request = StartItemRequest(
                    name=render_name(None, feature.keyword + COLON_INFIX, feature.name),
                    type=ItemType.STORY,
                    start_time=time.time(),
                    description=uri,
                    code_ref=uri,
                    attributes=index.attributes,
                )
            item_id = self._reporting.start_item(None, request)
            self._features[uri] = item_id
            return item_id

    def _set_current(self, item_id: str | None) -> None:
        self._local.item_id = item_id

    def _log_error(self, item_id: str | None, result: StepResult) -> None:
        if not self._config.log_step_errors or not result.error_message:
            return
        self._reporting.emit_log(
            ItemLog(
                timestamp=time.time(),
                level=map_log_level(result.status),
                message=result.error_message,
                item_id=item_id,
            )
        )

    def _finish(self, item_id: str | None, status: Status | None) -> None:
        if item_id is None:
            logger.error("BUG: Trying to finish unspecified test item.")
            return
        self._reporting.finish_item(
            item_id,
            FinishItemRequest(end_time=time.time(), status=map_item_status(status)),
        )

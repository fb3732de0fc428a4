"""Step definitions for reporting BDD tests."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when
from tests.helpers import read_feature

from featurelink.adapters.logging import ReportingLogHandler
from featurelink.adapters.parsing.gherkin import GherkinParser
from featurelink.adapters.reporting.in_memory import InMemoryReporting, RecordedItem
from featurelink.core.feature_index import FeatureCatalog
from featurelink.core.models import ItemStatus, RuntimeStep, Status, StepResult, TestCase
from featurelink.core.reporter import FeatureReporter

PASSED = StepResult(Status.PASSED)


@dataclass
class ReportingScenarioContext:
    """Shared state between steps in a reporting scenario."""

    reporting: InMemoryReporting = field(default_factory=InMemoryReporting)
    reporter: FeatureReporter | None = None
    test_case: TestCase | None = None
    step_ids: list[str] = field(default_factory=list)
    handler: ReportingLogHandler | None = None
    logger: logging.Logger | None = None


@pytest.fixture
def ctx() -> Iterator[ReportingScenarioContext]:
    """Fresh scenario context for each test."""
    context = ReportingScenarioContext()
    context.reporter = FeatureReporter(context.reporting, FeatureCatalog(GherkinParser()))
    yield context
    if context.logger is not None and context.handler is not None:
        context.logger.removeHandler(context.handler)
        context.logger.setLevel(logging.NOTSET)


def _runtime_step(ctx: ReportingScenarioContext, line: int) -> RuntimeStep:
    """Runtime step echoing the declared step at line."""
    declared = ctx.reporter.tracker(ctx.test_case).lookup_step(line)
    return RuntimeStep(line=line, text=declared.text, keyword=declared.keyword)


def _start(ctx: ReportingScenarioContext, uri: str, line: int, name: str) -> None:
    ctx.test_case = TestCase(uri=uri, line=line, name=name)
    ctx.reporter.on_test_case_started(ctx.test_case)


def _scenario_item(ctx: ReportingScenarioContext) -> RecordedItem:
    return ctx.reporting.item(ctx.reporter.tracker(ctx.test_case).identifier)


def _last_step(ctx: ReportingScenarioContext) -> RecordedItem:
    return ctx.reporting.item(ctx.step_ids[-1])


# === Background Steps ===
@given(parsers.parse('the feature source "{name}" registered as "{uri}"'))
def step_register_source(ctx: ReportingScenarioContext, name: str, uri: str) -> None:
    ctx.reporter.on_source_read(uri, read_feature(name))


@given(parsers.parse('a reporting log handler on the "{name}" logger'))
def step_log_handler(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.handler = ReportingLogHandler(ctx.reporter)
    ctx.logger = logging.getLogger(name)
    ctx.logger.addHandler(ctx.handler)
    ctx.logger.setLevel(logging.INFO)


# === Scenario Runs ===
@when(parsers.parse('the scenario "{name}" at line {line:d} starts'))
def step_scenario_starts(ctx: ReportingScenarioContext, name: str, line: int) -> None:
    _start(ctx, "file:features/shopping.feature", line, name)


@when(parsers.parse('the scenario "{name}" at line {line:d} of "{uri}" starts'))
def step_scenario_starts_in(
    ctx: ReportingScenarioContext, name: str, line: int, uri: str
) -> None:
    _start(ctx, uri, line, name)


@when(parsers.parse('the scenario "{name}" at line {line:d} runs steps {lines}'))
def step_scenario_runs(
    ctx: ReportingScenarioContext, name: str, line: int, lines: str
) -> None:
    _start(ctx, "file:features/shopping.feature", line, name)
    for step_line in (int(value) for value in lines.split(",")):
        step = _runtime_step(ctx, step_line)
        ctx.step_ids.append(ctx.reporter.on_test_step_started(ctx.test_case, step))
        ctx.reporter.on_test_step_finished(ctx.test_case, step, PASSED)


@when(parsers.parse('step {line:d} fails with "{message}"'))
def step_fails(ctx: ReportingScenarioContext, line: int, message: str) -> None:
    step = _runtime_step(ctx, line)
    ctx.step_ids.append(ctx.reporter.on_test_step_started(ctx.test_case, step))
    ctx.reporter.on_test_step_finished(
        ctx.test_case, step, StepResult(Status.FAILED, error_message=message)
    )


@when(parsers.parse('step {line:d} logs "{message}" while running'))
def step_logs(ctx: ReportingScenarioContext, line: int, message: str) -> None:
    step = _runtime_step(ctx, line)
    ctx.step_ids.append(ctx.reporter.on_test_step_started(ctx.test_case, step))
    ctx.logger.info(message)
    ctx.reporter.on_test_step_finished(ctx.test_case, step, PASSED)


@when("the run finishes")
def step_run_finishes(ctx: ReportingScenarioContext) -> None:
    ctx.reporter.on_test_case_finished(ctx.test_case, PASSED)
    ctx.reporter.on_run_finished()


# === Report Assertions ===
@then("the step items are named:")
def step_items_named(ctx: ReportingScenarioContext, datatable: list[list[str]]) -> None:
    expected = [row[0] for row in datatable[1:]]
    assert [ctx.reporting.item(i).name for i in ctx.step_ids] == expected


@then(parsers.parse('the scenario item is named "{name}"'))
def step_scenario_named(ctx: ReportingScenarioContext, name: str) -> None:
    assert _scenario_item(ctx).name == name


@then(parsers.parse('the feature item is named "{name}"'))
def step_feature_named(ctx: ReportingScenarioContext, name: str) -> None:
    assert [root.name for root in ctx.reporting.roots] == [name]


@then(parsers.parse("the last step item finished as {status}"))
def step_last_status(ctx: ReportingScenarioContext, status: str) -> None:
    finish = _last_step(ctx).finish
    assert finish is not None
    assert finish.status is ItemStatus(status)


@then(parsers.parse('the last step item has an {level} log "{message}"'))
def step_last_log(ctx: ReportingScenarioContext, level: str, message: str) -> None:
    assert (level, message) in [(log.level, log.message) for log in _last_step(ctx).logs]


@then("every feature item is finished")
def step_features_finished(ctx: ReportingScenarioContext) -> None:
    assert ctx.reporting.roots
    assert all(root.finished for root in ctx.reporting.roots)

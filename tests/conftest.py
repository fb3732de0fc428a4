"""Shared test fixtures for all test modules."""

import pytest

from featurelink.adapters.parsing.gherkin import GherkinParser
from featurelink.adapters.reporting.in_memory import InMemoryReporting
from featurelink.core.feature_index import FeatureCatalog
from featurelink.core.models import (
    Background,
    ExampleRow,
    Examples,
    Feature,
    Scenario,
    ScenarioOutline,
    Step,
)
from featurelink.core.reporter import FeatureReporter
from featurelink.core.stores import OutlineLineCache, SourceStore
from tests.helpers import read_feature


@pytest.fixture
def shopping_source() -> str:
    return read_feature("shopping.feature")


@pytest.fixture
def plain_source() -> str:
    return read_feature("plain.feature")


@pytest.fixture
def invalid_source() -> str:
    return read_feature("invalid.feature")


# === Stores and catalog ===


@pytest.fixture
def source_store() -> SourceStore:
    """Fresh source store per test."""
    return SourceStore()


@pytest.fixture
def outline_cache() -> OutlineLineCache:
    """Fresh outline line cache per test."""
    return OutlineLineCache()


@pytest.fixture
def catalog(source_store: SourceStore, outline_cache: OutlineLineCache) -> FeatureCatalog:
    return FeatureCatalog(GherkinParser(), sources=source_store, outline_cache=outline_cache)


@pytest.fixture
def reporting() -> InMemoryReporting:
    return InMemoryReporting()


@pytest.fixture
def reporter(reporting: InMemoryReporting, catalog: FeatureCatalog) -> FeatureReporter:
    return FeatureReporter(reporting, catalog)


# === Hand-built feature trees ===


@pytest.fixture
def background() -> Background:
    return Background(
        keyword="Background",
        name="",
        line=3,
        steps=(
            Step(keyword="Given ", text="a precondition", line=4),
            Step(keyword="And ", text="another precondition", line=5),
        ),
    )


@pytest.fixture
def scenario() -> Scenario:
    return Scenario(
        keyword="Scenario",
        name="Simple",
        line=7,
        steps=(
            Step(keyword="When ", text="something happens", line=8),
            Step(keyword="Then ", text="it worked", line=9),
        ),
    )


@pytest.fixture
def outline() -> ScenarioOutline:
    """Outline with two Examples blocks of 2 and 3 rows."""
    return ScenarioOutline(
        keyword="Scenario Outline",
        name="Templated",
        line=11,
        steps=(Step(keyword="Given ", text="I have <count> <item>s", line=12),),
        examples=(
            Examples(
                keyword="Examples",
                name="first",
                line=14,
                header=("count", "item"),
                rows=(
                    ExampleRow(line=16, cells=("1", "apple")),
                    ExampleRow(line=17, cells=("2", "pear")),
                ),
            ),
            Examples(
                keyword="Examples",
                name="second",
                line=19,
                header=("count", "item"),
                rows=(
                    ExampleRow(line=21, cells=("3", "leek")),
                    ExampleRow(line=22, cells=("4", "onion")),
                    ExampleRow(line=23, cells=("5", "carrot")),
                ),
            ),
        ),
    )


@pytest.fixture
def feature(background: Background, scenario: Scenario, outline: ScenarioOutline) -> Feature:
    return Feature(
        keyword="Feature",
        name="Hand built",
        line=1,
        children=(background, scenario, outline),
    )

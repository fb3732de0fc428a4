"""Correlate runtime Gherkin execution events with the parsed feature tree."""

from featurelink.adapters.logging import ReportingLogHandler
from featurelink.adapters.metadata import StaticStepMetadata, UnknownStepMetadata
from featurelink.adapters.parsing import GherkinParser
from featurelink.adapters.reporting import InMemoryReporting
from featurelink.core.errors import (
    DocumentInvalidError,
    DocumentUnreadableError,
    FeatureLinkError,
    FeatureUnavailableError,
    IdentifierReassignmentError,
    OutlineIterationError,
    ScenarioResolutionError,
    TrackerClosedError,
    TrackingStateError,
    UnknownStepLineError,
)
from featurelink.core.feature_index import FeatureCatalog, FeatureIndex, ScenarioMatch
from featurelink.core.formatting import (
    extract_parameters,
    render_multiline_argument,
    render_name,
)
from featurelink.core.reporter import FeatureReporter, ReporterConfig
from featurelink.core.stores import OutlineLineCache, SourceStore
from featurelink.core.tracker import ScenarioTracker, TrackerState

__all__ = [
    "DocumentInvalidError",
    "DocumentUnreadableError",
    "FeatureCatalog",
    "FeatureIndex",
    "FeatureLinkError",
    "FeatureReporter",
    "FeatureUnavailableError",
    "GherkinParser",
    "IdentifierReassignmentError",
    "InMemoryReporting",
    "OutlineIterationError",
    "OutlineLineCache",
    "ReporterConfig",
    "ReportingLogHandler",
    "ScenarioMatch",
    "ScenarioResolutionError",
    "ScenarioTracker",
    "SourceStore",
    "StaticStepMetadata",
    "TrackerClosedError",
    "TrackerState",
    "TrackingStateError",
    "UnknownStepLineError",
    "UnknownStepMetadata",
    "extract_parameters",
    "render_multiline_argument",
    "render_name",
]

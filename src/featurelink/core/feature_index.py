"""Static lookups over one parsed feature document.

FeatureCatalog turns registered source text into one FeatureIndex per URI.
A FeatureIndex resolves a runtime scenario reference (line and name) to
the scenario node it came from and primes a ScenarioTracker for it.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from featurelink.core.errors import (
    DocumentInvalidError,
    DocumentUnreadableError,
    FeatureUnavailableError,
    ScenarioResolutionError,
)
from featurelink.core.models import (
    Background,
    Feature,
    ItemAttribute,
    ParseFailure,
    ScenarioDefinition,
    ScenarioOutline,
    SourceDocument,
    Tag,
    TestCase,
)
from featurelink.core.ports import FeatureParserPort
from featurelink.core.stores import OutlineLineCache, SourceStore
from featurelink.core.tracker import (
    DEFAULT_BACKGROUND_INFIX,
    ScenarioTracker,
    extract_attributes,
)

logger = logging.getLogger(__name__)


class FeatureIndex:
    """Read-only view of one parsed feature.

    Safe to share between concurrently running scenarios of the same
    feature: attributes and background are computed once, at construction.

    Only the first child of the feature is checked for a Background; a
    Background in any other position is not recognized.
    """

    def __init__(
        self,
        uri: str,
        feature: Feature,
        outline_cache: OutlineLineCache | None = None,
    ) -> None:
        self.uri = uri
        self.feature = feature
        self.attributes: frozenset[ItemAttribute] = extract_attributes(feature.tags)
        self._outline_cache = (
            outline_cache if outline_cache is not None else OutlineLineCache()
        )
        first = feature.children[0] if feature.children else None
        self._background = first if isinstance(first, Background) else None

    def background(self) -> Background | None:
        """Return the feature's Background, or None."""
        return self._background

    def find_scenario(self, line: int, name: str) -> ScenarioDefinition:
        """Resolve a runtime scenario reference to its declaring node.

        A node matches when both its line and name equal the reference.
        An outline also matches when line is one of its example row lines.

        Raises:
            ScenarioResolutionError: If no node matches.
        """
        for child in self.feature.children:
            if isinstance(child, Background):
                continue
            if child.line == line and child.name == name:
                return child
            if isinstance(child, ScenarioOutline) and any(
                row.line == line for examples in child.examples for row in examples.rows
            ):
                return child
        raise ScenarioResolutionError(
            "No scenario matches the running test case",
            uri=self.uri,
            line=line,
            scenario=name,
        )

    def tracker_for(
        self,
        scenario: ScenarioDefinition,
        line: int,
        tags: Iterable[Tag | str] = (),
        designation: str | None = None,
        background_infix: str = DEFAULT_BACKGROUND_INFIX,
    ) -> ScenarioTracker:
        """Build and prime the tracker of a running scenario."""
        tracker = ScenarioTracker(
            uri=self.uri,
            runtime_line=line,
            designation=designation,
            outline_cache=self._outline_cache,
            background_infix=background_infix,
        )
        tracker.process_tags(tags)
        tracker.process_scenario(scenario)
        tracker.process_background(self._background)
        tracker.resolve_outline_iteration(scenario)
        tracker.activate()
        return tracker

    def tracker_for_test_case(
        self,
        test_case: TestCase,
        background_infix: str = DEFAULT_BACKGROUND_INFIX,
    ) -> ScenarioTracker:
        """Resolve test_case and build its tracker in one call."""
        scenario = self.find_scenario(test_case.line, test_case.name)
        return self.tracker_for(
            scenario,
            test_case.line,
            tags=test_case.tags,
            designation=test_case.designation,
            background_infix=background_infix,
        )


@dataclass(frozen=True)
class ScenarioMatch:
    """A resolved scenario together with the index it was found in."""

    index: FeatureIndex
    scenario: ScenarioDefinition


class FeatureCatalog:
    """Registered feature sources and their parsed indexes, keyed by URI.

    Args:
        parser: Parser turning source text into a feature tree.
        sources: Store of registered source text (fresh store if omitted).
        outline_cache: Store of outline row lines (fresh store if omitted).
    """

    def __init__(
        self,
        parser: FeatureParserPort,
        sources: SourceStore | None = None,
        outline_cache: OutlineLineCache | None = None,
    ) -> None:
        self._parser = parser
        self._sources = sources if sources is not None else SourceStore()
        self._outline_cache = (
            outline_cache if outline_cache is not None else OutlineLineCache()
        )
        self._indexes: dict[str, FeatureIndex | ParseFailure] = {}
        self._lock = threading.Lock()

    @property
    def sources(self) -> SourceStore:
        return self._sources

    @property
    def outline_cache(self) -> OutlineLineCache:
        return self._outline_cache

    def register(self, uri: str, text: str) -> None:
        """Register source text for uri, replacing an earlier registration."""
        with self._lock:
            self._sources.put(uri, text)
            self._indexes.pop(uri, None)

    def load(self, uri: str) -> FeatureIndex:
        """Return the index of uri, parsing its source on first use.

        Raises:
            DocumentUnreadableError: If no source was registered for uri.
            DocumentInvalidError: If the parser rejects the source.
        """
        with self._lock:
            cached = self._indexes.get(uri)
            if cached is None:
                document = self._sources.get(uri)
                if document is None:
                    raise DocumentUnreadableError(uri)
                cached = self._parse(document)
                self._indexes[uri] = cached
        if isinstance(cached, ParseFailure):
            raise DocumentInvalidError(uri, cached.message)
        return cached

    def index_for(self, uri: str) -> FeatureIndex | None:
        """Like load(), but None when the document cannot be used."""
        try:
            return self.load(uri)
        except FeatureUnavailableError as exc:
            logger.warning("%s; reporting its scenarios without source structure", exc)
            return None

    def for_scenario(self, uri: str, line: int, name: str) -> ScenarioMatch | None:
        """Resolve a runtime scenario reference within the feature at uri.

        Returns:
            The match, or None when the document is unreadable or invalid.

        Raises:
            ScenarioResolutionError: If the document has no matching node.
        """
        index = self.index_for(uri)
        if index is None:
            return None
        return ScenarioMatch(index=index, scenario=index.find_scenario(line, name))

    def _parse(self, document: SourceDocument) -> FeatureIndex | ParseFailure:
        result = self._parser.parse(document.text)
        if isinstance(result, ParseFailure):
            return result
        logger.debug("Parsed feature %r from %s", result.name, document.uri)
        return FeatureIndex(document.uri, result, outline_cache=self._outline_cache)

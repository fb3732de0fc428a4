"""Process-wide stores shared by concurrently running scenarios.

Both stores are created empty at process start, only ever gain entries
during a run, and are injected into the components that use them so tests
can start from a fresh store.
"""

import threading

from featurelink.core.models import ScenarioOutline, SourceDocument


class SourceStore:
    """Raw feature sources keyed by URI.

    Registration must happen before any scenario of the URI is looked up;
    that ordering comes from the event source and is not enforced here.
    """

    def __init__(self) -> None:
        self._documents: dict[str, SourceDocument] = {}
        self._lock = threading.Lock()

    def put(self, uri: str, text: str) -> SourceDocument:
        """Store text under uri, replacing any earlier registration."""
        document = SourceDocument(uri=uri, text=text)
        with self._lock:
            self._documents[uri] = document
        return document

    def get(self, uri: str) -> SourceDocument | None:
        """Return the document registered for uri, or None."""
        return self._documents.get(uri)

    def __contains__(self, uri: object) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def clear(self) -> None:
        """Drop every document. Only meant for process start and tests."""
        with self._lock:
            self._documents.clear()


class OutlineLineCache:
    """Example row lines of each scenario outline, in declaration order.

    Computed once per outline node and reused by every iteration of it.
    Entries are keyed by node identity; the node is kept alongside its lines
    so its id is not reused while cached.
    """

    def __init__(self) -> None:
        self._lines: dict[int, tuple[ScenarioOutline, tuple[int, ...]]] = {}
        self._lock = threading.Lock()

    def lines_for(self, outline: ScenarioOutline) -> tuple[int, ...]:
        """Return the row lines across all Examples blocks of outline."""
        key = id(outline)
        cached = self._lines.get(key)
        if cached is not None:
            return cached[1]
        with self._lock:
            if key not in self._lines:
                lines = tuple(
                    row.line for examples in outline.examples for row in examples.rows
                )
                self._lines[key] = (outline, lines)
            return self._lines[key][1]

    def __len__(self) -> int:
        return len(self._lines)

    def clear(self) -> None:
        """Drop every cached outline. Only meant for process start and tests."""
        with self._lock:
            self._lines.clear()

"""In-memory reporting adapter."""

import itertools
import threading
from dataclasses import dataclass, field

from featurelink.core.encoding.ndjson import encode_requests
from featurelink.core.models import FinishItemRequest, ItemLog, StartItemRequest


@dataclass
class RecordedItem:
    """A report item as seen by the in-memory backend."""

    item_id: str
    parent_id: str | None
    start: StartItemRequest
    finish: FinishItemRequest | None = None
    logs: list[ItemLog] = field(default_factory=list)
    children: list["RecordedItem"] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.start.name

    @property
    def finished(self) -> bool:
        return self.finish is not None


class InMemoryReporting:
    """In-memory implementation of ReportingPort.

    Records every request in arrival order and keeps the item tree.
    Suitable for testing and for dumping a report without a backend.
    """

    def __init__(self) -> None:
        self._items: dict[str, RecordedItem] = {}
        self._roots: list[RecordedItem] = []
        self._orphan_logs: list[ItemLog] = []
        self._events: list[tuple[str | None, object]] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def start_item(self, parent_id: str | None, request: StartItemRequest) -> str:
        """Record a started item and return its generated identifier."""
        with self._lock:
            item_id = f"item-{next(self._ids)}"
            item = RecordedItem(item_id=item_id, parent_id=parent_id, start=request)
            self._items[item_id] = item
            if parent_id is None:
                self._roots.append(item)
            else:
                self._items[parent_id].children.append(item)
            self._events.append((item_id, request))
            return item_id

    def finish_item(self, item_id: str, request: FinishItemRequest) -> None:
        """Record the finish request of a started item."""
        with self._lock:
            item = self._items[item_id]
            item.finish = request
            self._events.append((item_id, request))

    def emit_log(self, entry: ItemLog) -> None:
        """Attach entry to its item, or keep it unattached."""
        with self._lock:
            if entry.item_id is not None and entry.item_id in self._items:
                self._items[entry.item_id].logs.append(entry)
            else:
                self._orphan_logs.append(entry)
            self._events.append((entry.item_id, entry))

    def item(self, item_id: str) -> RecordedItem:
        return self._items[item_id]

    @property
    def roots(self) -> list[RecordedItem]:
        return list(self._roots)

    @property
    def items(self) -> list[RecordedItem]:
        """Every item in start order."""
        return list(self._items.values())

    @property
    def orphan_logs(self) -> list[ItemLog]:
        return list(self._orphan_logs)

    @property
    def events(self) -> list[tuple[str | None, object]]:
        """(item_id, payload) pairs in arrival order."""
        return list(self._events)

    def dump(self) -> str:
        """Every recorded request as NDJSON, in arrival order."""
        return encode_requests(self.events)

    def find(self, name: str) -> RecordedItem | None:
        """Return the first item started with the given name."""
        return next((item for item in self._items.values() if item.name == name), None)

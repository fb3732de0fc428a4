"""Port interfaces for featurelink collaborators.

These protocols define the contracts that adapters must implement.
The core depends only on these interfaces, not concrete implementations.
"""

from typing import Protocol, runtime_checkable

from featurelink.core.models import (
    Feature,
    FinishItemRequest,
    ItemLog,
    ParseFailure,
    RuntimeStep,
    StartItemRequest,
    StepMetadata,
)


@runtime_checkable
class FeatureParserPort(Protocol):
    """Port for turning raw feature text into a feature tree.

    Examples: GherkinParser.
    """

    def parse(self, text: str) -> Feature | ParseFailure:
        """Parse feature source text.

        Malformed input is reported as a ParseFailure, never raised.
        """
        ...


@runtime_checkable
class ReportingPort(Protocol):
    """Port for the backend persisting hierarchical report items.

    Examples: InMemoryReporting.
    """

    def start_item(self, parent_id: str | None, request: StartItemRequest) -> str:
        """Create an item under parent_id (None for a root item).

        Returns:
            Identifier of the created item.
        """
        ...

    def finish_item(self, item_id: str, request: FinishItemRequest) -> None:
        """Finish a previously started item."""
        ...

    def emit_log(self, entry: ItemLog) -> None:
        """Attach a log entry to the item named by entry.item_id."""
        ...


@runtime_checkable
class StepMetadataPort(Protocol):
    """Port for host-specific step definition metadata.

    Examples: UnknownStepMetadata, StaticStepMetadata.
    """

    def lookup(self, step: RuntimeStep) -> StepMetadata:
        """Return metadata for a runtime step, UNKNOWN_METADATA if unresolved."""
        ...

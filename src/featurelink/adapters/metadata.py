"""Step metadata adapters.

Step definition metadata (code references, attributes, test case ids) is
host specific. These adapters cover the cases that need no introspection.
"""

from collections.abc import Mapping

from featurelink.core.models import UNKNOWN_METADATA, RuntimeStep, StepMetadata


class UnknownStepMetadata:
    """StepMetadataPort that never resolves anything."""

    def lookup(self, step: RuntimeStep) -> StepMetadata:
        return UNKNOWN_METADATA


class StaticStepMetadata:
    """StepMetadataPort backed by a mapping of step definition locations.

    Steps whose location is missing from the mapping fall back to a code
    reference built from the location alone; steps without a location are
    unknown.

    Args:
        metadata: Metadata keyed by the runtime's step definition location.
    """

    def __init__(self, metadata: Mapping[str, StepMetadata] | None = None) -> None:
        self._metadata = dict(metadata or {})

    def lookup(self, step: RuntimeStep) -> StepMetadata:
        if step.location is None:
            return UNKNOWN_METADATA
        found = self._metadata.get(step.location)
        if found is not None:
            return found
        return StepMetadata(code_ref=_strip_signature(step.location))


def _strip_signature(location: str) -> str:
    """Drop a trailing "(args)" signature from a definition location."""
    bracket = location.find("(")
    return location[:bracket] if bracket > 0 else location

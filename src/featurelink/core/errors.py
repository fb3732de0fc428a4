"""Errors raised while correlating runtime events with feature sources."""


class FeatureLinkError(Exception):
    """Base exception for featurelink errors."""


# === Recoverable: the feature cannot be read as a tree ===


class FeatureUnavailableError(FeatureLinkError):
    """Raised when no parsed tree exists for a URI."""

    def __init__(self, uri: str, detail: str) -> None:
        self.uri = uri
        self.detail = detail
        super().__init__(f"{detail}: {uri}")


class DocumentUnreadableError(FeatureUnavailableError):
    """Raised when no source text was registered for a URI."""

    def __init__(self, uri: str) -> None:
        super().__init__(uri, "No source registered for feature")


class DocumentInvalidError(FeatureUnavailableError):
    """Raised when the parser rejects the source text of a URI."""

    def __init__(self, uri: str, reason: str) -> None:
        self.reason = reason
        super().__init__(uri, f"Feature source is not valid Gherkin ({reason})")


# === Unrecoverable: runtime and static views disagree ===


class TrackingStateError(FeatureLinkError):
    """Raised when scenario tracking cannot continue for a scenario."""

    def __init__(
        self,
        message: str,
        uri: str | None = None,
        line: int | None = None,
        scenario: str | None = None,
    ) -> None:
        self.uri = uri
        self.line = line
        self.scenario = scenario
        context = ", ".join(
            f"{key}={value!r}"
            for key, value in (("uri", uri), ("line", line), ("scenario", scenario))
            if value is not None
        )
        super().__init__(f"{message} ({context})" if context else message)


class ScenarioResolutionError(TrackingStateError):
    """Raised when no scenario node matches a runtime line and name."""


class OutlineIterationError(TrackingStateError):
    """Raised when a runtime line is not an example row of its outline."""


class UnknownStepLineError(TrackingStateError):
    """Raised when a step line is not part of the running scenario."""


class IdentifierReassignmentError(TrackingStateError):
    """Raised when a scenario identifier is assigned a second time."""


class TrackerClosedError(TrackingStateError):
    """Raised when a finished scenario tracker receives further events."""

"""Core domain models for feature trees, runtime events and report items."""

from dataclasses import dataclass, field
from enum import Enum

# === Static feature tree ===


@dataclass(frozen=True)
class Tag:
    """A tag attached to a feature or scenario (e.g., "@smoke")."""

    name: str
    line: int = 0


@dataclass(frozen=True)
class DataTable:
    """A tabular step argument.

    Attributes:
        rows: Rows of cell values, header row included.
    """

    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class DocString:
    """A doc-string step argument."""

    content: str
    media_type: str | None = None


@dataclass(frozen=True)
class Step:
    """A step as declared in the feature source.

    Attributes:
        keyword: Step keyword including trailing space (e.g., "Given ").
        text: Step text, may contain <placeholder> tokens.
        line: Source line of the step.
        data_table: Tabular argument, if any.
        doc_string: Doc-string argument, if any.
    """

    keyword: str
    text: str
    line: int
    data_table: DataTable | None = None
    doc_string: DocString | None = None


@dataclass(frozen=True)
class Background:
    """Steps implicitly prefixed to every scenario of a feature."""

    keyword: str
    name: str
    line: int
    steps: tuple[Step, ...] = ()


@dataclass(frozen=True)
class Scenario:
    """A plain scenario."""

    keyword: str
    name: str
    line: int
    steps: tuple[Step, ...] = ()
    tags: tuple[Tag, ...] = ()


@dataclass(frozen=True)
class ExampleRow:
    """A body row of an Examples table."""

    line: int
    cells: tuple[str, ...] = ()


@dataclass(frozen=True)
class Examples:
    """An Examples block attached to a scenario outline."""

    keyword: str
    name: str
    line: int
    header: tuple[str, ...] = ()
    rows: tuple[ExampleRow, ...] = ()


@dataclass(frozen=True)
class ScenarioOutline:
    """A templated scenario instantiated once per example row."""

    keyword: str
    name: str
    line: int
    steps: tuple[Step, ...] = ()
    tags: tuple[Tag, ...] = ()
    examples: tuple[Examples, ...] = ()


ScenarioDefinition = Scenario | ScenarioOutline
FeatureChild = Background | Scenario | ScenarioOutline


@dataclass(frozen=True)
class Feature:
    """Root of a parsed feature document.

    Attributes:
        keyword: Feature keyword (e.g., "Feature").
        name: Feature name.
        line: Source line of the feature keyword.
        children: Background and scenario nodes in document order.
        tags: Feature-level tags.
        description: Free text below the feature line.
        language: Gherkin dialect of the document.
    """

    keyword: str
    name: str
    line: int
    children: tuple[FeatureChild, ...] = ()
    tags: tuple[Tag, ...] = ()
    description: str = ""
    language: str = "en"


@dataclass(frozen=True)
class ParseFailure:
    """Returned by a parser when the source text is not a valid feature."""

    message: str


@dataclass(frozen=True)
class SourceDocument:
    """Raw feature text keyed by its URI."""

    uri: str
    text: str


# === Runtime events ===


class Status(str, Enum):
    """Execution status reported by the test runtime."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    PENDING = "pending"
    AMBIGUOUS = "ambiguous"
    UNDEFINED = "undefined"
    UNUSED = "unused"


class HookType(str, Enum):
    """Kind of hook fired around scenarios and steps."""

    BEFORE = "BEFORE"
    AFTER = "AFTER"
    BEFORE_STEP = "BEFORE_STEP"
    AFTER_STEP = "AFTER_STEP"


@dataclass(frozen=True)
class TestCase:
    """A concrete runnable scenario as flattened by the runtime.

    For an outline iteration, line is the example row line.
    """

    __test__ = False

    uri: str
    line: int
    name: str
    tags: tuple[str, ...] = ()
    keyword: str = "Scenario"

    @property
    def designation(self) -> str:
        """Human readable reference used in diagnostics."""
        return f"{self.uri}:{self.line} # {self.name}"


@dataclass(frozen=True)
class RuntimeStep:
    """A parameter-substituted step as executed by the runtime.

    Attributes:
        line: Source line of the step declaration.
        keyword: Runtime keyword, used only when no static step is known.
        text: Substituted step text.
        arguments: Ordered argument values matched by the step definition.
        data_table: Substituted tabular argument, if any.
        doc_string: Substituted doc-string argument, if any.
        location: Step definition location reported by the runtime, if any.
    """

    line: int
    text: str
    keyword: str = ""
    arguments: tuple[str, ...] = ()
    data_table: DataTable | None = None
    doc_string: DocString | None = None
    location: str | None = None


@dataclass(frozen=True)
class Hook:
    """A hook invocation."""

    hook_type: HookType
    location: str | None = None


@dataclass(frozen=True)
class StepResult:
    """Outcome of a step, hook or scenario."""

    status: Status
    error_message: str | None = None


# === Report items ===


class ItemType(str, Enum):
    """Report item types understood by the reporting backend."""

    STORY = "STORY"
    SCENARIO = "SCENARIO"
    STEP = "STEP"
    BEFORE_TEST = "BEFORE_TEST"
    AFTER_TEST = "AFTER_TEST"
    BEFORE_METHOD = "BEFORE_METHOD"
    AFTER_METHOD = "AFTER_METHOD"


class ItemStatus(str, Enum):
    """Final status of a report item."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class ItemAttribute:
    """A key/value attribute; tag-derived attributes carry no key."""

    value: str
    key: str | None = None


@dataclass(frozen=True)
class ItemParameter:
    """A named step parameter."""

    key: str
    value: str


@dataclass(frozen=True)
class StepMetadata:
    """Optional enrichment for a step item.

    Every field is None when the provider cannot resolve the step.
    """

    code_ref: str | None = None
    attributes: frozenset[ItemAttribute] | None = None
    test_case_id: str | None = None


UNKNOWN_METADATA = StepMetadata()


@dataclass(frozen=True)
class StartItemRequest:
    """Payload for creating a report item."""

    name: str
    type: ItemType
    start_time: float
    description: str = ""
    code_ref: str | None = None
    attributes: frozenset[ItemAttribute] = frozenset()
    parameters: tuple[ItemParameter, ...] = ()
    test_case_id: str | None = None
    has_stats: bool = True


@dataclass(frozen=True)
class FinishItemRequest:
    """Payload for finishing a report item."""

    end_time: float
    status: ItemStatus | None = None


@dataclass(frozen=True)
class ItemLog:
    """A log line attached to a report item."""

    timestamp: float
    level: str
    message: str
    item_id: str | None = None
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)

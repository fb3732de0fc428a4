"""Rendering helpers for step names, multiline arguments and parameters."""

import re
from collections.abc import Sequence
from typing import Protocol

from featurelink.core.models import (
    DataTable,
    DocString,
    HookType,
    ItemParameter,
    RuntimeStep,
)

TABLE_INDENT = "          "
TABLE_SEPARATOR = "|"
DOCSTRING_DECORATOR = '\n"""\n'
NEW_LINE = "\r\n"
HOOK_PREFIX = "Hook: "

_PLACEHOLDER = re.compile(r"<([^<>]+)>")


class HasMultilineArgument(Protocol):
    """Anything carrying at most one of a data table or a doc string."""

    data_table: DataTable | None
    doc_string: DocString | None


def render_name(
    prefix: str | None, keyword: str, text: str, suffix: str | None = None
) -> str:
    """Build a report item name.

    Args:
        prefix: Prepended text, e.g. the background marker (optional)
        keyword: Step or scenario keyword
        text: Main text
        suffix: Appended text, e.g. an outline iteration label (optional)

    Returns:
        prefix + keyword + text + suffix
    """
    return f"{prefix or ''}{keyword}{text}{suffix or ''}"


def render_multiline_argument(step: HasMultilineArgument) -> str:
    """Render a step's data table or doc string for an item description.

    Returns:
        The rendered argument, or an empty string when the step has none.
    """
    rendered = ""
    if step.data_table is not None:
        rendered += NEW_LINE
        for row in step.data_table.rows:
            cells = "".join(f" {cell} {TABLE_SEPARATOR}" for cell in row)
            rendered += f"{TABLE_INDENT}{TABLE_SEPARATOR}{cells}{NEW_LINE}"
    if step.doc_string is not None and step.doc_string.content:
        rendered += f"{DOCSTRING_DECORATOR}{step.doc_string.content}{DOCSTRING_DECORATOR}"
    return rendered


def extract_parameters(text: str, values: Sequence[str]) -> list[ItemParameter]:
    """Pair <placeholder> names in text with argument values by position.

    The i-th placeholder takes the i-th value; placeholder names play no
    part in the matching. Names without a value and values without a name
    are dropped.

    Args:
        text: Step text as declared in the feature source
        values: Argument values in the order the runtime matched them

    Returns:
        Parameters in order of appearance in text
    """
    names = _PLACEHOLDER.findall(text)
    return [ItemParameter(key=name, value=value) for name, value in zip(names, values)]


def step_name(step: RuntimeStep | HookType) -> str:
    """Return the displayed text of a runtime step or hook."""
    if isinstance(step, HookType):
        return f"{HOOK_PREFIX}{step.value}"
    return step.text


def code_ref(uri: str, line: int) -> str:
    """Code reference of a scenario: its URI and running line."""
    return f"{uri}:{line}"

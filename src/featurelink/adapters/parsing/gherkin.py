"""Gherkin parser adapter.

Implements FeatureParserPort on top of the gherkin-official parser and
converts its dict-based AST into featurelink's frozen models.
"""

from typing import Any

from gherkin.errors import ParserError
from gherkin.parser import Parser

from featurelink.core.models import (
    Background,
    DataTable,
    DocString,
    ExampleRow,
    Examples,
    Feature,
    FeatureChild,
    ParseFailure,
    Scenario,
    ScenarioOutline,
    Step,
    Tag,
)

AstNode = dict[str, Any]


def _line(node: AstNode) -> int:
    return int(node.get("location", {}).get("line", 0))


def _tags(node: AstNode) -> tuple[Tag, ...]:
    return tuple(Tag(name=tag["name"], line=_line(tag)) for tag in node.get("tags", []))


def _cells(row: AstNode) -> tuple[str, ...]:
    return tuple(cell.get("value", "") for cell in row.get("cells", []))


def _step(node: AstNode) -> Step:
    data_table = None
    doc_string = None
    if node.get("dataTable"):
        data_table = DataTable(
            rows=tuple(_cells(row) for row in node["dataTable"].get("rows", []))
        )
    if node.get("docString"):
        doc_string = DocString(
            content=node["docString"].get("content", ""),
            media_type=node["docString"].get("mediaType"),
        )
    return Step(
        keyword=node.get("keyword", ""),
        text=node.get("text", ""),
        line=_line(node),
        data_table=data_table,
        doc_string=doc_string,
    )


def _steps(node: AstNode) -> tuple[Step, ...]:
    return tuple(_step(step) for step in node.get("steps", []))


def _examples(node: AstNode) -> Examples:
    header = node.get("tableHeader")
    return Examples(
        keyword=node.get("keyword", ""),
        name=node.get("name", ""),
        line=_line(node),
        header=_cells(header) if header else (),
        rows=tuple(
            ExampleRow(line=_line(row), cells=_cells(row))
            for row in node.get("tableBody", [])
        ),
    )


def _scenario(node: AstNode) -> Scenario | ScenarioOutline:
    examples = tuple(_examples(block) for block in node.get("examples", []))
    if examples:
        return ScenarioOutline(
            keyword=node.get("keyword", ""),
            name=node.get("name", ""),
            line=_line(node),
            steps=_steps(node),
            tags=_tags(node),
            examples=examples,
        )
    return Scenario(
        keyword=node.get("keyword", ""),
        name=node.get("name", ""),
        line=_line(node),
        steps=_steps(node),
        tags=_tags(node),
    )


def _children(feature: AstNode) -> tuple[FeatureChild, ...]:
    children: list[FeatureChild] = []
    for child in feature.get("children", []):
        if "background" in child:
            background = child["background"]
            children.append(
                Background(
                    keyword=background.get("keyword", ""),
                    name=background.get("name", ""),
                    line=_line(background),
                    steps=_steps(background),
                )
            )
        elif "scenario" in child:
            children.append(_scenario(child["scenario"]))
        # Rule blocks are not descended into.
    return tuple(children)


def feature_from_ast(document: AstNode) -> Feature | ParseFailure:
    """Convert a gherkin-official document dict into a Feature."""
    feature = document.get("feature")
    if not feature:
        return ParseFailure("Document contains no feature")
    return Feature(
        keyword=feature.get("keyword", ""),
        name=feature.get("name", ""),
        line=_line(feature),
        children=_children(feature),
        tags=_tags(feature),
        description=(feature.get("description") or "").strip(),
        language=feature.get("language", "en"),
    )


class GherkinParser:
    """FeatureParserPort implementation backed by gherkin-official.

    Example:
        ```python
        from featurelink.adapters.parsing.gherkin import GherkinParser

        result = GherkinParser().parse(text)
        ```
    """

    def parse(self, text: str) -> Feature | ParseFailure:
        """Parse feature text; syntax errors become a ParseFailure."""
        try:
            document = Parser().parse(text)
        except ParserError as exc:
            return ParseFailure(str(exc))
        return feature_from_ast(document)

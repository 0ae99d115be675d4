"""Lookup tables over the feature tree of a parsed scenario document."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .envelope_models import (
    Background,
    FeatureChild,
    GherkinDocument,
    Location,
    RuleChild,
    Scenario,
)


@dataclass(frozen=True)
class AstNode:
    """Keyword, name and line of a scenario, background, example row or step."""

    id: str
    keyword: str
    name: str
    line: int | None


class DocumentIndex:
    """Index of a document's AST nodes by id."""

    def __init__(self, document: GherkinDocument) -> None:
        self.uri = document.uri or ""
        feature = document.feature
        self.feature_keyword: str = "Feature"
        self.feature_name: str = ""
        self.feature_description: str = ""
        self.feature_line: int | None = None
        self.feature_tags: tuple[str, ...] = ()
        self._nodes: dict[str, AstNode] = {}
        if feature is None:
            return
        self.feature_keyword = feature.keyword or self.feature_keyword
        self.feature_name = feature.name
        self.feature_description = (feature.description or "").strip()
        self.feature_line = _line(feature.location)
        self.feature_tags = tuple(tag.name for tag in feature.tags)
        self._collect_children(feature.children)

    def node(self, node_id: str) -> AstNode | None:
        return self._nodes.get(node_id)

    def first_node(self, node_ids: Sequence[str]) -> AstNode | None:
        for node_id in node_ids:
            node = self._nodes.get(node_id)
            if node is not None:
                return node
        return None

    def _collect_children(self, children: Sequence[FeatureChild | RuleChild]) -> None:
        for child in children:
            rule = getattr(child, "rule", None)
            if rule is not None:
                self._collect_children(rule.children)
            if child.background is not None:
                self._collect_scenario(child.background)
            if child.scenario is not None:
                self._collect_scenario(child.scenario)

    def _collect_scenario(self, scenario: Scenario | Background) -> None:
        self._add(scenario.id, scenario.keyword, scenario.name, scenario.location)
        for step in scenario.steps:
            self._add(step.id, step.keyword, step.text, step.location)
        for examples in getattr(scenario, "examples", None) or ():
            for row in examples.table_body:
                self._add(row.id, examples.keyword, "", row.location)

    def _add(self, node_id: str, keyword: str, name: str, location: Location | None) -> None:
        if node_id:
            self._nodes[node_id] = AstNode(
                id=node_id, keyword=keyword, name=name, line=_line(location)
            )


def _line(location: Location | None) -> int | None:
    if location is None:
        return None
    return location.line

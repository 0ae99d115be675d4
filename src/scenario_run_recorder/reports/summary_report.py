"""Summary report in the cucumber JSON layout."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from scenario_run_recorder.envelopes import Envelope, duration_to_nanos

from .run_projection import FeatureRecord, ScenarioRecord, StepRecord, project_run


class SummaryReportFormatter:
    """Accumulates envelopes and renders the summary report once all are received."""

    def __init__(self) -> None:
        self._envelopes: list[Envelope] = []

    def on_envelope(self, envelope: Envelope) -> None:
        self._envelopes.append(envelope)

    def finish(self) -> str:
        projection = project_run(self._envelopes)
        features: dict[str, dict[str, Any]] = {}
        for feature, scenario in projection.reported_scenarios():
            rendered = features.get(feature.index.uri)
            if rendered is None:
                rendered = _render_feature(feature)
                features[feature.index.uri] = rendered
            rendered["elements"].append(_render_scenario(feature, scenario))
        return json.dumps(list(features.values()), indent=2, ensure_ascii=False) + "\n"


def render_summary_report(envelopes: Iterable[Envelope]) -> str:
    formatter = SummaryReportFormatter()
    for envelope in envelopes:
        formatter.on_envelope(envelope)
    return formatter.finish()


def write_summary_report(envelopes: Iterable[Envelope], output_path: Path | str) -> Path:
    """Render the summary report for ``envelopes`` and write it to ``output_path``."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_summary_report(envelopes), encoding="utf-8")
    return output


def _render_feature(feature: FeatureRecord) -> dict[str, Any]:
    index = feature.index
    return {
        "description": index.feature_description,
        "elements": [],
        "id": _slug(index.feature_name),
        "line": index.feature_line,
        "keyword": index.feature_keyword,
        "name": index.feature_name,
        "tags": [{"name": tag} for tag in index.feature_tags],
        "uri": feature.index.uri,
    }


def _render_scenario(feature: FeatureRecord, scenario: ScenarioRecord) -> dict[str, Any]:
    pickle = scenario.pickle
    node = feature.index.first_node(pickle.ast_node_ids)
    rendered: dict[str, Any] = {
        "description": "",
        "id": f"{_slug(feature.index.feature_name)};{_slug(pickle.name)}",
        "keyword": node.keyword if node is not None else "Scenario",
        "line": node.line if node is not None else None,
        "name": pickle.name,
        "steps": [],
        "tags": [{"name": tag.name} for tag in pickle.tags],
        "type": "scenario",
    }
    before, steps, after = _split_hooks(scenario.steps)
    if before:
        rendered["before"] = [_render_hook(step) for step in before]
    rendered["steps"] = [_render_step(feature, step) for step in steps]
    if after:
        rendered["after"] = [_render_hook(step) for step in after]
    return rendered


def _split_hooks(
    steps: Sequence[StepRecord],
) -> tuple[list[StepRecord], list[StepRecord], list[StepRecord]]:
    scenario_positions = [index for index, step in enumerate(steps) if not step.is_hook]
    if not scenario_positions:
        return list(steps), [], []
    first, last = scenario_positions[0], scenario_positions[-1]
    return (
        list(steps[:first]),
        [step for step in steps[first : last + 1] if not step.is_hook],
        list(steps[last + 1 :]),
    )


def _render_step(feature: FeatureRecord, step: StepRecord) -> dict[str, Any]:
    keyword = ""
    line = None
    text = ""
    if step.pickle_step is not None:
        text = step.pickle_step.text
        node = feature.index.first_node(step.pickle_step.ast_node_ids)
        if node is not None:
            keyword = node.keyword
            line = node.line
    rendered: dict[str, Any] = {
        "keyword": keyword,
        "line": line,
        "name": text,
        "result": _render_result(step),
    }
    if step.attachments:
        rendered["embeddings"] = _render_embeddings(step)
    return rendered


def _render_hook(step: StepRecord) -> dict[str, Any]:
    rendered: dict[str, Any] = {
        "match": {"location": step.hook.name if step.hook and step.hook.name else "unknown"},
        "result": _render_result(step),
    }
    if step.attachments:
        rendered["embeddings"] = _render_embeddings(step)
    return rendered


def _render_result(step: StepRecord) -> dict[str, Any]:
    if step.result is None:
        return {"status": "unknown"}
    result: dict[str, Any] = {
        "status": step.result.status.value.lower(),
        "duration": duration_to_nanos(step.result.duration),
    }
    if step.result.message:
        result["error_message"] = step.result.message
    return result


def _render_embeddings(step: StepRecord) -> list[dict[str, str]]:
    return [
        {"data": attachment.body, "mime_type": attachment.media_type}
        for attachment in step.attachments
    ]


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip()).lower()

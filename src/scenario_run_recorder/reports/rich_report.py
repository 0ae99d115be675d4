"""Browsable single-page HTML report."""

from __future__ import annotations

import html
from collections.abc import Iterable
from pathlib import Path

from scenario_run_recorder.envelopes import (
    Attachment,
    AttachmentContentEncoding,
    TestStepResultStatus,
    iter_envelopes,
)

from .run_projection import FeatureRecord, RunProjection, ScenarioRecord, StepRecord, project_run

_STYLE = """
body { font-family: sans-serif; margin: 2em; color: #222; }
h1 { font-size: 1.5em; }
.summary td, .summary th { padding: 0.2em 0.8em; text-align: left; }
.feature { margin-top: 2em; }
.scenario { border-left: 4px solid #999; margin: 1em 0; padding: 0.2em 1em; }
.status-passed { border-color: #2e7d32; }
.status-failed, .status-ambiguous { border-color: #c62828; }
.status-skipped { border-color: #0277bd; }
.status-pending, .status-undefined, .status-unknown { border-color: #f9a825; }
ol.steps { list-style: none; padding-left: 0; }
li.step span.status { display: inline-block; width: 6em; font-weight: bold; }
pre { background: #f5f5f5; padding: 0.5em; white-space: pre-wrap; }
"""


def render_rich_report(lines: Iterable[str]) -> str:
    """Render the report from raw NDJSON records of a message log."""
    projection = project_run(iter_envelopes(lines))
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        "<title>Scenario run report</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        "<h1>Scenario run report</h1>",
        _render_summary(projection),
    ]
    for feature in projection.features:
        parts.append(_render_feature(feature))
    parts.extend(["</body>", "</html>", ""])
    return "\n".join(parts)


def write_rich_report(lines: Iterable[str], output_path: Path | str) -> Path:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_rich_report(lines), encoding="utf-8")
    return output


def _render_summary(projection: RunProjection) -> str:
    counts: dict[TestStepResultStatus, int] = {}
    for _, scenario in projection.reported_scenarios():
        counts[scenario.status] = counts.get(scenario.status, 0) + 1
    rows = "".join(
        f"<tr><th>{status.value.lower()}</th><td>{counts[status]}</td></tr>"
        for status in TestStepResultStatus
        if status in counts
    )
    implementation = ""
    if projection.meta is not None:
        product = projection.meta.implementation
        implementation = html.escape(f"{product.name} {product.version or ''}".strip())
    return (
        f'<table class="summary"><caption>{implementation}</caption>'
        f"<tr><th>scenarios</th><td>{len(projection.reported_scenarios())}</td></tr>"
        f"{rows}</table>"
    )


def _render_feature(feature: FeatureRecord) -> str:
    index = feature.index
    scenarios = "".join(
        _render_scenario(feature, scenario)
        for scenario in feature.scenarios
        if not scenario.will_be_retried
    )
    return (
        '<section class="feature">'
        f"<h2>{html.escape(index.feature_keyword)}: {html.escape(index.feature_name)}</h2>"
        f"<p><code>{html.escape(feature.index.uri)}</code></p>"
        f"{scenarios}</section>"
    )


def _render_scenario(feature: FeatureRecord, scenario: ScenarioRecord) -> str:
    node = feature.index.first_node(scenario.pickle.ast_node_ids)
    keyword = node.keyword if node is not None else "Scenario"
    status = scenario.status.value.lower()
    steps = "".join(_render_step(feature, step) for step in scenario.steps)
    return (
        f'<article class="scenario status-{status}">'
        f"<h3>{html.escape(keyword)}: {html.escape(scenario.pickle.name)}</h3>"
        f'<ol class="steps">{steps}</ol></article>'
    )


def _render_step(feature: FeatureRecord, step: StepRecord) -> str:
    if step.pickle_step is not None:
        node = feature.index.first_node(step.pickle_step.ast_node_ids)
        keyword = node.keyword if node is not None else ""
        label = f"{keyword}{step.pickle_step.text}"
    else:
        label = step.hook.name if step.hook is not None and step.hook.name else "Hook"
    status = step.result.status.value.lower() if step.result is not None else "unknown"
    body = [
        f'<li class="step status-{status}">',
        f'<span class="status">{status}</span>{html.escape(label)}',
    ]
    if step.result is not None and step.result.message:
        body.append(f"<pre>{html.escape(step.result.message)}</pre>")
    body.extend(_render_attachment(attachment) for attachment in step.attachments)
    body.append("</li>")
    return "".join(body)


def _render_attachment(attachment: Attachment) -> str:
    media_type = html.escape(attachment.media_type, quote=True)
    if attachment.content_encoding is AttachmentContentEncoding.identity:
        return f"<pre>{html.escape(attachment.body)}</pre>"
    source = f"data:{media_type};base64,{html.escape(attachment.body, quote=True)}"
    if attachment.media_type.startswith("image/"):
        return f'<img alt="attachment" src="{source}">'
    return f'<a download href="{source}">attachment ({media_type})</a>'

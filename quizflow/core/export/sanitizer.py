"""
Export sanitizer.

Converts the authoring document the builder edits into the external
export document. The same function feeds the downloadable file and the
raw JSON preview, so the two never diverge.

Transformations, in order:

1. drop the editor-only ``currentStep``
2. rename ``questions`` to ``steps``, dropping the authoring-only
   ``required`` flag and filling ``stepType`` for legacy questions
3. question steps get ``questionType``; options survive only for
   option-bearing question types
4. other step kinds lose ``options`` and ``questionType``
5. attach the generated ``flow`` and ``resultsFlow`` (omitted when empty)
6. drop ``questions``

Every step returns a new value; the caller's document is never touched.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from quizflow.core.graph import document as doc
from quizflow.core.graph.flow import generate_flows

FLOW_KEYS = ("flow", "resultsFlow")


def strip_builder_step(document: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in document.items() if k != doc.BUILDER_STEP_KEY}


def sanitize_step(question: Any) -> Any:
    """Turn one authoring question into an export step."""
    if not isinstance(question, dict):
        return copy.deepcopy(question)

    step = {k: copy.deepcopy(v) for k, v in question.items() if k != "required"}

    if not step.get("stepType") and step.get("type"):
        step["stepType"] = doc.QUESTION_STEP

    if step.get("stepType") == doc.QUESTION_STEP:
        step["questionType"] = step.get("type") or ""
        if not doc.has_options(step.get("type")):
            step.pop("options", None)
    else:
        step.pop("options", None)
        step.pop("questionType", None)

    return step


def sanitize_steps(questions: list[Any]) -> list[Any]:
    return [sanitize_step(question) for question in questions]


def with_steps(document: dict[str, Any]) -> dict[str, Any]:
    """Add ``steps`` built from ``questions``; documents without a question list pass through."""
    questions = document.get("questions")
    if not isinstance(questions, list):
        return dict(document)
    return {**document, "steps": sanitize_steps(questions)}


def graph_source(document: dict[str, Any]) -> dict[str, Any]:
    """
    The view of the document the graph is resolved against.

    Authoring documents carry ``questions``; an export document fed back in
    only has ``steps``, which hold the same ids, titles and options.
    """
    if isinstance(document.get("questions"), list):
        return document
    if isinstance(document.get("steps"), list):
        return {**document, "questions": document["steps"]}
    return document


def with_flows(document: dict[str, Any]) -> dict[str, Any]:
    """Regenerate ``flow`` and ``resultsFlow``; empty sequences leave the key out."""
    updated = {k: v for k, v in document.items() if k not in FLOW_KEYS}
    flow, results_flow = generate_flows(graph_source(document))
    if flow:
        updated["flow"] = flow
    if results_flow:
        updated["resultsFlow"] = results_flow
    return updated


def without_questions(document: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(document.get("questions"), list):
        return document
    return {k: v for k, v in document.items() if k != "questions"}


def prepare_for_output(document: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Build the export document for an authoring document.

    Returns None only when no document is given. Structurally odd documents
    are exported as far as they go; unresolvable edges simply contribute
    nothing to the flows.
    """
    if document is None:
        return None

    snapshot = copy.deepcopy(document)
    if not isinstance(snapshot, dict):
        return None

    output = strip_builder_step(snapshot)
    output = with_steps(output)
    output = with_flows(output)
    return without_questions(output)


def export_filename(document: dict[str, Any] | None, timestamp_ms: int) -> str:
    """``quiz-{name}-{millis}.json``, with ``export`` standing in for a missing name."""
    details = document.get("quizDetails") if isinstance(document, dict) else None
    name = details.get("name") if isinstance(details, dict) else None
    return f"quiz-{name or 'export'}-{timestamp_ms}.json"


def serialize_export(export_document: dict[str, Any], indent: int = 2) -> str:
    return json.dumps(export_document, indent=indent, ensure_ascii=False)

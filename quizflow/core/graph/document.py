"""
Read helpers for the quiz document.

A quiz document is the JSON object the builder edits::

    {
        "quizDetails": {...},
        "questions": [...],
        "results": [...],
        "logic": {"nodes": [...], "edges": [...]},
        "logicResults": {"nodes": [...], "edges": [...]},
    }

Documents arrive from drafts, imports and the editor, so any part of
them may be missing or of the wrong type. The helpers here return empty
collections instead of raising, which lets the graph code stay free of
defensive checks.
"""

from __future__ import annotations

import math
from typing import Any

LOGIC = "logic"
LOGIC_RESULTS = "logicResults"

QUESTION_STEP = "question"

OPTION_BEARING_TYPES = frozenset({
    "single-choice",
    "multiple-choice",
    "true-false",
    "dropdown-list",
})

BUILDER_STEP_KEY = "currentStep"


def has_options(question_type: Any) -> bool:
    """Whether answers of this kind are picked from an options list."""
    return question_type in OPTION_BEARING_TYPES


def get_questions(document: Any) -> list[Any]:
    """Raw question list; positions matter, so malformed entries are kept."""
    return _list_field(document, "questions")


def get_results(document: Any) -> list[Any]:
    return _list_field(document, "results")


def record_id(record: Any) -> int | None:
    """Integer id of a question or result record, None when unusable."""
    if not isinstance(record, dict):
        return None
    value = record.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def index_questions(document: Any) -> dict[int, tuple[int, dict[str, Any]]]:
    """
    Map question id to its 1-based display number and record.

    The first question wins when ids repeat.
    """
    index: dict[int, tuple[int, dict[str, Any]]] = {}
    for position, question in enumerate(get_questions(document)):
        question_id = record_id(question)
        if question_id is not None and question_id not in index:
            index[question_id] = (position + 1, question)
    return index


def index_results(document: Any) -> dict[int, dict[str, Any]]:
    index: dict[int, dict[str, Any]] = {}
    for result in get_results(document):
        result_id = record_id(result)
        if result_id is not None and result_id not in index:
            index[result_id] = result
    return index


def get_edges(document: Any, edge_set: str) -> list[Any]:
    """Raw edges of ``logic`` or ``logicResults``; items are not checked."""
    if not isinstance(document, dict):
        return []
    container = document.get(edge_set)
    if not isinstance(container, dict):
        return []
    edges = container.get("edges")
    return edges if isinstance(edges, list) else []


def get_options(question: dict[str, Any]) -> list[Any]:
    options = question.get("options")
    return options if isinstance(options, list) else []


def display_text(value: Any) -> str:
    """
    Text shown for a title or option value.

    Strings pass through and non-zero numbers are printed the way the
    editor prints them (``2.0`` as ``2``). Anything else shows as blank.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    if not value or not math.isfinite(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def option_text(option: Any) -> str:
    """Text of an option stored either as a bare value or as a record."""
    if isinstance(option, dict):
        return display_text(option.get("text"))
    return display_text(option)


def normalize_option(option: Any) -> dict[str, Any]:
    """Expand an option into the record form the editor writes."""
    if not isinstance(option, dict):
        option = {"text": option}
    return {
        "text": option_text(option),
        "image": option.get("image") or "",
        "imageType": option.get("imageType") or "upload",
        "hasImage": bool(option.get("hasImage")),
    }


def _list_field(document: Any, key: str) -> list[Any]:
    if not isinstance(document, dict):
        return []
    items = document.get(key)
    return items if isinstance(items, list) else []

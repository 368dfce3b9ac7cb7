"""
Node and edge bookkeeping for the logic editors.

The visual editor itself lives in the browser; these functions produce
and maintain the ``{nodes, edges}`` data it persists in ``logic`` and
``logicResults``. All of them return new lists and leave their
arguments alone.
"""

from __future__ import annotations

import time
from typing import Any, Iterable

from quizflow.core.graph import document as doc
from quizflow.core.graph.identifiers import (
    format_question_id,
    format_result_id,
    parse_question_ref,
    parse_result_ref,
)
from quizflow.core.graph.resolver import question_title, result_title

GRID_COLUMNS = 3
GRID_X_SPACING = 300
GRID_Y_SPACING = 200


def grid_position(index: int) -> dict[str, int]:
    """Default placement for the ``index``-th question node."""
    return {
        "x": (index % GRID_COLUMNS) * GRID_X_SPACING,
        "y": (index // GRID_COLUMNS) * GRID_Y_SPACING,
    }


def _saved_positions(saved_nodes: Iterable[Any] | None) -> dict[str, Any]:
    positions = {}
    for node in saved_nodes or ():
        if isinstance(node, dict) and isinstance(node.get("id"), str) and node.get("position"):
            positions.setdefault(node["id"], node["position"])
    return positions


def question_nodes(
        questions: list[Any],
        saved_nodes: Iterable[Any] | None = None) -> list[dict[str, Any]]:
    """
    One editor node per question, restoring saved positions where known.

    Only choice questions expose their options, since only those get one
    source handle per option.
    """
    positions = _saved_positions(saved_nodes)
    nodes = []
    for index, question in enumerate(questions):
        question_id = doc.record_id(question)
        if question_id is None:
            continue
        node_id = format_question_id(question_id)
        options = doc.get_options(question) if doc.has_options(question.get("type")) else []
        nodes.append({
            "id": node_id,
            "type": "questionNode",
            "position": positions.get(node_id) or grid_position(index),
            "data": {
                "title": question_title(question, index + 1),
                "type": question.get("type"),
                "options": list(options),
                "index": index,
                "questionId": question_id,
            },
        })
    return nodes


def result_nodes(
        saved_nodes: Iterable[Any] | None,
        results: list[Any]) -> list[dict[str, Any]]:
    """Rebuild the result nodes placed on the results canvas."""
    by_id = {doc.record_id(r): r for r in results if doc.record_id(r) is not None}
    nodes = []
    for node in saved_nodes or ():
        if not isinstance(node, dict):
            continue
        ref = parse_result_ref(node.get("id"))
        if ref is None:
            continue
        result = by_id.get(ref.id, {})
        nodes.append({
            "id": node["id"],
            "type": "resultNode",
            "position": node.get("position") or grid_position(0),
            "data": {
                "title": result_title(result),
                "isDefault": bool(result.get("isDefault")),
                "resultId": ref.id,
            },
        })
    return nodes


def new_result_node_id(result_id: int, suffix: str | int | None = None) -> str:
    """Node id for a new instance of a result; the suffix keeps instances apart."""
    if suffix is None:
        suffix = int(time.time() * 1000)
    return format_result_id(result_id, suffix)


def edge_id(source: str, target: str, source_handle: str | None = None) -> str:
    return f"xy-edge__{source}{source_handle or ''}-{target}"


def _has_outgoing(edges: Iterable[Any], source: str, source_handle: str | None) -> bool:
    return any(
        isinstance(edge, dict)
        and edge.get("source") == source
        and edge.get("sourceHandle") == source_handle
        for edge in edges
    )


def connect(
        edges: list[Any],
        source: str,
        target: str,
        source_handle: str | None = None,
        new_edge_id: str | None = None,
        blocking_edges: Iterable[Any] = ()) -> list[Any]:
    """
    Add an edge unless its source handle is already connected.

    Each question handle (the question itself, or one option) leads to
    at most one place. ``blocking_edges`` holds edges from the other edge
    set that also occupy handles.
    """
    if _has_outgoing(edges, source, source_handle) or \
            _has_outgoing(blocking_edges, source, source_handle):
        return list(edges)

    return [*edges, {
        "id": new_edge_id or edge_id(source, target, source_handle),
        "source": source,
        "sourceHandle": source_handle,
        "target": target,
    }]


def connect_result(
        edges: list[Any],
        source: str,
        target: str,
        source_handle: str | None = None,
        new_edge_id: str | None = None,
        blocking_edges: Iterable[Any] = ()) -> list[Any]:
    """Like connect(), but only from a question node to a result node."""
    if parse_question_ref(source) is None or parse_result_ref(target) is None:
        return list(edges)
    return connect(edges, source, target, source_handle, new_edge_id, blocking_edges)


def prune_edges(
        edges: list[Any],
        questions: list[Any],
        targets_are_results: bool = False) -> list[Any]:
    """
    Drop edges attached to questions that no longer exist.

    For question -> question edges both ends must survive; for
    question -> result edges only the source is checked.
    """
    node_ids = {format_question_id(i) for i in map(doc.record_id, questions) if i is not None}

    def keep(edge: Any) -> bool:
        if not isinstance(edge, dict) or edge.get("source") not in node_ids:
            return False
        return targets_are_results or edge.get("target") in node_ids

    return [edge for edge in edges if keep(edge)]


def persisted_graph(nodes: list[dict[str, Any]], edges: list[dict[str, Any]]) -> dict[str, Any]:
    """The ``{nodes, edges}`` shape stored in ``logic`` and ``logicResults``."""
    stored_edges = []
    for edge in edges:
        stored = {
            "id": edge.get("id"),
            "source": edge.get("source"),
            "target": edge.get("target"),
            "sourceHandle": edge.get("sourceHandle"),
        }
        if edge.get("strokeDasharray"):
            stored["strokeDasharray"] = edge["strokeDasharray"]
        stored_edges.append(stored)

    return {
        "nodes": [{"id": node.get("id"), "position": node.get("position")} for node in nodes],
        "edges": stored_edges,
    }

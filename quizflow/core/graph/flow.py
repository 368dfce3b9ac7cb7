"""
Flow descriptions for resolved quiz connections.

Each connection becomes a record that keeps the structured endpoints and
adds a one-line rendering, for example::

    {
        "from": {"questionNumber": 1, "questionId": 10,
                 "questionTitle": "Color?", "option": {"index": 1, "text": "Red"}},
        "to": {"questionNumber": 2, "questionId": 20, "questionTitle": "Size?"},
        "flow": "Q1, O1 (Red) → Q2",
    }

The rendered string is part of the export schema and must not change.
"""

from __future__ import annotations

from typing import Any

from quizflow.core.graph.resolver import (
    Connection,
    GraphResolver,
    QuestionTarget,
    SourceEndpoint,
)

ARROW = "→"


def describe_source(source: SourceEndpoint) -> str:
    if source.option is None:
        return f"Q{source.question_number}"
    return (f"Q{source.question_number}, "
            f"O{source.option.index} ({source.option.text})")


def describe_target(connection: Connection) -> str:
    target = connection.target
    if isinstance(target, QuestionTarget):
        return f"Q{target.question_number}"
    return target.result_title


def describe(connection: Connection) -> str:
    """Render a connection as ``Q1, O1 (Red) → Q2`` or ``Q1 → Winner``."""
    return f"{describe_source(connection.source)} {ARROW} {describe_target(connection)}"


def flow_entry(connection: Connection) -> dict[str, Any]:
    return {
        "from": connection.source.to_dict(),
        "to": connection.target.to_dict(),
        "flow": describe(connection),
    }


def generate_logic_flow(document: Any) -> list[dict[str, Any]]:
    """Flow entries for the question -> question edges of a document."""
    return [flow_entry(c) for c in GraphResolver(document).resolve_logic()]


def generate_results_flow(document: Any) -> list[dict[str, Any]]:
    """Flow entries for the question/option -> result edges of a document."""
    return [flow_entry(c) for c in GraphResolver(document).resolve_logic_results()]


def generate_flows(document: Any) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Both flow sequences from a single resolver pass over the document."""
    resolver = GraphResolver(document)
    return ([flow_entry(c) for c in resolver.resolve_logic()],
            [flow_entry(c) for c in resolver.resolve_logic_results()])

"""
Graph resolver for quiz logic edges.

Turns the raw edges the editor persists into typed connection records.
Two edge sets exist:

- ``logic``: question (or one of its options) -> question
- ``logicResults``: question (or one of its options) -> result

Resolution is best effort. The graph is edited incrementally, so edges
pointing at deleted questions or results are normal while a quiz is being
built. Such edges resolve to ``None`` and are left out of the resolved
sequence; nothing here raises for malformed input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from quizflow.core.graph import document as doc
from quizflow.core.graph.identifiers import (
    parse_option_index,
    parse_question_ref,
    parse_result_ref,
)
from quizflow.logging.setup import get_logger

logger = get_logger(__name__)

UNTITLED_RESULT = "Untitled Result"


@dataclass(frozen=True)
class OptionInfo:
    """The option an edge starts from, numbered from 1 for display."""
    index: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "text": self.text}


@dataclass(frozen=True)
class SourceEndpoint:
    question_number: int
    question_id: int
    question_title: str
    option: OptionInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionNumber": self.question_number,
            "questionId": self.question_id,
            "questionTitle": self.question_title,
            "option": self.option.to_dict() if self.option else None,
        }


@dataclass(frozen=True)
class QuestionTarget:
    question_number: int
    question_id: int
    question_title: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionNumber": self.question_number,
            "questionId": self.question_id,
            "questionTitle": self.question_title,
        }


@dataclass(frozen=True)
class ResultTarget:
    result_id: int
    result_title: str
    is_default: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "resultId": self.result_id,
            "resultTitle": self.result_title,
            "isDefault": self.is_default,
        }


@dataclass(frozen=True)
class Connection:
    """A resolved edge: where it starts and which question or result it reaches."""
    source: SourceEndpoint
    target: QuestionTarget | ResultTarget

    @property
    def leads_to_result(self) -> bool:
        return isinstance(self.target, ResultTarget)


def question_title(question: dict[str, Any], number: int) -> str:
    return doc.display_text(question.get("title")) or f"Question {number}"


def result_title(result: dict[str, Any]) -> str:
    return doc.display_text(result.get("title")) or UNTITLED_RESULT


def resolve_option(question: dict[str, Any], handle: Any) -> OptionInfo | None:
    """
    Resolve the option a source handle points at.

    A handle without an option marker, or one whose index is outside the
    question's options, means the edge starts from the question itself.
    """
    index = parse_option_index(handle)
    if index is None:
        return None

    options = doc.get_options(question)
    if index >= len(options):
        logger.debug(
            f"Option index {index} out of range for question {question.get('id')}")
        return None

    number = index + 1
    text = doc.option_text(options[index])
    return OptionInfo(index=number, text=text or f"Option {number}")


def resolve_source(
        questions: dict[int, tuple[int, dict[str, Any]]],
        edge: dict[str, Any]) -> SourceEndpoint | None:
    ref = parse_question_ref(edge.get("source"))
    if ref is None or ref.id not in questions:
        return None

    number, question = questions[ref.id]
    return SourceEndpoint(
        question_number=number,
        question_id=ref.id,
        question_title=question_title(question, number),
        option=resolve_option(question, edge.get("sourceHandle")),
    )


def resolve_question_target(
        questions: dict[int, tuple[int, dict[str, Any]]],
        edge: dict[str, Any]) -> QuestionTarget | None:
    ref = parse_question_ref(edge.get("target"))
    if ref is None or ref.id not in questions:
        return None

    number, question = questions[ref.id]
    return QuestionTarget(
        question_number=number,
        question_id=ref.id,
        question_title=question_title(question, number),
    )


def resolve_result_target(
        results: dict[int, dict[str, Any]],
        edge: dict[str, Any]) -> ResultTarget | None:
    ref = parse_result_ref(edge.get("target"))
    if ref is None or ref.id not in results:
        return None

    result = results[ref.id]
    return ResultTarget(
        result_id=ref.id,
        result_title=result_title(result),
        is_default=bool(result.get("isDefault")),
    )


class GraphResolver:
    """
    Resolves the edge sets of one quiz document snapshot.

    Questions and results are indexed by id once per resolver, so building
    a resolver per snapshot keeps lookups linear in the number of edges.
    The resolver only reads the document.
    """

    def __init__(self, document: Any):
        self.document = document
        self.questions = doc.index_questions(document)
        self.results = doc.index_results(document)

    def resolve_logic_edge(self, edge: Any) -> Connection | None:
        """Resolve a question -> question edge, or None when it dangles."""
        if not isinstance(edge, dict):
            return None

        source = resolve_source(self.questions, edge)
        if source is None:
            return None

        target = resolve_question_target(self.questions, edge)
        if target is None:
            return None

        return Connection(source=source, target=target)

    def resolve_result_edge(self, edge: Any) -> Connection | None:
        """Resolve a question/option -> result edge, or None when it dangles."""
        if not isinstance(edge, dict):
            return None

        source = resolve_source(self.questions, edge)
        if source is None:
            return None

        target = resolve_result_target(self.results, edge)
        if target is None:
            return None

        return Connection(source=source, target=target)

    def resolve_logic(self) -> list[Connection]:
        """All resolvable ``logic`` edges, in edge order."""
        return self._collect(doc.LOGIC, self.resolve_logic_edge)

    def resolve_logic_results(self) -> list[Connection]:
        """All resolvable ``logicResults`` edges, in edge order."""
        return self._collect(doc.LOGIC_RESULTS, self.resolve_result_edge)

    def unresolved_edges(self, edge_set: str) -> list[Any]:
        """Edges of ``edge_set`` that do not resolve (dangling or malformed)."""
        resolve = (self.resolve_result_edge if edge_set == doc.LOGIC_RESULTS
                   else self.resolve_logic_edge)
        return [edge for edge in doc.get_edges(self.document, edge_set)
                if resolve(edge) is None]

    def _collect(self, edge_set: str, resolve) -> list[Connection]:
        edges = doc.get_edges(self.document, edge_set)
        connections = []
        for edge in edges:
            connection = resolve(edge)
            if connection is None:
                logger.debug(f"Dropping unresolved {edge_set} edge: {edge}")
                continue
            connections.append(connection)
        return connections


def resolve_logic(document: Any) -> list[Connection]:
    return GraphResolver(document).resolve_logic()


def resolve_logic_results(document: Any) -> list[Connection]:
    return GraphResolver(document).resolve_logic_results()


def resolve_logic_edge(document: Any, edge: Any) -> Connection | None:
    return GraphResolver(document).resolve_logic_edge(edge)


def resolve_result_edge(document: Any, edge: Any) -> Connection | None:
    return GraphResolver(document).resolve_result_edge(edge)

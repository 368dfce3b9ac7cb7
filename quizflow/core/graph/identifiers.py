"""
Identifier codec for quiz graph endpoints.

The visual editor names its nodes and handles with plain strings:

- question nodes: ``question-{questionId}``
- option handles: any handle string containing ``option-{index}``
  (zero-based position in the question's options)
- result nodes: ``result-{resultId}-{suffix}`` where the suffix is opaque

This module is the only place those strings are parsed or produced.
Everything else works with the typed references below. Parsing never
raises: anything that does not match yields ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

QUESTION_PREFIX = "question-"
OPTION_PREFIX = "option-"
RESULT_PREFIX = "result-"

_QUESTION_ID_RE = re.compile(r"^question-(\d+)", re.ASCII)
_OPTION_INDEX_RE = re.compile(r"option-(\d+)", re.ASCII)
_RESULT_ID_RE = re.compile(r"^result-(\d+)-", re.ASCII)
_MAX_ID_DIGITS = 4300


@dataclass(frozen=True)
class QuestionRef:
    """Reference to a question node."""
    id: int

    def format(self) -> str:
        return format_question_id(self.id)


@dataclass(frozen=True)
class OptionRef:
    """Reference to one option handle of a question node."""
    question_id: int
    index: int

    def format_handle(self) -> str:
        return format_option_handle(self.index)


@dataclass(frozen=True)
class ResultRef:
    """Reference to a result node; ``suffix`` only keeps node instances apart."""
    id: int
    suffix: str = ""

    def format(self) -> str:
        return format_result_id(self.id, self.suffix)


GraphRef = QuestionRef | OptionRef | ResultRef


def format_question_id(question_id: int) -> str:
    return f"{QUESTION_PREFIX}{question_id}"


def format_option_handle(index: int) -> str:
    return f"{OPTION_PREFIX}{index}"


def format_result_id(result_id: int, suffix: str | int) -> str:
    return f"{RESULT_PREFIX}{result_id}-{suffix}"


def _digits_to_int(digits: str) -> int | None:
    # int() refuses digit runs past the interpreter's str conversion limit
    if len(digits) > _MAX_ID_DIGITS:
        return None
    try:
        return int(digits)
    except ValueError:
        return None


def parse_question_ref(value: Any) -> QuestionRef | None:
    """Decode a question node id; trailing text after the number is ignored."""
    if not isinstance(value, str):
        return None
    match = _QUESTION_ID_RE.match(value)
    if match is None:
        return None
    question_id = _digits_to_int(match.group(1))
    if question_id is None:
        return None
    return QuestionRef(question_id)


def parse_option_index(handle: Any) -> int | None:
    """
    Decode the zero-based option index embedded in a source handle.

    Returns None when the handle is missing or carries no ``option-{n}``
    marker, which means the edge leaves the question as a whole.
    """
    if not isinstance(handle, str) or OPTION_PREFIX not in handle:
        return None
    match = _OPTION_INDEX_RE.search(handle)
    if match is None:
        return None
    return _digits_to_int(match.group(1))


def parse_option_ref(question: QuestionRef, handle: Any) -> OptionRef | None:
    index = parse_option_index(handle)
    if index is None:
        return None
    return OptionRef(question.id, index)


def parse_result_ref(value: Any) -> ResultRef | None:
    """Decode a result node id of the form ``result-{id}-{suffix}``."""
    if not isinstance(value, str):
        return None
    match = _RESULT_ID_RE.match(value)
    if match is None:
        return None
    result_id = _digits_to_int(match.group(1))
    if result_id is None:
        return None
    return ResultRef(result_id, value[match.end():])


def parse_ref(value: Any) -> QuestionRef | ResultRef | None:
    """Decode a node id of either kind."""
    return parse_question_ref(value) or parse_result_ref(value)

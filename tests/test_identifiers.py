import pytest

from quizflow.core.graph.identifiers import (
    OptionRef,
    QuestionRef,
    ResultRef,
    format_option_handle,
    format_question_id,
    format_result_id,
    parse_option_index,
    parse_option_ref,
    parse_question_ref,
    parse_ref,
    parse_result_ref,
)


def test_format_ids():
    assert format_question_id(10) == "question-10"
    assert format_option_handle(0) == "option-0"
    assert format_result_id(5, "out") == "result-5-out"
    assert QuestionRef(3).format() == "question-3"
    assert ResultRef(7, "123").format() == "result-7-123"
    assert OptionRef(3, 2).format_handle() == "option-2"


@pytest.mark.parametrize("value, expected", [
    ("question-10", QuestionRef(10)),
    ("question-10-extra", QuestionRef(10)),
    ("question-", None),
    ("q-10", None),
    ("xquestion-10", None),
    ("question-٣", None),
    (None, None),
    (10, None),
])
def test_parse_question_ref(value, expected):
    assert parse_question_ref(value) == expected


@pytest.mark.parametrize("handle, expected", [
    ("option-0", 0),
    ("question-10-option-3", 3),
    ("option-x", None),
    ("source", None),
    ("", None),
    (None, None),
])
def test_parse_option_index(handle, expected):
    assert parse_option_index(handle) == expected


def test_parse_option_ref():
    assert parse_option_ref(QuestionRef(4), "option-1") == OptionRef(4, 1)
    assert parse_option_ref(QuestionRef(4), None) is None


def test_parse_result_ref():
    assert parse_result_ref("result-5-out") == ResultRef(5, "out")
    assert parse_result_ref("result-12-1700000000000") == ResultRef(12, "1700000000000")
    # The suffix separator is required
    assert parse_result_ref("result-5") is None
    assert parse_result_ref("my-result-5-x") is None
    assert parse_result_ref(["result-5-x"]) is None


def test_parse_ref_dispatches_on_prefix():
    assert parse_ref("question-2") == QuestionRef(2)
    assert parse_ref("result-2-a") == ResultRef(2, "a")
    assert parse_ref("option-2") is None


def test_oversized_numbers_do_not_parse():
    digits = "9" * 5000
    assert parse_question_ref("question-" + digits) is None
    assert parse_option_index("option-" + digits) is None
    assert parse_result_ref("result-" + digits + "-x") is None
    assert parse_ref("question-" + digits) is None

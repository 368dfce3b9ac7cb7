"""Tests for turning authoring documents into export documents."""

import copy
import json

from quizflow.core.export.sanitizer import (
    export_filename,
    prepare_for_output,
    sanitize_step,
    serialize_export,
    strip_builder_step,
    with_flows,
)


def test_prepare_for_output_shape(quiz_document):
    output = prepare_for_output(quiz_document)

    assert "currentStep" not in output
    assert "questions" not in output
    assert [step["id"] for step in output["steps"]] == [10, 20]
    assert output["flow"][0]["flow"] == "Q1, O1 (Red) → Q2"
    assert output["resultsFlow"][0]["flow"] == "Q2 → Winner"
    assert output["quizDetails"] == quiz_document["quizDetails"]
    assert output["logic"] == quiz_document["logic"]


def test_prepare_for_output_does_not_mutate(quiz_document):
    snapshot = copy.deepcopy(quiz_document)
    output = prepare_for_output(quiz_document)
    output["steps"][0]["title"] = "Changed"
    assert quiz_document == snapshot


def test_prepare_for_output_absent_document():
    assert prepare_for_output(None) is None


def test_choice_step_keeps_options(quiz_document):
    step = prepare_for_output(quiz_document)["steps"][0]
    assert step == {
        "id": 10,
        "title": "Color?",
        "type": "single-choice",
        "stepType": "question",
        "questionType": "single-choice",
        "options": ["Red", "Blue"],
    }


def test_text_step_loses_options(quiz_document):
    step = prepare_for_output(quiz_document)["steps"][1]
    assert "options" not in step
    assert "required" not in step
    assert step["questionType"] == "text"


def test_legacy_step_gets_step_type():
    step = sanitize_step({"id": 1, "type": "multiple-choice", "options": ["a", "b"]})
    assert step["stepType"] == "question"
    assert step["questionType"] == "multiple-choice"
    assert step["options"] == ["a", "b"]


def test_non_question_step_drops_question_fields():
    step = sanitize_step({
        "id": 3,
        "stepType": "info",
        "title": "Intro",
        "options": ["x"],
        "questionType": "single-choice",
        "required": True,
    })
    assert step == {"id": 3, "stepType": "info", "title": "Intro"}


def test_question_step_without_type():
    step = sanitize_step({"id": 4, "stepType": "question"})
    assert step["questionType"] == ""


def test_empty_flows_are_omitted():
    output = prepare_for_output({
        "quizDetails": {"name": "Empty"},
        "questions": [{"id": 1}],
        "logic": {"edges": [{"source": "question-1", "target": "question-999"}]},
    })
    assert "flow" not in output
    assert "resultsFlow" not in output
    assert output["steps"] == [{"id": 1}]


def test_stale_flows_are_replaced():
    document = {
        "questions": [{"id": 1}],
        "flow": [{"flow": "stale"}],
        "resultsFlow": [{"flow": "stale"}],
    }
    assert with_flows(document) == {"questions": [{"id": 1}]}


def test_export_is_idempotent(quiz_document):
    once = prepare_for_output(quiz_document)
    twice = prepare_for_output(once)
    assert twice == once


def test_document_without_questions_passes_through():
    output = prepare_for_output({"quizDetails": {"name": "Bare"}, "currentStep": 2})
    assert output == {"quizDetails": {"name": "Bare"}}


def test_strip_builder_step():
    assert strip_builder_step({"a": 1, "currentStep": 4}) == {"a": 1}


def test_export_filename():
    assert export_filename({"quizDetails": {"name": "Fit Finder"}}, 1700000000000) == \
        "quiz-Fit Finder-1700000000000.json"
    assert export_filename({"quizDetails": {"name": ""}}, 5) == "quiz-export-5.json"
    assert export_filename({}, 5) == "quiz-export-5.json"
    assert export_filename(None, 5) == "quiz-export-5.json"


def test_serialize_export_keeps_unicode():
    text = serialize_export({"flow": [{"flow": "Q1 → Q2"}], "name": "Café"})
    assert "→" in text
    assert "Café" in text
    assert text.startswith('{\n  "flow"')
    assert json.loads(text)["name"] == "Café"


def test_oversized_result_target_is_left_out(quiz_document):
    quiz_document["logicResults"]["edges"] = [
        {"source": "question-20", "target": "result-" + "1" * 5000 + "-x"}]
    output = prepare_for_output(quiz_document)
    assert "resultsFlow" not in output
    assert output["flow"][0]["flow"] == "Q1, O1 (Red) → Q2"

"""
Quiz document validation module.

Checks an authoring document against the rules the builder enforces
while a quiz is being edited:
- Quiz details carry a name and a slug
- Question and result ids are unique
- Questions have titles, and choice questions have at least two
  non-empty options
- Exactly one result is the default one
- Results have a title and a primary product
- Logic edges point at questions and results that exist

Validation only reports. Export and preview keep working on documents
that fail it, because the builder lets authors export work in progress.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Any

from quizflow.core.graph import document as doc
from quizflow.core.graph.resolver import GraphResolver
from quizflow.logging.setup import get_logger

logger = get_logger(__name__)

MIN_CHOICE_OPTIONS = 2


def slugify(name: str) -> str:
    """
    Derive a quiz slug from its name, the way the details form does.

    Examples:
        >>> slugify("  Find Your Perfect Fit!  ")
        'find-your-perfect-fit'
    """
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return re.sub(r"^-+|-+$", "", slug)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class QuizDocumentValidator:
    """
    Validates quiz document structure and content.

    Errors are problems the builder would block the author on; warnings
    are things worth telling the author about that the export tolerates.
    """

    @staticmethod
    def validate(document: Any) -> dict[str, list[str]]:
        """
        Validate a quiz authoring document.

        Args:
            document: The quiz document to validate

        Returns:
            dict: Validation results containing:
                - errors (list): List of validation errors
                - warnings (list): List of validation warnings

        Examples:
            >>> result = QuizDocumentValidator.validate(document)
            >>> if result["errors"]:
            >>>     print("Validation failed:", result["errors"])
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not isinstance(document, dict):
            errors.append("Top-level quiz document must be a dictionary.")
            return {"errors": errors, "warnings": warnings}

        QuizDocumentValidator._validate_details(document, errors)

        if "questions" in document and not isinstance(document["questions"], list):
            errors.append("The 'questions' field must be a list.")
        if "results" in document and not isinstance(document["results"], list):
            errors.append("The 'results' field must be a list.")

        QuizDocumentValidator._validate_questions(document, errors, warnings)
        QuizDocumentValidator._validate_results(document, errors, warnings)
        QuizDocumentValidator._validate_edges(document, warnings)

        if errors:
            logger.debug(f"Quiz document failed validation: {errors}")
        return {"errors": errors, "warnings": warnings}

    @staticmethod
    def _validate_details(document: dict[str, Any], errors: list[str]) -> None:
        details = document.get("quizDetails")
        if not isinstance(details, dict):
            errors.append("Missing 'quizDetails' section.")
            return

        if _is_blank(details.get("name")):
            errors.append("Quiz Name is required")
        if _is_blank(details.get("slug")):
            errors.append("Quiz Slug is required")

    @staticmethod
    def _validate_questions(
            document: dict[str, Any],
            errors: list[str],
            warnings: list[str]) -> None:
        questions = doc.get_questions(document)
        if not questions:
            warnings.append("The quiz has no steps.")
            return

        ids = []
        for number, question in enumerate(questions, start=1):
            if not isinstance(question, dict):
                errors.append(f"Step {number} must be a dictionary: {question}")
                continue

            question_id = doc.record_id(question)
            if question_id is None:
                errors.append(f"Step {number} has no integer id.")
            else:
                ids.append(question_id)

            if _is_blank(question.get("title")):
                errors.append(f"Step {number}: Question title is required")

            if doc.has_options(question.get("type")):
                options = doc.get_options(question)
                if len(options) < MIN_CHOICE_OPTIONS:
                    errors.append(
                        f"Step {number}: At least {MIN_CHOICE_OPTIONS} options are required")
                elif any(_is_blank(doc.option_text(option)) for option in options):
                    errors.append(f"Step {number}: All options must have a value")

        for question_id, count in Counter(ids).items():
            if count > 1:
                errors.append(f"Duplicate question ID found: {question_id}")

    @staticmethod
    def _validate_results(
            document: dict[str, Any],
            errors: list[str],
            warnings: list[str]) -> None:
        results = doc.get_results(document)
        if not results:
            warnings.append("The quiz has no results.")
            return

        ids = []
        defaults = 0
        for number, result in enumerate(results, start=1):
            if not isinstance(result, dict):
                errors.append(f"Result {number} must be a dictionary: {result}")
                continue

            result_id = doc.record_id(result)
            if result_id is None:
                errors.append(f"Result {number} has no integer id.")
            else:
                ids.append(result_id)

            if result.get("isDefault"):
                defaults += 1

            label = f"Result {number}"
            if _is_blank(result.get("title")):
                warnings.append(f"{label}: Result title is required")
            else:
                label = result["title"]

            products = result.get("products")
            if not isinstance(products, list) or not products:
                warnings.append(f"{label}: At least one product is required")
            elif not any(isinstance(p, dict) and p.get("isPrimary") is True for p in products):
                warnings.append(f"{label}: At least one product must be primary")

        for result_id, count in Counter(ids).items():
            if count > 1:
                errors.append(f"Duplicate result ID found: {result_id}")

        if defaults != 1:
            warnings.append(
                f"Expected exactly one default result, found {defaults}.")

    @staticmethod
    def _validate_edges(document: dict[str, Any], warnings: list[str]) -> None:
        resolver = GraphResolver(document)
        for edge_set in (doc.LOGIC, doc.LOGIC_RESULTS):
            for edge in resolver.unresolved_edges(edge_set):
                warnings.append(
                    f"Unresolved {edge_set} edge will be left out of the flow: {edge}")

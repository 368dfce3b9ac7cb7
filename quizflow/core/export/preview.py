"""
Plain-text preview of a quiz document.

Mirrors the builder's preview pane section by section: quiz details,
steps, logic flow, results and result connections. The raw JSON pane is
``serialize_export(prepare_for_output(document))`` and is not repeated
here.
"""

from __future__ import annotations

from typing import Any

from quizflow.core.graph import document as doc
from quizflow.core.graph.flow import generate_flows

NOT_AVAILABLE = "N/A"


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _capitalize(value: Any) -> str:
    if not isinstance(value, str) or not value:
        return NOT_AVAILABLE
    return value[0].upper() + value[1:]


def _image_source(image: str, image_type: Any) -> str:
    return f"Link: {image}" if image_type == "link" else "Uploaded image"


def render_details(details: dict[str, Any]) -> list[str]:
    lines = [
        "Quiz Details",
        f"  Name: {details.get('name') or NOT_AVAILABLE}",
        f"  Slug: {details.get('slug') or NOT_AVAILABLE}",
        f"  Require Login: {_yes_no(details.get('requireLogin'))}",
        f"  Pre-Quiz: {_yes_no(details.get('preQuiz'))}",
    ]

    if details.get("addThankYouPage"):
        lines.append("  Thank You Page:")
        if details.get("thankYouTitle"):
            lines.append(f"    Title: {details['thankYouTitle']}")
        if details.get("thankYouDescription"):
            lines.append(f"    Description: {details['thankYouDescription']}")
        if details.get("thankYouImage"):
            lines.append(
                f"    Image: {_image_source(details['thankYouImage'], details.get('thankYouImageType'))}")
    return lines


def render_step(number: int, step: Any) -> list[str]:
    if not isinstance(step, dict):
        step = {}

    lines = [f"  Step {number}: {step.get('title') or 'Untitled Step'}",
             f"    Step Type: {_capitalize(step.get('stepType'))}"]
    is_question = step.get("stepType") == doc.QUESTION_STEP
    if is_question:
        lines.append(f"    Question Type: {_capitalize(step.get('type'))}")
    if step.get("description"):
        lines.append(f"    {step['description']}")

    options = doc.get_options(step)
    if is_question and doc.has_options(step.get("type")) and options:
        lines.append("    Options:")
        for index, option in enumerate(options, start=1):
            lines.append(f"      {index}. {doc.option_text(option)}")
            normalized = doc.normalize_option(option)
            if normalized["hasImage"] and normalized["image"]:
                lines.append(
                    f"         {_image_source(normalized['image'], normalized['imageType'])}")
    return lines


def render_steps(questions: list[Any]) -> list[str]:
    lines = [f"Steps ({len(questions)})"]
    if not questions:
        lines.append("  No steps added yet.")
    for number, question in enumerate(questions, start=1):
        lines.extend(render_step(number, question))
    return lines


def _product_line(product: Any) -> str:
    if not isinstance(product, dict):
        product = {}
    name = product.get("name") or product.get("title") or "Unnamed Product"
    price = product.get("basePrice") or product.get("price") or product.get("amount") or "0.00"
    line = f"    - {name} (${price})"
    if product.get("isPrimary"):
        line += " [Primary]"
    return line


def render_results(results: list[Any]) -> list[str]:
    lines = [f"Results ({len(results)})"]
    if not results:
        lines.append("  No results configured yet.")

    for number, result in enumerate(results, start=1):
        if not isinstance(result, dict):
            result = {}
        lines.append("  Default Result" if result.get("isDefault") else f"  Result {number}")
        if result.get("title"):
            lines.append(f"    Result Title: {result['title']}")
        lines.append(f"    Continue Popup: {_yes_no(result.get('continuePopup'))}")
        if result.get("continuePopup"):
            lines.append(f"    Add-ons: {_yes_no(result.get('addons'))}")

        products = result.get("products")
        if isinstance(products, list) and products:
            lines.append(f"    Products ({len(products)}):")
            lines.extend(_product_line(product) for product in products)
    return lines


def render_flow(title: str, flow: list[dict[str, Any]], empty: str) -> list[str]:
    lines = [title]
    if not flow:
        lines.append(f"  {empty}")
    lines.extend(f"  {entry['flow']}" for entry in flow)
    return lines


def render_preview(document: dict[str, Any]) -> str:
    """Render ``document`` the way the preview pane shows it."""
    details = document.get("quizDetails") if isinstance(document, dict) else None
    if not isinstance(details, dict):
        details = {}

    flow, results_flow = generate_flows(document)
    sections = [
        [f"Quiz Preview: {details.get('name') or 'Untitled Quiz'}"],
        render_details(details),
        render_steps(doc.get_questions(document)),
        render_flow("Logic", flow, "No logic rules configured yet."),
        render_results(doc.get_results(document)),
        render_flow("Logic Results", results_flow, "No logic results configured yet."),
    ]
    return "\n\n".join("\n".join(section) for section in sections) + "\n"

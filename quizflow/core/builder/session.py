"""
Builder session.

Holds the document the author is editing and the builder step they are
on, and wires the export pipeline and the draft store to the builder's
actions: save draft, resume draft, start new, preview and export.

Actions never raise for missing data or storage failures. They record a
``Notice`` for the author instead and return a falsy value.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quizflow.core.errors import ExportError
from quizflow.core.export.exporter import save_export
from quizflow.core.export.preview import render_preview
from quizflow.core.export.sanitizer import prepare_for_output
from quizflow.core.graph import document as doc
from quizflow.core.graph.editor import prune_edges
from quizflow.core.storage.draft_store import Draft, DraftStore
from quizflow.logging.setup import get_logger

logger = get_logger(__name__)

SUCCESS = "success"
WARNING = "warning"
ERROR = "error"

FIRST_STEP = 1
LOGIC_RESULTS_STEP = 5


@dataclass(frozen=True)
class Notice:
    """Feedback for the author about the outcome of an action."""
    level: str
    message: str


@dataclass(frozen=True)
class BuilderStep:
    id: int
    name: str


BUILDER_STEPS = (
    BuilderStep(1, "Details"),
    BuilderStep(2, "Steps"),
    BuilderStep(3, "Logic"),
    BuilderStep(4, "Results"),
    BuilderStep(LOGIC_RESULTS_STEP, "Logic Results"),
)


def default_document() -> dict[str, Any]:
    """The document a new quiz starts from."""
    return {
        "quizDetails": {
            "name": "",
            "slug": "",
            "requireLogin": False,
            "preQuiz": False,
            "addThankYouPage": False,
            "thankYouTitle": "",
            "thankYouDescription": "",
            "thankYouImage": "",
            "thankYouImageType": "upload",
        },
        "questions": [],
        doc.LOGIC: {"nodes": [], "edges": []},
        "results": [
            {
                "id": 1,
                "isDefault": True,
                "title": "",
                "description": "",
                "note": "",
                "image": "",
                "imageType": "upload",
            },
        ],
        doc.LOGIC_RESULTS: {"nodes": [], "edges": []},
    }


def builder_steps(document: Any) -> list[BuilderStep]:
    """
    Steps the builder offers for ``document``.

    Quizzes that send every answer to the default result have no use for
    the result connections editor.
    """
    details = document.get("quizDetails") if isinstance(document, dict) else None
    if isinstance(details, dict) and details.get("useDefaultForAllLogics"):
        return [step for step in BUILDER_STEPS if step.id != LOGIC_RESULTS_STEP]
    return list(BUILDER_STEPS)


class BuilderSession:
    """
    One author's editing session.

    Args:
        store: Where drafts are saved to and resumed from
        document: Document to start with; None until the author starts
            editing or resumes a draft
        current_step: Builder step the author is on
    """

    def __init__(
            self,
            store: DraftStore,
            document: dict[str, Any] | None = None,
            current_step: int = FIRST_STEP):
        self.store = store
        self.document = copy.deepcopy(document)
        self.current_step = current_step
        self.pending_draft: Draft | None = None
        self.notices: list[Notice] = []

    def notify(self, level: str, message: str) -> Notice:
        notice = Notice(level, message)
        self.notices.append(notice)
        return notice

    def pop_notices(self) -> list[Notice]:
        """Hand over the pending notices and start a fresh list."""
        notices, self.notices = self.notices, []
        return notices

    def update(self, document: dict[str, Any] | None) -> bool:
        """Replace the edited document; returns False when nothing changed."""
        if document == self.document:
            return False
        self.document = copy.deepcopy(document)
        return True

    def update_section(self, key: str, value: Any) -> None:
        """Replace one top-level section, starting from the default document if needed."""
        if self.document is None:
            self.document = default_document()
        self.document = {**self.document, key: copy.deepcopy(value)}
        if key == "questions":
            self._prune_graphs()

    def _prune_graphs(self) -> None:
        # Edges attached to removed questions are dropped from both graphs
        questions = doc.get_questions(self.document)
        for edge_set in (doc.LOGIC, doc.LOGIC_RESULTS):
            graph = self.document.get(edge_set)
            if not isinstance(graph, dict) or not isinstance(graph.get("edges"), list):
                continue
            edges = prune_edges(graph["edges"], questions,
                                targets_are_results=edge_set == doc.LOGIC_RESULTS)
            self.document[edge_set] = {**graph, "edges": edges}

    def set_step(self, step: int) -> None:
        self.current_step = step

    def steps(self) -> list[BuilderStep]:
        return builder_steps(self.document)

    def save_draft(self) -> bool:
        if self.document is None:
            self.notify(WARNING, "No quiz data to save")
            return False

        if self.store.save(self.document, self.current_step):
            self.notify(SUCCESS, "Draft saved successfully!")
            return True
        self.notify(ERROR, "Failed to save draft")
        return False

    def check_draft(self) -> Draft | None:
        """Look for a saved draft and hold it until the author resumes or discards it."""
        self.pending_draft = self.store.load()
        return self.pending_draft

    def resume_draft(self) -> bool:
        """Load the pending draft; the saved step is restored only when one was saved."""
        draft = self.pending_draft
        if draft is None:
            return False

        self.document = draft.document
        if draft.current_step:
            self.current_step = draft.current_step
        self.pending_draft = None
        logger.info(f"Resumed draft at step {self.current_step}")
        return True

    def start_new(self) -> bool:
        """Discard any saved draft and start from an empty document."""
        cleared = self.store.clear()
        self.pending_draft = None
        self.document = None
        return cleared

    def preview(self) -> dict[str, Any] | None:
        """
        Save the draft quietly and return the raw export payload.

        Returns:
            dict: The export document, or None when there is nothing to preview
        """
        if self.document is None:
            self.notify(WARNING, "No quiz data to preview")
            return None

        if not self.store.save(self.document, self.current_step):
            logger.warning("Auto-saving the draft before preview failed")
        return prepare_for_output(self.document)

    def preview_text(self) -> str | None:
        if self.preview() is None:
            return None
        return render_preview(self.document)

    def export(self, output_dir: str | Path, timestamp_ms: int | None = None,
               indent: int = 2) -> Path | None:
        """Write the export file into ``output_dir`` and return its path."""
        if self.document is None:
            self.notify(WARNING, "No quiz data to export")
            return None

        try:
            path = save_export(self.document, output_dir, timestamp_ms, indent=indent)
        except ExportError as e:
            logger.error(f"Error exporting quiz: {e}")
            self.notify(ERROR, "Failed to export quiz")
            return None

        self.notify(SUCCESS, "Quiz exported successfully!")
        return path

"""Write export documents to disk."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from quizflow.core.errors import ExportError
from quizflow.core.export.sanitizer import (
    export_filename,
    prepare_for_output,
    serialize_export,
)
from quizflow.logging.setup import get_logger

logger = get_logger(__name__)

EXPORT_CONTENT_TYPE = "application/json"


def current_millis() -> int:
    return int(time.time() * 1000)


def save_export(
        document: dict[str, Any] | None,
        output_dir: str | Path,
        timestamp_ms: int | None = None,
        indent: int = 2) -> Path:
    """
    Sanitize ``document`` and write it as ``quiz-{name}-{millis}.json``.

    Raises:
        ExportError: If there is no document or the file cannot be written
    """
    export_document = prepare_for_output(document)
    if export_document is None:
        raise ExportError("No quiz data to export")

    if timestamp_ms is None:
        timestamp_ms = current_millis()

    # Quiz names are free text; keep them from escaping the output directory
    file_name = export_filename(export_document, timestamp_ms)
    file_name = file_name.replace("/", "-").replace("\\", "-")

    output_path = Path(output_dir).resolve() / file_name
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            serialize_export(export_document, indent=indent), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write export file {output_path}: {e}")
        raise ExportError(f"Failed to write export file {output_path}: {e}") from e

    logger.info(f"Exported quiz to {output_path}")
    return output_path

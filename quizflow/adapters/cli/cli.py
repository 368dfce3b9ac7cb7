import json

import click

from quizflow.config.settings import get_config_manager
from quizflow.core.builder.session import ERROR, BuilderSession
from quizflow.core.engine.document_validator import QuizDocumentValidator
from quizflow.core.errors import ExportError
from quizflow.core.export.exporter import save_export
from quizflow.core.export.preview import render_preview
from quizflow.core.export.sanitizer import prepare_for_output, serialize_export
from quizflow.core.graph.flow import generate_flows
from quizflow.core.storage.factory import create_draft_store
from quizflow.logging.setup import get_logger, setup_logging

logger = get_logger(__name__)


def load_document(file):
    """Read a quiz document from a JSON file."""
    with open(file, "r", encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError("Quiz file must contain a JSON object")
    return document


def fail(ctx, message):
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)


def echo_notices(session):
    for notice in session.pop_notices():
        click.echo(notice.message, err=notice.level == ERROR)


@click.group()
@click.pass_context
def cli(ctx):
    """QuizFlow: turn quiz builder documents into export documents."""
    ctx.ensure_object(dict)
    config_manager = get_config_manager()
    config_manager.load()
    setup_logging(config_manager.logging_config)
    ctx.obj["CONFIG_MANAGER"] = config_manager


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output-dir", type=click.Path(file_okay=False),
              help="Directory to write the export to (default: export.output_dir)")
@click.pass_context
def export(ctx, file, output_dir):
    """Export a quiz document as quiz-{name}-{millis}.json."""
    config_manager = ctx.obj["CONFIG_MANAGER"]
    try:
        document = load_document(file)
        path = save_export(
            document,
            output_dir or config_manager.export_output_dir,
            indent=config_manager.export_indent,
        )
    except (OSError, ValueError, ExportError) as e:
        fail(ctx, e)
        return
    click.echo(f"Quiz exported to {path}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--raw", is_flag=True, help="Print the raw export JSON instead")
@click.pass_context
def preview(ctx, file, raw):
    """Preview a quiz document."""
    try:
        document = load_document(file)
    except (OSError, ValueError) as e:
        fail(ctx, e)
        return

    if raw:
        indent = ctx.obj["CONFIG_MANAGER"].export_indent
        click.echo(serialize_export(prepare_for_output(document), indent=indent))
    else:
        click.echo(render_preview(document), nl=False)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def flow(ctx, file):
    """Print the logic and results flows of a quiz document."""
    try:
        document = load_document(file)
    except (OSError, ValueError) as e:
        fail(ctx, e)
        return

    logic_flow, results_flow = generate_flows(document)
    click.echo("Logic Flow:")
    for entry in logic_flow:
        click.echo(f"  {entry['flow']}")
    click.echo("Results Flow:")
    for entry in results_flow:
        click.echo(f"  {entry['flow']}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx, file):
    """Validate a quiz document."""
    try:
        document = load_document(file)
    except (OSError, ValueError) as e:
        fail(ctx, e)
        return

    result = QuizDocumentValidator.validate(document)
    for warning in result["warnings"]:
        click.echo(f"Warning: {warning}")
    if result["errors"]:
        for error in result["errors"]:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)
        return
    click.echo("Quiz document is valid.")


@cli.group()
@click.pass_context
def draft(ctx):
    """Manage the saved builder draft."""
    try:
        ctx.obj["DRAFT_STORE"] = create_draft_store(ctx.obj["CONFIG_MANAGER"])
    except Exception as e:
        logger.error(f"Failed to open draft store: {e}")
        fail(ctx, f"Failed to open draft store: {e}")


@draft.command("save")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--step", type=click.IntRange(min=1), default=1, show_default=True,
              help="Builder step to resume at")
@click.pass_context
def save_draft(ctx, file, step):
    """Save a quiz document as the builder draft."""
    try:
        document = load_document(file)
    except (OSError, ValueError) as e:
        fail(ctx, e)
        return

    session = BuilderSession(ctx.obj["DRAFT_STORE"], document, current_step=step)
    saved = session.save_draft()
    echo_notices(session)
    if not saved:
        ctx.exit(1)


@draft.command("load")
@click.option("--output", type=click.Path(dir_okay=False),
              help="Write the draft document to this file instead of stdout")
@click.pass_context
def load_draft(ctx, output):
    """Print or write out the saved builder draft."""
    session = BuilderSession(ctx.obj["DRAFT_STORE"])
    if session.check_draft() is None:
        click.echo("No saved draft found.")
        return

    session.resume_draft()
    text = json.dumps(session.document, indent=2, ensure_ascii=False)
    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            fail(ctx, e)
            return
        click.echo(f"Draft written to {output}")
    else:
        click.echo(text)
    click.echo(f"Current step: {session.current_step}", err=output is None)


@draft.command("clear")
@click.pass_context
def clear_draft(ctx):
    """Discard the saved builder draft."""
    session = BuilderSession(ctx.obj["DRAFT_STORE"])
    if not session.start_new():
        fail(ctx, "Failed to clear draft")
        return
    click.echo("Draft cleared.")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()


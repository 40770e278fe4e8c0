"""This module defines the 'analysis' command group.

The commands run the same pipelines as the web API, which is handy for
operators reproducing a failed analysis from a shell.
"""

import json

import click
from google.genai.errors import APIError
from licitasaas.exceptions.analysis import AnalysisError
from licitasaas.exceptions.storage import StorageError
from licitasaas.models.chat import ChatMessage
from licitasaas.services.analysis import create_analysis_service
from licitasaas.web.errors import CHAT_GENERIC_MESSAGE, describe_ai_failure
from sqlalchemy.exc import SQLAlchemyError

PIPELINE_ERRORS = (AnalysisError, APIError, StorageError, SQLAlchemyError)


@click.group("analysis")
def analysis_group() -> None:
    """Groups commands related to edital analysis."""
    pass


@analysis_group.command("analyze")
@click.option("--tenant-id", required=True, help="The tenant owning the files.")
@click.option("--file-name", "file_names", multiple=True, required=True, help="An uploaded file name. Repeatable.")
@click.option("--bidding-process-id", default=None, help="A bidding process whose files are added.")
def analyze(tenant_id: str, file_names: tuple[str, ...], bidding_process_id: str | None) -> None:
    """Analyzes edital PDFs and prints the resulting JSON document.

    Args:
        tenant_id: The tenant owning the files.
        file_names: The uploaded file names.
        bidding_process_id: An optional bidding process.
    """
    try:
        service = create_analysis_service()
        document = service.analyze_edital(tenant_id, list(file_names), bidding_process_id)
    except PIPELINE_ERRORS as e:
        click.secho(f"An error occurred: {describe_ai_failure(e)}", fg="red")
        raise click.Abort()

    click.echo(json.dumps(document, ensure_ascii=False, indent=2))


@analysis_group.command("chat")
@click.option("--tenant-id", required=True, help="The tenant owning the files.")
@click.option("--message", required=True, help="The question to ask.")
@click.option("--file-name", "file_names", multiple=True, help="An uploaded file name. Repeatable.")
@click.option("--bidding-process-id", default=None, help="The bidding process being discussed.")
def chat(tenant_id: str, message: str, file_names: tuple[str, ...], bidding_process_id: str | None) -> None:
    """Asks a single question about an edital and prints the answer.

    Args:
        tenant_id: The tenant owning the files.
        message: The question to ask.
        file_names: The uploaded file names.
        bidding_process_id: The bidding process being discussed.
    """
    try:
        service = create_analysis_service()
        answer = service.chat(
            tenant_id,
            [ChatMessage(role="user", text=message)],
            list(file_names),
            bidding_process_id,
        )
    except PIPELINE_ERRORS as e:
        click.secho(f"An error occurred: {describe_ai_failure(e, CHAT_GENERIC_MESSAGE)}", fg="red")
        raise click.Abort()

    click.echo(answer)

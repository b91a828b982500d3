"""Import CLI commands for collection exports and portfolio URLs."""

import asyncio
import uuid
from pathlib import Path

import typer

import_app = typer.Typer()


def _print_summary(success: int, failed: int, job_id: uuid.UUID | None) -> None:
    typer.echo("\nImport finished:")
    typer.echo(f"  Job:        {job_id or '-'}")
    typer.echo(f"  Succeeded:  {success}")
    typer.echo(f"  Failed:     {failed}")


@import_app.command("csv")
def import_csv(
    file: Path = typer.Argument(..., help="Path to a Collectr CSV export", exists=True, dir_okay=False),  # noqa: B008
    owner_id: uuid.UUID = typer.Option(..., "--owner-id", help="User ID the listings belong to"),  # noqa: B008
    batch_size: int | None = typer.Option(None, "--batch-size", min=1, help="Rows per batch"),  # noqa: B008
) -> None:
    """Import a collection export file as draft listings."""
    asyncio.run(_import_csv(file, owner_id, batch_size))


async def _import_csv(file_path: Path, owner_id: uuid.UUID, batch_size: int | None) -> None:
    """Async implementation of CSV import."""
    from card_importer.core.config import get_settings
    from card_importer.core.database import dispose_engine, get_session_factory, init_engine
    from card_importer.lib.collection_import import CollectionImportError, ImportProgress, parse_collection_csv
    from card_importer.services.collection_import_service import run_collection_import

    try:
        parsed = parse_collection_csv(file_path)
    except CollectionImportError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    def _on_progress(progress: ImportProgress) -> None:
        typer.echo(f"  {progress.current}/{progress.total} rows ({progress.percent:.0f}%)")

    try:
        factory = get_session_factory()
        async with factory() as session:
            typer.echo(f"Importing {len(parsed.rows)} rows from {file_path}...")
            try:
                summary = await run_collection_import(
                    session,
                    parsed,
                    owner_id,
                    file_name=file_path.name,
                    batch_size=batch_size or settings.import_batch_size,
                    currency=settings.listing_currency,
                    problem_log_limit=settings.import_problem_log_limit,
                    on_progress=_on_progress,
                )
            except CollectionImportError as e:
                typer.echo(f"Error: {e}", err=True)
                raise typer.Exit(code=1) from e

            _print_summary(summary.success, summary.failed, summary.job_id)
            for entry in summary.problems:
                typer.echo(f"  Row {entry['row']}: {'; '.join(entry['problems'])}")
    finally:
        await dispose_engine()


@import_app.command("portfolio")
def import_portfolio(
    url: str = typer.Argument(..., help="Collectr showcase URL"),
    token: str = typer.Option(..., "--token", envvar="CARD_IMPORTER_ACCESS_TOKEN", help="User access token"),
) -> None:
    """Import a portfolio showcase URL through the remote import function."""
    asyncio.run(_import_portfolio(url, token))


async def _import_portfolio(url: str, token: str) -> None:
    """Async implementation of portfolio import."""
    from card_importer.core.config import get_settings
    from card_importer.lib.collection_import import CollectionImportError
    from card_importer.services.collection_import_service import import_portfolio_url

    settings = get_settings()
    try:
        summary = await import_portfolio_url(url, token, settings)
    except CollectionImportError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    _print_summary(summary.success, summary.failed, summary.job_id)

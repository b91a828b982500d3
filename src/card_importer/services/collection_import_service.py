"""Collection import service — turns a parsed export into draft listings.

Rows are mapped and inserted in fixed-size batches. A failed batch insert
is rolled back and counted as failed without stopping the run; only
structural problems (bad file, bad headers) and job bookkeeping failures
abort an import.
"""

import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from card_importer.core.config import Settings
from card_importer.core.database import session_scope
from card_importer.lib.collection_import import (
    CollectionRow,
    ImportProgress,
    ImportSource,
    ImportStatus,
    ImportSummary,
    InvalidHeadersError,
    ParsedCollection,
    PortfolioImportClient,
    map_row,
    resolve_columns,
    validate_headers,
    validate_portfolio_url,
)
from card_importer.models.import_job import ImportJob
from card_importer.models.listing import Listing

DEFAULT_BATCH_SIZE = 50
DEFAULT_PROBLEM_LOG_LIMIT = 500

ProgressCallback = Callable[[ImportProgress], None]
CancelCheck = Callable[[], bool]


def ensure_valid_headers(parsed: ParsedCollection) -> None:
    """Raise InvalidHeadersError when the header row is not a collection export."""
    validation = validate_headers(parsed.headers)
    if not validation.valid:
        raise InvalidHeadersError(validation.message or "Invalid CSV format")


async def create_import_job(
    session: AsyncSession,
    *,
    owner_id: uuid.UUID,
    source: str = ImportSource.CSV,
    total_records: int | None = None,
    metadata: dict[str, Any] | None = None,
) -> ImportJob:
    """Create a new import job record.

    Args:
        session: Database session.
        owner_id: User the import runs for.
        source: Where the rows come from (csv, portfolio_url).
        total_records: Number of rows, when known up front.
        metadata: Free-form job metadata, e.g. the uploaded file name.

    Returns:
        The created ImportJob in ``pending`` status.
    """
    job = ImportJob(
        owner_id=owner_id,
        source=str(source),
        status=ImportStatus.PENDING,
        total_records=total_records,
        records_processed=0,
        records_succeeded=0,
        records_failed=0,
        job_metadata=metadata,
    )
    session.add(job)
    await session.commit()
    await session.refresh(job)
    logger.info(f"Created import job {job.id} ({source}, {total_records} rows) for owner {owner_id}")
    return job


async def mark_import_failed(session: AsyncSession, job_id: uuid.UUID) -> None:
    """Best-effort move of a job to ``failed``; errors are logged, not raised."""
    try:
        await session.execute(
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(status=ImportStatus.FAILED, completed_at=datetime.now(UTC))
        )
        await session.commit()
    except SQLAlchemyError:
        logger.exception(f"Could not mark import job {job_id} as failed")
        await session.rollback()


async def _update_progress(
    session: AsyncSession,
    job_id: uuid.UUID,
    processed: int,
    succeeded: int,
    failed: int,
) -> None:
    try:
        await session.execute(
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(records_processed=processed, records_succeeded=succeeded, records_failed=failed)
        )
        await session.commit()
    except Exception:
        logger.exception(f"Progress update failed for import job {job_id}")
        await session.rollback()


def _notify(on_progress: ProgressCallback | None, progress: ImportProgress) -> None:
    if on_progress is None:
        return
    try:
        on_progress(progress)
    except Exception:
        logger.exception("Import progress callback raised; ignoring")


async def _insert_batch(
    session: AsyncSession,
    job_id: uuid.UUID,
    batch_no: int,
    rows: list[dict],
) -> tuple[int, int]:
    """Insert one chunk of listings in a single statement and commit.

    Returns:
        (succeeded, failed) listing counts for the chunk.
    """
    try:
        await session.execute(insert(Listing), rows)
        await session.commit()
    except Exception:
        logger.exception(f"Import job {job_id}: batch {batch_no} insert failed ({len(rows)} listings)")
        await session.rollback()
        return 0, len(rows)
    return len(rows), 0


async def process_collection_import(
    session: AsyncSession,
    job_id: uuid.UUID,
    rows: Sequence[dict[str, str]],
    owner_id: uuid.UUID,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    currency: str = "GBP",
    problem_log_limit: int = DEFAULT_PROBLEM_LOG_LIMIT,
    on_progress: ProgressCallback | None = None,
    should_cancel: CancelCheck | None = None,
) -> ImportSummary:
    """Map and insert the rows of an existing import job.

    Each unit of a titled row becomes one draft listing tagged with the
    job id. A row without a title counts once as failed regardless of its
    quantity. Every listing in a batch whose insert fails counts as failed
    and the run moves on to the next batch. Listings are inserted in chunks
    of at most ``batch_size``, so a single high-quantity row is split too.

    Args:
        session: Database session.
        job_id: The pending ImportJob to drive.
        rows: Raw rows (header → cell) in file order.
        owner_id: The user the listings belong to.
        batch_size: Rows per batch.
        currency: Currency code for the listings.
        problem_log_limit: Maximum per-row problem entries kept.
        on_progress: Called with rows consumed/total after every batch.
        should_cancel: Polled before every batch; returning True stops the
            run with status ``cancelled``.

    Returns:
        ImportSummary with listing counts, the job id and row problems.

    Raises:
        ValueError: If batch_size is not positive.
        SQLAlchemyError: If the job cannot be started or finalized.
        Exception: Anything else escaping the batch loop; the job is marked
            ``failed`` before it propagates.
    """
    if batch_size <= 0:
        msg = f"batch_size must be positive, got {batch_size}"
        raise ValueError(msg)

    total = len(rows)
    try:
        await session.execute(
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(status=ImportStatus.PROCESSING, started_at=datetime.now(UTC), total_records=total)
        )
        await session.commit()
    except Exception:
        await session.rollback()
        await mark_import_failed(session, job_id)
        raise

    columns = resolve_columns(rows[0].keys()) if rows else {}
    succeeded = 0
    failed = 0
    processed = 0
    problems: list[dict[str, Any]] = []
    problems_dropped = 0
    cancelled = False

    try:
        for batch_no, start in enumerate(range(0, total, batch_size), start=1):
            if should_cancel is not None and should_cancel():
                cancelled = True
                logger.info(f"Import job {job_id} cancelled before batch {batch_no}")
                break

            batch = rows[start : start + batch_size]
            listings: list[dict] = []

            for offset, raw in enumerate(batch):
                row_number = start + offset + 1
                try:
                    mapped = map_row(CollectionRow.from_raw(raw, columns), owner_id, currency=currency)
                except Exception as e:
                    logger.exception(f"Import job {job_id}: could not map row {row_number}")
                    failed += 1
                    mapped_problems, title = [f"Could not map row: {e}"], None
                else:
                    mapped_problems = mapped.problems
                    title = mapped.record.title if mapped.record else None
                    if mapped.record is None:
                        failed += 1
                    else:
                        # A large quantity is inserted in chunks of at most batch_size listings
                        for _ in range(mapped.unit_count):
                            listings.append(mapped.record.to_row(job_id))
                            if len(listings) >= batch_size:
                                ok, bad = await _insert_batch(session, job_id, batch_no, listings)
                                succeeded += ok
                                failed += bad
                                listings = []

                if mapped_problems:
                    if len(problems) < problem_log_limit:
                        problems.append({"row": row_number, "title": title, "problems": mapped_problems})
                    else:
                        problems_dropped += 1

            if listings:
                ok, bad = await _insert_batch(session, job_id, batch_no, listings)
                succeeded += ok
                failed += bad

            processed = min(start + len(batch), total)
            logger.info(
                f"Import job {job_id}: batch {batch_no} done, {processed}/{total} rows "
                f"({succeeded} succeeded, {failed} failed)"
            )
            await _update_progress(session, job_id, processed, succeeded, failed)
            _notify(on_progress, ImportProgress(current=processed, total=total))
    except Exception:
        logger.exception(f"Import job {job_id} aborted after {processed}/{total} rows")
        await session.rollback()
        await mark_import_failed(session, job_id)
        raise

    if problems_dropped:
        logger.warning(f"Import job {job_id}: {problems_dropped} problem rows not kept (limit {problem_log_limit})")

    final_status = ImportStatus.CANCELLED if cancelled else ImportStatus.COMPLETED
    try:
        await session.execute(
            update(ImportJob)
            .where(ImportJob.id == job_id)
            .values(
                status=final_status,
                records_processed=processed,
                records_succeeded=succeeded,
                records_failed=failed,
                error_log=problems or None,
                completed_at=datetime.now(UTC),
            )
        )
        await session.commit()
    except Exception:
        await session.rollback()
        await mark_import_failed(session, job_id)
        raise

    logger.info(f"Import job {job_id} {final_status}: {succeeded} succeeded, {failed} failed")
    return ImportSummary(success=succeeded, failed=failed, job_id=job_id, problems=problems)

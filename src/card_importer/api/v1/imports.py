"""Import API endpoints.

POST /imports/csv (multipart upload), POST /imports/portfolio (showcase URL),
GET /imports (own jobs), GET /imports/{job_id} (status/progress),
POST /imports/{job_id}/cancel.
"""

import math
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from card_importer.core.background import task_runner
from card_importer.core.config import Settings, get_settings
from card_importer.core.dependencies import AuthenticatedUser, get_async_session, get_current_user
from card_importer.lib.collection_import import (
    CollectionImportError,
    ImportSource,
    ImportStatus,
    InvalidPortfolioUrlError,
    PortfolioImportError,
    parse_collection_csv,
)
from card_importer.models.import_job import ImportJob
from card_importer.schemas.common import ErrorResponse, PaginationMeta, PaginationParams
from card_importer.schemas.imports import (
    ImportJobResponse,
    ImportSummaryResponse,
    PaginatedImportJobResponse,
    PortfolioImportRequest,
)
from card_importer.services import collection_import_service

router = APIRouter(prefix="/imports", tags=["imports"])

_NO_FILE_DETAIL = "No file provided"
_NOT_FOUND_DETAIL = "Import job not found"
_ACTIVE_STATUSES = (ImportStatus.PENDING, ImportStatus.PROCESSING)


async def _get_owned_job(session: AsyncSession, job_id: uuid.UUID, owner_id: uuid.UUID) -> ImportJob:
    job = await collection_import_service.get_import_job(session, job_id)
    # Other users' jobs look the same as missing ones
    if job is None or job.owner_id != owner_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    return job


@router.post(
    "/csv",
    response_model=ImportJobResponse,
    status_code=202,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def import_csv(
    file: UploadFile,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImportJobResponse:
    """Upload a collection export and import it as draft listings.

    The file is parsed and its headers checked before responding; rows are
    imported in the background and progress is read from GET /imports/{job_id}.
    """
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_NO_FILE_DETAIL)

    content = await file.read()
    if len(content) > settings.import_max_file_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds maximum size of {settings.import_max_file_size_mb} MB",
        )

    try:
        parsed = parse_collection_csv(content)
        collection_import_service.ensure_valid_headers(parsed)
    except CollectionImportError as e:
        logger.info(f"Rejected upload {file.filename!r}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    job = await collection_import_service.create_import_job(
        session,
        owner_id=current_user.id,
        source=ImportSource.CSV,
        total_records=len(parsed.rows),
        metadata={"filename": file.filename},
    )

    task_id = str(job.id)
    task_runner.submit_task(
        collection_import_service.run_import_job_in_background(
            job.id,
            parsed.rows,
            current_user.id,
            settings,
            should_cancel=lambda: task_runner.is_cancel_requested(task_id),
        ),
        task_id=task_id,
    )
    return ImportJobResponse.model_validate(job)


@router.post(
    "/portfolio",
    response_model=ImportSummaryResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def import_portfolio(
    request: PortfolioImportRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImportSummaryResponse:
    """Import a portfolio showcase URL through the remote import function."""
    try:
        summary = await collection_import_service.import_portfolio_url(
            request.portfolio_url, current_user.access_token, settings
        )
    except InvalidPortfolioUrlError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except PortfolioImportError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return ImportSummaryResponse.model_validate(summary.to_dict())


@router.get("", response_model=PaginatedImportJobResponse)
async def list_imports(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    pagination: Annotated[PaginationParams, Depends()],
    source: ImportSource | None = None,
    import_status: ImportStatus | None = None,
) -> PaginatedImportJobResponse:
    """List the caller's import jobs, newest first."""
    jobs, total = await collection_import_service.list_import_jobs(
        session,
        owner_id=current_user.id,
        source=source,
        status=import_status,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedImportJobResponse(
        items=[ImportJobResponse.model_validate(j) for j in jobs],
        pagination=PaginationMeta(
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=max(1, math.ceil(total / pagination.page_size)),
        ),
    )


@router.get("/{job_id}", response_model=ImportJobResponse, responses={404: {"model": ErrorResponse}})
async def get_import(
    job_id: uuid.UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ImportJobResponse:
    """Get an import job's status and progress."""
    job = await _get_owned_job(session, job_id, current_user.id)
    return ImportJobResponse.model_validate(job)


@router.post(
    "/{job_id}/cancel",
    response_model=ImportJobResponse,
    status_code=202,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_import(
    job_id: uuid.UUID,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ImportJobResponse:
    """Ask a running import to stop after its current batch."""
    job = await _get_owned_job(session, job_id, current_user.id)
    if job.status not in _ACTIVE_STATUSES or not task_runner.request_cancel(str(job.id)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Import job is not running")
    return ImportJobResponse.model_validate(job)

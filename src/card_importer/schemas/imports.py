"""Import job Pydantic v2 request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from card_importer.schemas.common import PaginationMeta


class ImportProblem(BaseModel):
    """Problems found on one export row."""

    row: int = Field(description="1-based data row number (header excluded)")
    title: str | None = Field(default=None, description="Listing title, when the row had one")
    problems: list[str]


class ImportJobResponse(BaseModel):
    """Import job status, progress and metadata."""

    id: UUID
    owner_id: UUID
    source: str
    status: str
    file_name: str | None = None
    total_records: int | None = None
    records_processed: int = 0
    records_succeeded: int = 0
    records_failed: int = 0
    error_log: list[ImportProblem] | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaginatedImportJobResponse(BaseModel):
    """Paginated list of import jobs."""

    items: list[ImportJobResponse]
    pagination: PaginationMeta


class PortfolioImportRequest(BaseModel):
    """Request body for a portfolio URL import."""

    portfolio_url: str = Field(
        min_length=1,
        max_length=2048,
        description="Collectr showcase URL, e.g. https://app.getcollectr.com/showcase/profile/<id>",
    )


class ImportSummaryResponse(BaseModel):
    """Terminal outcome of an import run."""

    success: int = Field(ge=0, description="Listings created")
    failed: int = Field(ge=0, description="Listings or rows that could not be created")
    job_id: UUID | None = None
    problems: list[ImportProblem] = Field(default_factory=list)

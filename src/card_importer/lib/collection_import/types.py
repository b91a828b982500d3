"""Data types for the collection_import library.

Defines the internal condition tiers, grading info, the candidate listing
record produced per (row, unit), progress/summary reporting, and the
exception hierarchy for structural import failures.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any


class Condition(StrEnum):
    """Internal listing condition tier."""

    LIKE_NEW = "like_new"
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


DEFAULT_CONDITION = Condition.GOOD


class ImportSource(StrEnum):
    """Where the rows of an import run came from."""

    CSV = "csv"
    PORTFOLIO_URL = "portfolio_url"


class ImportStatus(StrEnum):
    """Lifecycle status of an import job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GradingInfo:
    """Grading derived from the export's grade column.

    Attributes:
        is_graded: Whether a third-party service graded the card.
        grading_service: Upper-cased service name (PSA, CGC, BGS, BECKETT).
        grading_score: Score exactly as written in the export (e.g. "9.5").
    """

    is_graded: bool = False
    grading_service: str | None = None
    grading_score: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the metadata form; ungraded cards carry only ``is_graded``."""
        if not self.is_graded:
            return {"is_graded": False}
        return {
            "is_graded": True,
            "grading_service": self.grading_service,
            "grading_score": self.grading_score,
        }


@dataclass
class CandidateRecord:
    """One listing to be inserted, built from a single unit of an export row."""

    seller_id: uuid.UUID
    title: str
    description: str | None
    set_code: str | None
    card_number: str | None
    seller_price: Decimal
    condition: Condition
    currency: str
    portfolio_name: str
    import_metadata: dict[str, Any] = field(default_factory=dict)
    category: str = "Trading Cards"
    status: str = "draft"
    import_job_id: uuid.UUID | None = None

    def to_row(self, import_job_id: uuid.UUID) -> dict[str, Any]:
        """Return an insertable column mapping tagged with the owning job.

        Args:
            import_job_id: The ImportJob this record belongs to.

        Returns:
            Dict of listing column name to value.
        """
        return {
            "id": uuid.uuid4(),
            "seller_id": self.seller_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "set_code": self.set_code,
            "card_number": self.card_number,
            "seller_price": self.seller_price,
            "condition": self.condition.value,
            "currency": self.currency,
            "status": self.status,
            "portfolio_name": self.portfolio_name,
            "import_metadata": dict(self.import_metadata),
            "import_job_id": import_job_id,
        }


@dataclass(frozen=True)
class ImportProgress:
    """Rows consumed so far out of the total, reported once per batch."""

    current: int
    total: int

    @property
    def percent(self) -> float:
        """Completion percentage (100.0 for an empty import)."""
        if self.total <= 0:
            return 100.0
        return round(self.current / self.total * 100, 1)


@dataclass
class ImportSummary:
    """Terminal outcome of an import run.

    Attributes:
        success: Listings persisted.
        failed: Listings (or title-less rows) that could not be persisted.
        job_id: The ImportJob that tracked the run, when known.
        problems: Per-row problem entries surfaced to the user.
    """

    success: int = 0
    failed: int = 0
    job_id: uuid.UUID | None = None
    problems: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "failed": self.failed,
            "job_id": str(self.job_id) if self.job_id else None,
            "problems": self.problems,
        }


class CollectionImportError(Exception):
    """Base class for structural import failures surfaced to the caller."""


class CollectionParseError(CollectionImportError):
    """Raised when the uploaded file cannot be read as a table."""


class InvalidHeadersError(CollectionImportError):
    """Raised when the header row does not look like a collection export."""


class InvalidPortfolioUrlError(CollectionImportError):
    """Raised when a portfolio URL does not match the provider's profile path."""


class PortfolioImportError(CollectionImportError):
    """Raised when the remote portfolio import function fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

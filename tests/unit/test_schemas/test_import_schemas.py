"""Unit tests for import job schemas."""

import uuid
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from card_importer.lib.collection_import import ImportSummary
from card_importer.models import ImportJob
from card_importer.schemas.imports import ImportJobResponse, ImportSummaryResponse, PortfolioImportRequest


class TestImportJobResponse:
    """Tests for ImportJobResponse."""

    def test_from_model(self) -> None:
        job = ImportJob(
            id=uuid.uuid4(),
            owner_id=uuid.uuid4(),
            source="csv",
            status="completed",
            total_records=3,
            records_processed=3,
            records_succeeded=4,
            records_failed=1,
            job_metadata={"filename": "binder.csv"},
            error_log=[{"row": 3, "title": None, "problems": ["Missing product name"]}],
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
        )

        resp = ImportJobResponse.model_validate(job)

        assert resp.file_name == "binder.csv"
        assert resp.records_succeeded == 4
        assert resp.error_log is not None
        assert resp.error_log[0].row == 3
        assert resp.error_log[0].problems == ["Missing product name"]

    def test_without_metadata(self) -> None:
        job = ImportJob(
            id=uuid.uuid4(),
            owner_id=uuid.uuid4(),
            source="portfolio_url",
            status="pending",
            records_processed=0,
            records_succeeded=0,
            records_failed=0,
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
        )
        resp = ImportJobResponse.model_validate(job)
        assert resp.file_name is None
        assert resp.error_log is None


class TestImportSummaryResponse:
    """Tests for ImportSummaryResponse."""

    def test_from_summary(self) -> None:
        job_id = uuid.uuid4()
        summary = ImportSummary(success=2, failed=1, job_id=job_id, problems=[{"row": 2, "problems": ["Missing set"]}])

        resp = ImportSummaryResponse.model_validate(summary.to_dict())

        assert resp.job_id == job_id
        assert resp.problems[0].title is None

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ImportSummaryResponse(success=-1, failed=0)


class TestPortfolioImportRequest:
    """Tests for PortfolioImportRequest."""

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PortfolioImportRequest(portfolio_url="")

"""Unit tests for the ingestion orchestrator"""

import uuid
import pytest
from datetime import datetime
from types import SimpleNamespace
from sqlalchemy.orm import Session
from credit_report_gateway.domain.exceptions import (
    DuplicateReportError,
    InvalidReportFormatError,
    ReportParsingError,
)
from credit_report_gateway.infrastructure.database.models import CreditReportRecord
from credit_report_gateway.infrastructure.database.repositories import CreditReportRepository
from credit_report_gateway.services.ingestion import ReportIngestionService


class RacingStore:
    """Store whose pre-check misses a concurrent insert that wins the unique constraint"""

    def __init__(self, winner_id: uuid.UUID):
        self.winner_id = winner_id

    def find_by_report_number(self, report_number):
        return None

    def insert(self, report):
        raise DuplicateReportError(report.report_number, self.winner_id)


class RecordingStore:
    def __init__(self):
        self.inserted = []

    def find_by_report_number(self, report_number):
        return None

    def insert(self, report):
        self.inserted.append(report)
        return SimpleNamespace(id=uuid.uuid4())


def test_ingest_returns_condensed_projection(repository: CreditReportRepository, db: Session, sample_xml: str):
    """Test a successful ingestion persists and returns the condensed view"""
    service = ReportIngestionService(repository)

    result = service.ingest(sample_xml)
    db.commit()

    assert result.report_number == "1595504758919"
    assert result.name == "Sagar Ugle"
    assert result.pan == "AOZPB0247S"
    assert result.mobile_phone == "9819137672"
    assert result.total_accounts == 4
    assert result.credit_score == 719
    assert result.total_balance == 245000

    stored = repository.get_by_id(result.report_id)
    assert stored is not None
    assert stored.report_number == "1595504758919"
    assert len(stored.credit_accounts) == 1


def test_ingest_same_document_twice_conflicts(repository: CreditReportRepository, db: Session, sample_xml: str):
    """Test the second ingestion of a report number is rejected with the first record's id"""
    service = ReportIngestionService(repository)
    first = service.ingest(sample_xml)
    db.commit()

    with pytest.raises(DuplicateReportError) as exc_info:
        service.ingest(sample_xml)

    assert exc_info.value.existing_id == first.report_id
    assert exc_info.value.report_number == "1595504758919"
    assert db.query(CreditReportRecord).filter_by(report_number="1595504758919").count() == 1


def test_ingest_rejects_non_experian_document():
    """Test the structural gate runs before anything touches the store"""
    store = RecordingStore()
    service = ReportIngestionService(store)

    with pytest.raises(InvalidReportFormatError, match="not a valid Experian credit report"):
        service.ingest("<invalid>content</invalid>")

    assert store.inserted == []


def test_ingest_wraps_malformed_xml_as_parsing_error():
    """Test documents passing the gate but failing XML parsing are mapping errors"""
    store = RecordingStore()
    service = ReportIngestionService(store)

    with pytest.raises(ReportParsingError):
        service.ingest("<INProfileResponse><CAIS_Account></INProfileResponse>")

    assert store.inserted == []


def test_ingest_lost_race_surfaces_conflict(sample_xml: str):
    """Test a unique-constraint loss after an empty pre-check is still a conflict"""
    winner_id = uuid.uuid4()
    service = ReportIngestionService(RacingStore(winner_id))

    with pytest.raises(DuplicateReportError) as exc_info:
        service.ingest(sample_xml)

    assert exc_info.value.existing_id == winner_id


def test_repository_unique_constraint_reports_existing_id(
    repository: CreditReportRepository, db: Session, sample_xml: str
):
    """Test the store itself enforces one record per report number"""
    service = ReportIngestionService(RecordingStore())
    service.ingest(sample_xml)
    report = service.store.inserted[0]

    first = repository.insert(report)
    db.commit()

    with pytest.raises(DuplicateReportError) as exc_info:
        repository.insert(report)

    assert exc_info.value.existing_id == first.id
    assert repository.count() == 1


def test_synthesized_report_number_uses_injected_clock():
    """Test the clock drives placeholder identity values"""
    now = datetime(2024, 5, 1, 8, 0, 0)
    store = RecordingStore()
    service = ReportIngestionService(store, clock=lambda: now)

    service.ingest("<INProfileResponse><CAIS_Account></CAIS_Account></INProfileResponse>")

    report = store.inserted[0]
    assert report.report_number == f"RPT_{int(now.timestamp() * 1000)}"
    assert report.report_date == "2024-05-01"

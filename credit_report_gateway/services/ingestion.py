"""Ingestion orchestrator - raw XML text to a persisted canonical record"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Protocol

from credit_report_gateway.domain.exceptions import DuplicateReportError, InvalidReportFormatError
from credit_report_gateway.domain.mapper import map_credit_report
from credit_report_gateway.domain.models import CreditReport
from credit_report_gateway.domain.validation import validate_xml_structure
from credit_report_gateway.infrastructure.observability.metrics import mapping_duration_histogram
from credit_report_gateway.infrastructure.xml.tree import parse_xml


class StoredReport(Protocol):
    id: uuid.UUID


class ReportStore(Protocol):
    """Store capability the orchestrator needs"""

    def find_by_report_number(self, report_number: str) -> Optional[StoredReport]: ...

    def insert(self, report: CreditReport) -> StoredReport: ...


@dataclass
class IngestionResult:
    """Condensed projection of a freshly stored report"""

    report_id: uuid.UUID
    report_number: str
    report_date: str
    name: str
    pan: str
    mobile_phone: str
    total_accounts: int
    credit_score: Optional[int]
    total_balance: int

    @classmethod
    def from_report(cls, report_id: uuid.UUID, report: CreditReport) -> "IngestionResult":
        return cls(
            report_id=report_id,
            report_number=report.report_number,
            report_date=report.report_date,
            name=report.basic_details.full_name,
            pan=report.basic_details.pan,
            mobile_phone=report.basic_details.mobile_phone,
            total_accounts=report.report_summary.total_accounts,
            credit_score=report.credit_score,
            total_balance=report.report_summary.outstanding_balance_all,
        )


class ReportIngestionService:
    """Drives validate -> map -> duplicate check -> persist for one document"""

    def __init__(self, store: ReportStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def ingest(self, xml_content: str) -> IngestionResult:
        """
        Ingest one Experian XML document.

        Flow:
        1. Structural gate on the raw text
        2. Parse and map to a canonical CreditReport
        3. Reject if the report number is already stored
        4. Persist
        5. Return the condensed projection

        The pre-check in step 3 is an early exit only; the store's unique
        constraint on report_number decides concurrent races.

        Raises:
            InvalidReportFormatError: Not an Experian report
            ReportParsingError: Mapping failed
            DuplicateReportError: Report number already stored
        """
        if not validate_xml_structure(xml_content):
            raise InvalidReportFormatError("The uploaded file is not a valid Experian credit report")

        with mapping_duration_histogram.time():
            report = map_credit_report(parse_xml(xml_content), now=self.clock())

        existing = self.store.find_by_report_number(report.report_number)
        if existing is not None:
            raise DuplicateReportError(report.report_number, existing.id)

        # Raises DuplicateReportError itself when a concurrent ingestion won the race
        stored = self.store.insert(report)

        return IngestionResult.from_report(stored.id, report)

"""Unit tests for the credit report repository"""

import uuid
from sqlalchemy.orm import Session
from credit_report_gateway.domain.mapper import map_credit_report
from credit_report_gateway.infrastructure.database.models import CreditAccountRecord
from credit_report_gateway.infrastructure.database.repositories import CreditReportRepository, to_domain
from credit_report_gateway.infrastructure.xml.tree import parse_xml


def test_stored_report_round_trips_to_domain(repository: CreditReportRepository, db: Session, holder_only_xml: str):
    """Test flattening into rows and rebuilding yields the same canonical report"""
    report = map_credit_report(parse_xml(holder_only_xml))

    record = repository.insert(report)
    db.commit()

    assert to_domain(repository.get_by_id(record.id)) == report


def test_accounts_keep_source_order(repository: CreditReportRepository, db: Session, holder_only_xml: str):
    """Test accounts come back in document order"""
    record = repository.insert(map_credit_report(parse_xml(holder_only_xml)))
    db.commit()

    stored = repository.get_by_id(record.id)

    assert [a.account_number for a in stored.credit_accounts] == ["HDFC-001", "SBI-777"]


def test_delete_cascades_to_accounts(repository: CreditReportRepository, db: Session, holder_only_xml: str):
    """Test embedded accounts are removed with their report"""
    record = repository.insert(map_credit_report(parse_xml(holder_only_xml)))
    db.commit()
    report_id = record.id

    deleted = repository.delete_by_id(report_id)
    db.commit()

    assert deleted is not None
    assert repository.get_by_id(report_id) is None
    assert db.query(CreditAccountRecord).count() == 0


def test_delete_unknown_id_returns_none(repository: CreditReportRepository):
    """Test deleting a missing report is a no-op"""
    assert repository.delete_by_id(uuid.uuid4()) is None


def test_list_reports_newest_first_with_paging(repository: CreditReportRepository, db: Session, sample_xml: str):
    """Test listing order and skip/limit"""
    for number in ("A-1", "A-2", "A-3"):
        repository.insert(map_credit_report(parse_xml(sample_xml.replace("1595504758919", number))))
        db.commit()

    first_page = repository.list_reports(page=1, limit=2)
    second_page = repository.list_reports(page=2, limit=2)

    assert [r.report_number for r in first_page] == ["A-3", "A-2"]
    assert [r.report_number for r in second_page] == ["A-1"]
    assert repository.count() == 3

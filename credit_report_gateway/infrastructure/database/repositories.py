"""Data access layer for credit reports"""

import uuid
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from credit_report_gateway.infrastructure.database.models import CreditReportRecord, CreditAccountRecord
from credit_report_gateway.domain.exceptions import DuplicateReportError
from credit_report_gateway.domain.models import (
    AccountHistory,
    Address,
    BasicDetails,
    CreditAccount,
    CreditReport,
    ReportSummary,
    ReportTotals,
)

SUMMARY_COLUMNS = (
    "total_accounts",
    "active_accounts",
    "closed_accounts",
    "default_accounts",
    "outstanding_balance_secured",
    "outstanding_balance_unsecured",
    "outstanding_balance_all",
    "enquiries_last_7_days",
    "enquiries_last_30_days",
    "enquiries_last_90_days",
    "enquiries_last_180_days",
)


def _account_record(position: int, account: CreditAccount) -> CreditAccountRecord:
    return CreditAccountRecord(
        position=position,
        subscriber_name=account.subscriber_name,
        account_number=account.account_number,
        portfolio_type=account.portfolio_type,
        account_type=account.account_type,
        open_date=account.open_date,
        date_reported=account.date_reported,
        date_closed=account.date_closed,
        credit_limit=account.credit_limit,
        highest_credit=account.highest_credit,
        current_balance=account.current_balance,
        amount_past_due=account.amount_past_due,
        account_status=account.account_status,
        payment_rating=account.payment_rating,
        repayment_tenure=account.repayment_tenure,
        address_first_line=account.address.first_line,
        address_second_line=account.address.second_line,
        address_third_line=account.address.third_line,
        address_city=account.address.city,
        address_state=account.address.state,
        address_pin_code=account.address.pin_code,
        address_country=account.address.country,
        account_history=[
            {
                "year": entry.year,
                "month": entry.month,
                "days_past_due": entry.days_past_due,
                "asset_classification": entry.asset_classification,
            }
            for entry in account.account_history
        ],
    )


def build_record(report: CreditReport) -> CreditReportRecord:
    """Flatten a canonical report into ORM rows"""
    details = report.basic_details
    record = CreditReportRecord(
        report_number=report.report_number,
        report_date=report.report_date,
        report_time=report.report_time,
        version=report.version,
        first_name=details.first_name,
        last_name=details.last_name,
        mobile_phone=details.mobile_phone,
        pan=details.pan,
        date_of_birth=details.date_of_birth,
        gender=details.gender,
        credit_score=report.credit_score,
        credit_score_confidence=report.credit_score_confidence,
        **{name: getattr(report.report_summary, name) for name in SUMMARY_COLUMNS},
    )
    record.credit_accounts = [
        _account_record(position, account) for position, account in enumerate(report.credit_accounts)
    ]
    return record


def to_domain(record: CreditReportRecord) -> CreditReport:
    """Rebuild the canonical report from stored rows"""
    return CreditReport(
        report_number=record.report_number,
        report_date=record.report_date,
        report_time=record.report_time,
        version=record.version,
        basic_details=BasicDetails(
            first_name=record.first_name,
            last_name=record.last_name,
            mobile_phone=record.mobile_phone,
            pan=record.pan,
            date_of_birth=record.date_of_birth,
            gender=record.gender,
        ),
        report_summary=ReportSummary(**{name: getattr(record, name) for name in SUMMARY_COLUMNS}),
        credit_accounts=[
            CreditAccount(
                subscriber_name=acc.subscriber_name,
                account_number=acc.account_number,
                portfolio_type=acc.portfolio_type,
                account_type=acc.account_type,
                open_date=acc.open_date,
                date_reported=acc.date_reported,
                date_closed=acc.date_closed,
                credit_limit=acc.credit_limit,
                highest_credit=acc.highest_credit,
                current_balance=acc.current_balance,
                amount_past_due=acc.amount_past_due,
                account_status=acc.account_status,
                payment_rating=acc.payment_rating,
                repayment_tenure=acc.repayment_tenure,
                address=Address(
                    first_line=acc.address_first_line,
                    second_line=acc.address_second_line,
                    third_line=acc.address_third_line,
                    city=acc.address_city,
                    state=acc.address_state,
                    pin_code=acc.address_pin_code,
                    country=acc.address_country,
                ),
                account_history=[AccountHistory(**entry) for entry in acc.account_history or []],
            )
            for acc in record.credit_accounts
        ],
        credit_score=record.credit_score,
        credit_score_confidence=record.credit_score_confidence,
    )


class CreditReportRepository:
    """Repository for credit reports"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, report: CreditReport) -> CreditReportRecord:
        """
        Persist a new report.

        Raises:
            DuplicateReportError: report_number already stored (unique constraint)
        """
        record = build_record(report)
        self.db.add(record)
        try:
            self.db.flush()  # Get ID and hit the unique constraint without committing
        except IntegrityError:
            self.db.rollback()
            existing = self.find_by_report_number(report.report_number)
            if existing is None:
                raise
            raise DuplicateReportError(report.report_number, existing.id)
        return record

    def find_by_report_number(self, report_number: str) -> Optional[CreditReportRecord]:
        return (
            self.db.query(CreditReportRecord)
            .filter(CreditReportRecord.report_number == report_number)
            .first()
        )

    def get_by_id(self, report_id: uuid.UUID) -> Optional[CreditReportRecord]:
        """Fetch report with its accounts"""
        return (
            self.db.query(CreditReportRecord)
            .filter(CreditReportRecord.id == report_id)
            .first()
        )

    def delete_by_id(self, report_id: uuid.UUID) -> Optional[CreditReportRecord]:
        """Delete report and its accounts; returns the deleted row or None"""
        record = self.get_by_id(report_id)
        if record is None:
            return None
        self.db.delete(record)
        self.db.flush()
        return record

    def list_reports(self, page: int = 1, limit: int = 10) -> List[CreditReportRecord]:
        """Newest first"""
        return (
            self.db.query(CreditReportRecord)
            .order_by(CreditReportRecord.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.db.query(func.count(CreditReportRecord.id)).scalar() or 0

    def aggregate_totals(self) -> ReportTotals:
        """Grouped sums and average over the whole collection"""
        # AVG skips NULL scores and is NULL when no report has one
        average, active, closed, balance = self.db.query(
            func.avg(CreditReportRecord.credit_score),
            func.coalesce(func.sum(CreditReportRecord.active_accounts), 0),
            func.coalesce(func.sum(CreditReportRecord.closed_accounts), 0),
            func.coalesce(func.sum(CreditReportRecord.outstanding_balance_all), 0),
        ).one()

        return ReportTotals(
            total_reports=self.count(),
            average_credit_score=float(average) if average is not None else None,
            total_active_accounts=int(active),
            total_closed_accounts=int(closed),
            total_outstanding_balance=int(balance),
        )

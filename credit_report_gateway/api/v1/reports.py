"""GET/DELETE /api/reports - stored report listing, detail and removal"""

import math
import uuid
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.orm import Session

from credit_report_gateway.api.errors import ApiError
from credit_report_gateway.api.dependencies import get_report_repository, get_request_id, get_settings
from credit_report_gateway.api.v1 import labels
from credit_report_gateway.api.v1.schemas import (
    AccountCounts,
    AccountHistorySchema,
    AddressSchema,
    BasicDetailsSchema,
    CreditAccountSchema,
    CreditScoreSchema,
    DeletedReport,
    DeleteResponse,
    Enquiries,
    OutstandingBalance,
    Pagination,
    ReportDetail,
    ReportDetailResponse,
    ReportListData,
    ReportListItem,
    ReportListResponse,
    ReportSummarySchema,
)
from credit_report_gateway.config import Settings
from credit_report_gateway.infrastructure.database.models import CreditAccountRecord, CreditReportRecord
from credit_report_gateway.infrastructure.database.repositories import CreditReportRepository
from credit_report_gateway.infrastructure.database.session import get_db

router = APIRouter()

# Detail view shows the most recent year of payment history
HISTORY_MONTHS_SHOWN = 12


def parse_report_id(report_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(report_id)
    except ValueError:
        raise ApiError(400, "Invalid ID", "Please provide a valid report ID")


def _full_name(record: CreditReportRecord) -> str:
    return f"{record.first_name} {record.last_name}".strip()


def _account_schema(account: CreditAccountRecord) -> CreditAccountSchema:
    history = list(account.account_history or [])[-HISTORY_MONTHS_SHOWN:]
    return CreditAccountSchema(
        subscriber_name=account.subscriber_name,
        account_number=account.account_number,
        account_type=labels.account_type_label(account.account_type),
        portfolio_type=labels.portfolio_type_label(account.portfolio_type),
        open_date=account.open_date,
        credit_limit=account.credit_limit,
        highest_credit=account.highest_credit,
        current_balance=account.current_balance,
        amount_past_due=account.amount_past_due,
        account_status=labels.account_status_label(account.account_status),
        payment_rating=account.payment_rating,
        date_reported=account.date_reported,
        date_closed=account.date_closed,
        repayment_tenure=account.repayment_tenure,
        address=AddressSchema(
            first_line=account.address_first_line,
            second_line=account.address_second_line,
            third_line=account.address_third_line,
            city=account.address_city,
            state=account.address_state,
            pin_code=account.address_pin_code,
            country=account.address_country,
        ),
        account_history=[AccountHistorySchema(**entry) for entry in history],
    )


def format_report(record: CreditReportRecord) -> ReportDetail:
    """Full report with display labels for coded account fields"""
    return ReportDetail(
        id=str(record.id),
        report_number=record.report_number,
        report_date=record.report_date,
        report_time=record.report_time,
        version=record.version,
        basic_details=BasicDetailsSchema(
            name=_full_name(record),
            first_name=record.first_name,
            last_name=record.last_name,
            mobile_phone=record.mobile_phone,
            pan=record.pan,
            date_of_birth=record.date_of_birth,
            gender=record.gender,
        ),
        credit_score=CreditScoreSchema(score=record.credit_score, confidence=record.credit_score_confidence),
        report_summary=ReportSummarySchema(
            accounts=AccountCounts(
                total=record.total_accounts,
                active=record.active_accounts,
                closed=record.closed_accounts,
                default=record.default_accounts,
            ),
            outstanding_balance=OutstandingBalance(
                secured=record.outstanding_balance_secured,
                unsecured=record.outstanding_balance_unsecured,
                total=record.outstanding_balance_all,
            ),
            enquiries=Enquiries(
                last_7_days=record.enquiries_last_7_days,
                last_30_days=record.enquiries_last_30_days,
                last_90_days=record.enquiries_last_90_days,
                last_180_days=record.enquiries_last_180_days,
            ),
        ),
        credit_accounts=[_account_schema(account) for account in record.credit_accounts],
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


@router.get("/reports", response_model=ReportListResponse)
def list_reports(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: Optional[int] = Query(None, ge=1, description="Page size (default and maximum from settings)"),
    repository: CreditReportRepository = Depends(get_report_repository),
    settings: Settings = Depends(get_settings),
):
    """
    List stored reports, newest first.

    Returns:
        One page of condensed reports plus pagination metadata
    """
    if limit is None:
        limit = settings.default_page_size
    elif limit > settings.max_page_size:
        raise RequestValidationError(
            [
                {
                    "type": "less_than_equal",
                    "loc": ("query", "limit"),
                    "msg": f"Input should be less than or equal to {settings.max_page_size}",
                    "input": limit,
                }
            ]
        )

    records = repository.list_reports(page=page, limit=limit)
    total = repository.count()
    total_pages = math.ceil(total / limit)

    reports = [
        ReportListItem(
            id=str(r.id),
            report_number=r.report_number,
            report_date=r.report_date,
            name=_full_name(r),
            pan=r.pan,
            mobile_phone=r.mobile_phone,
            credit_score=r.credit_score,
            total_accounts=r.total_accounts,
            total_balance=r.outstanding_balance_all,
            created_at=r.created_at,
        )
        for r in records
    ]

    return ReportListResponse(
        data=ReportListData(
            reports=reports,
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_reports=total,
                has_next_page=page < total_pages,
                has_prev_page=page > 1,
            ),
        )
    )


@router.get("/reports/{report_id}", response_model=ReportDetailResponse)
def get_report(report_id: str, repository: CreditReportRepository = Depends(get_report_repository)):
    """Retrieve one report with accounts and the last 12 months of history"""
    report_uuid = parse_report_id(report_id)

    record = repository.get_by_id(report_uuid)
    if not record:
        raise ApiError(404, "Report not found", "Credit report not found")

    return ReportDetailResponse(data=format_report(record))


@router.delete("/reports/{report_id}", response_model=DeleteResponse)
def delete_report(
    report_id: str,
    request: Request,
    db: Session = Depends(get_db),
    repository: CreditReportRepository = Depends(get_report_repository),
):
    """Delete a report and everything embedded in it"""
    report_uuid = parse_report_id(report_id)

    record = repository.delete_by_id(report_uuid)
    if not record:
        raise ApiError(404, "Report not found", "Credit report not found")

    # Read before commit: the row is gone afterwards
    deleted = DeletedReport(report_id=str(record.id), report_number=record.report_number)
    db.commit()

    logging.info(
        "Report deleted",
        extra={"request_id": get_request_id(request), "report_number": deleted.report_number},
    )
    return DeleteResponse(data=deleted)

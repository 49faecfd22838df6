"""Pydantic schemas for API responses (camelCase on the wire)"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class ApiModel(BaseModel):
    """Base model serializing snake_case fields as camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# POST /api/upload

class UploadBasicDetails(ApiModel):
    name: str
    pan: str
    mobile_phone: str


class UploadSummary(ApiModel):
    total_accounts: int
    credit_score: Optional[int] = None
    total_balance: int


class UploadData(ApiModel):
    report_id: str
    report_number: str
    report_date: str
    basic_details: UploadBasicDetails
    summary: UploadSummary


class UploadResponse(ApiModel):
    """Response for POST /api/upload"""

    success: bool = True
    message: str = "Credit report processed and saved successfully"
    data: UploadData


# GET /api/reports

class ReportListItem(ApiModel):
    id: str
    report_number: str
    report_date: str
    name: str
    pan: str
    mobile_phone: str
    credit_score: Optional[int] = None
    total_accounts: int
    total_balance: int
    created_at: datetime


class Pagination(ApiModel):
    current_page: int
    total_pages: int
    total_reports: int
    has_next_page: bool
    has_prev_page: bool


class ReportListData(ApiModel):
    reports: List[ReportListItem]
    pagination: Pagination


class ReportListResponse(ApiModel):
    """Response for GET /api/reports"""

    success: bool = True
    data: ReportListData


# GET /api/reports/{id}

class BasicDetailsSchema(ApiModel):
    name: str
    first_name: str
    last_name: str
    mobile_phone: str
    pan: str
    date_of_birth: str
    gender: Optional[str] = None


class CreditScoreSchema(ApiModel):
    score: Optional[int] = None
    confidence: Optional[str] = None


class AccountCounts(ApiModel):
    total: int
    active: int
    closed: int
    default: int


class OutstandingBalance(ApiModel):
    secured: int
    unsecured: int
    total: int


class Enquiries(ApiModel):
    last_7_days: int
    last_30_days: int
    last_90_days: int
    last_180_days: int


class ReportSummarySchema(ApiModel):
    accounts: AccountCounts
    outstanding_balance: OutstandingBalance
    enquiries: Enquiries


class AddressSchema(ApiModel):
    first_line: str
    second_line: Optional[str] = None
    third_line: Optional[str] = None
    city: str
    state: str
    pin_code: str
    country: str


class AccountHistorySchema(ApiModel):
    year: int
    month: int
    days_past_due: int = 0
    asset_classification: Optional[str] = None


class CreditAccountSchema(ApiModel):
    subscriber_name: str
    account_number: str
    account_type: str
    portfolio_type: str
    open_date: str
    credit_limit: Optional[int] = None
    highest_credit: Optional[int] = None
    current_balance: int
    amount_past_due: int
    account_status: str
    payment_rating: str
    date_reported: str
    date_closed: Optional[str] = None
    repayment_tenure: Optional[int] = None
    address: AddressSchema
    account_history: List[AccountHistorySchema]


class ReportDetail(ApiModel):
    id: str
    report_number: str
    report_date: str
    report_time: str
    version: str
    basic_details: BasicDetailsSchema
    credit_score: CreditScoreSchema
    report_summary: ReportSummarySchema
    credit_accounts: List[CreditAccountSchema]
    created_at: datetime
    updated_at: datetime


class ReportDetailResponse(ApiModel):
    """Response for GET /api/reports/{id}"""

    success: bool = True
    data: ReportDetail


# DELETE /api/reports/{id}

class DeletedReport(ApiModel):
    report_id: str
    report_number: str


class DeleteResponse(ApiModel):
    """Response for DELETE /api/reports/{id}"""

    success: bool = True
    message: str = "Credit report deleted successfully"
    data: DeletedReport


# GET /api/summary

class SummaryData(ApiModel):
    total_reports: int
    average_credit_score: Optional[int] = None
    total_active_accounts: int
    total_closed_accounts: int
    total_outstanding_balance: int


class SummaryResponse(ApiModel):
    """Response for GET /api/summary"""

    success: bool = True
    data: SummaryData

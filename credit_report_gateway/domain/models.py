"""Domain models - pure Python dataclasses representing a canonical credit report"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

# Parsed XML: leaf text, element with children or attributes, or repeated elements
Node = Union[str, Dict[str, Any], List[Any]]


@dataclass
class BasicDetails:
    """Identity of the report subject"""

    first_name: str
    last_name: str
    mobile_phone: str
    pan: str
    date_of_birth: str  # ISO date when the source gave YYYYMMDD
    gender: Optional[str] = None  # "Male" | "Female"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class ReportSummary:
    """Account counts, balances (whole currency units) and enquiry windows"""

    total_accounts: int = 0
    active_accounts: int = 0
    closed_accounts: int = 0
    default_accounts: int = 0
    outstanding_balance_secured: int = 0
    outstanding_balance_unsecured: int = 0
    outstanding_balance_all: int = 0
    enquiries_last_7_days: int = 0
    enquiries_last_30_days: int = 0
    enquiries_last_90_days: int = 0
    enquiries_last_180_days: int = 0


@dataclass
class Address:
    """Holder address attached to a credit account"""

    first_line: str
    city: str
    state: str  # raw state code
    pin_code: str
    country: str = "IB"
    second_line: Optional[str] = None
    third_line: Optional[str] = None


@dataclass
class AccountHistory:
    """One month's delinquency snapshot"""

    year: int
    month: int
    days_past_due: int = 0
    asset_classification: Optional[str] = None


@dataclass
class CreditAccount:
    """Single credit facility. Codes are kept raw; labels are a display concern."""

    subscriber_name: str
    account_number: str
    portfolio_type: str
    account_type: str
    open_date: str
    date_reported: str
    current_balance: int
    amount_past_due: int
    account_status: str
    payment_rating: str
    address: Address
    date_closed: Optional[str] = None
    credit_limit: Optional[int] = None
    highest_credit: Optional[int] = None
    repayment_tenure: Optional[int] = None
    account_history: List[AccountHistory] = field(default_factory=list)


@dataclass
class CreditReport:
    """Canonical report record, independent of source document variant"""

    report_number: str
    report_date: str
    report_time: str
    version: str
    basic_details: BasicDetails
    report_summary: ReportSummary
    credit_accounts: List[CreditAccount] = field(default_factory=list)
    credit_score: Optional[int] = None
    credit_score_confidence: Optional[str] = None


@dataclass
class ReportTotals:
    """Raw aggregates as returned by the store"""

    total_reports: int
    average_credit_score: Optional[float]  # over records that have a score
    total_active_accounts: int
    total_closed_accounts: int
    total_outstanding_balance: int


@dataclass
class PortfolioSummary:
    """Cross-report statistics over every stored record"""

    total_reports: int
    average_credit_score: Optional[int]
    total_active_accounts: int
    total_closed_accounts: int
    total_outstanding_balance: int

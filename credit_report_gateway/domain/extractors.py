"""
Field extractors over the generic parsed-XML tree.

Every logical field is resolved through an explicit, ordered tuple of candidate
paths; the first candidate yielding non-empty text wins. Paths are tuples of
segments: a ``str`` selects a child tag, an ``int`` selects an entry of a
repeatable element after single-vs-list normalization.

Experian documents place identity data differently depending on report vintage,
so the applicant section is always tried before the account holder section.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from credit_report_gateway.domain.models import (
    AccountHistory,
    Address,
    BasicDetails,
    CreditAccount,
    ReportSummary,
)
from credit_report_gateway.utils.date_utils import clock_time, epoch_millis, format_positional_date, iso_date

Path = Tuple[Union[str, int], ...]

FIRST = 0

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Signed 64-bit, the widest integer column in the store
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def as_list(value: Any) -> List[Any]:
    """Lift a single element into a list; pass lists through; absent/empty -> []"""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def dig(node: Any, path: Path) -> Any:
    """Walk ``path`` from ``node``; None as soon as a segment is missing"""
    current = node
    for segment in path:
        if isinstance(segment, int):
            items = as_list(current)
            if segment >= len(items):
                return None
            current = items[segment]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(segment)
        if current is None:
            return None
    return current


def text_at(node: Any, path: Path) -> Optional[str]:
    """Text at ``path``: None when the tag is absent, "" when present but empty"""
    value = dig(node, path)
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        # Element carrying attributes keeps its text under "_"
        value = value.get("_", "")
    if value is None:
        return None
    return str(value)


def resolve(node: Any, candidates: Sequence[Path], default: str = "") -> str:
    """First non-empty text among ``candidates``"""
    for path in candidates:
        value = text_at(node, path)
        if value:
            return value
    return default


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Leading-integer parse: "80000" -> 80000, "12abc" -> 12, "1.9" -> 1, "" -> None

    Values outside the signed 64-bit range count as unparsable.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    value = int(match.group(1))
    if not INT_MIN <= value <= INT_MAX:
        return None
    return value


class NumericPolicy(Enum):
    """How a numeric field behaves when its source is missing or unparsable"""

    ZERO_DEFAULT = "zero_default"  # absent or bad -> 0
    OPTIONAL = "optional"  # absent tag -> None; present but empty or bad -> 0


def coerce_int(raw: Optional[str], policy: NumericPolicy) -> Optional[int]:
    if policy is NumericPolicy.OPTIONAL and raw is None:
        return None
    value = parse_int(raw)
    return value if value is not None else 0


# Candidate paths -----------------------------------------------------------

HEADER: Path = ("CreditProfileHeader",)
ALT_HEADER: Path = ("Header",)
APPLICANT: Path = ("Current_Application", "Current_Application_Details", "Current_Applicant_Details")
FIRST_ACCOUNT: Path = ("CAIS_Account", "CAIS_Account_DETAILS", FIRST)
HOLDER: Path = FIRST_ACCOUNT + ("CAIS_Holder_Details", FIRST)
HOLDER_PHONE: Path = FIRST_ACCOUNT + ("CAIS_Holder_Phone_Details", FIRST)
CAIS_SUMMARY: Path = ("CAIS_Account", "CAIS_Summary")
CAPS_SUMMARY: Path = ("CAPS", "CAPS_Summary")
TOTAL_CAPS_SUMMARY: Path = ("TotalCAPS_Summary",)

REPORT_NUMBER_PATHS = (HEADER + ("ReportNumber",), ALT_HEADER + ("ReportNumber",))
REPORT_DATE_PATHS = (HEADER + ("ReportDate",), ALT_HEADER + ("ReportDate",))
REPORT_TIME_PATHS = (HEADER + ("ReportTime",), ALT_HEADER + ("ReportTime",))
VERSION_PATHS = (HEADER + ("Version",), ALT_HEADER + ("Version",))
DEFAULT_VERSION = "V2.4"

FIRST_NAME_PATHS = (
    APPLICANT + ("First_Name",),
    HOLDER + ("First_Name_Non_Normalized",),
    HOLDER + ("Surname_Non_Normalized",),
)
LAST_NAME_PATHS = (
    APPLICANT + ("Last_Name",),
    HOLDER + ("Surname_Non_Normalized",),
    HOLDER + ("First_Name_Non_Normalized",),
)
MOBILE_PHONE_PATHS = (
    APPLICANT + ("MobilePhoneNumber",),
    HOLDER_PHONE + ("Telephone_Number",),
)
PAN_PATHS = (
    APPLICANT + ("IncomeTaxPan",),
    HOLDER + ("Income_TAX_PAN",),
)
DATE_OF_BIRTH_PATHS = (
    APPLICANT + ("Date_Of_Birth_Applicant",),
    HOLDER + ("Date_of_birth",),
)
GENDER_CODE_PATHS = (HOLDER + ("Gender_Code",),)

GENDER_CODES = {"1": "Male", "2": "Female"}


def _enquiry_paths(days: int) -> Tuple[Path, ...]:
    return (
        CAPS_SUMMARY + (f"CAPSLast{days}Days",),
        TOTAL_CAPS_SUMMARY + (f"TotalCAPSLast{days}Days",),
    )


# ReportSummary attribute -> candidate paths (all ZERO_DEFAULT)
SUMMARY_FIELDS: Dict[str, Tuple[Path, ...]] = {
    "total_accounts": (CAIS_SUMMARY + ("Credit_Account", "CreditAccountTotal"),),
    "active_accounts": (CAIS_SUMMARY + ("Credit_Account", "CreditAccountActive"),),
    "closed_accounts": (CAIS_SUMMARY + ("Credit_Account", "CreditAccountClosed"),),
    "default_accounts": (CAIS_SUMMARY + ("Credit_Account", "CreditAccountDefault"),),
    "outstanding_balance_secured": (CAIS_SUMMARY + ("Total_Outstanding_Balance", "Outstanding_Balance_Secured"),),
    "outstanding_balance_unsecured": (CAIS_SUMMARY + ("Total_Outstanding_Balance", "Outstanding_Balance_UnSecured"),),
    "outstanding_balance_all": (CAIS_SUMMARY + ("Total_Outstanding_Balance", "Outstanding_Balance_All"),),
    "enquiries_last_7_days": _enquiry_paths(7),
    "enquiries_last_30_days": _enquiry_paths(30),
    "enquiries_last_90_days": _enquiry_paths(90),
    "enquiries_last_180_days": _enquiry_paths(180),
}

# CreditAccount attribute -> (source tag, policy)
ACCOUNT_NUMERIC_FIELDS: Dict[str, Tuple[str, NumericPolicy]] = {
    "credit_limit": ("Credit_Limit_Amount", NumericPolicy.OPTIONAL),
    "highest_credit": ("Highest_Credit_or_Original_Loan_Amount", NumericPolicy.OPTIONAL),
    "repayment_tenure": ("Repayment_Tenure", NumericPolicy.OPTIONAL),
    "current_balance": ("Current_Balance", NumericPolicy.ZERO_DEFAULT),
    "amount_past_due": ("Amount_Past_Due", NumericPolicy.ZERO_DEFAULT),
}

# AccountHistory attribute -> (source tag, policy)
HISTORY_NUMERIC_FIELDS: Dict[str, Tuple[str, NumericPolicy]] = {
    "year": ("Year", NumericPolicy.ZERO_DEFAULT),
    "month": ("Month", NumericPolicy.ZERO_DEFAULT),
    "days_past_due": ("Days_Past_Due", NumericPolicy.ZERO_DEFAULT),
}

ADDRESS_TAGS = {
    "first_line": "First_Line_Of_Address_non_normalized",
    "second_line": "Second_Line_Of_Address_non_normalized",
    "third_line": "Third_Line_Of_Address_non_normalized",
    "city": "City_non_normalized",
    "state": "State_non_normalized",
    "pin_code": "ZIP_Postal_Code_non_normalized",
    "country": "CountryCode_non_normalized",
}
DEFAULT_COUNTRY = "IB"


# Identity ------------------------------------------------------------------

def extract_report_number(profile: Dict[str, Any], now: datetime) -> str:
    return resolve(profile, REPORT_NUMBER_PATHS) or f"RPT_{epoch_millis(now)}"


def extract_report_date(profile: Dict[str, Any], now: datetime) -> str:
    return resolve(profile, REPORT_DATE_PATHS) or iso_date(now)


def extract_report_time(profile: Dict[str, Any], now: datetime) -> str:
    return resolve(profile, REPORT_TIME_PATHS) or clock_time(now)


def extract_version(profile: Dict[str, Any]) -> str:
    return resolve(profile, VERSION_PATHS, default=DEFAULT_VERSION)


# Basic details -------------------------------------------------------------

def extract_gender(profile: Dict[str, Any]) -> Optional[str]:
    return GENDER_CODES.get(resolve(profile, GENDER_CODE_PATHS))


def extract_basic_details(profile: Dict[str, Any]) -> BasicDetails:
    return BasicDetails(
        first_name=resolve(profile, FIRST_NAME_PATHS),
        last_name=resolve(profile, LAST_NAME_PATHS),
        mobile_phone=resolve(profile, MOBILE_PHONE_PATHS),
        pan=resolve(profile, PAN_PATHS),
        date_of_birth=format_positional_date(resolve(profile, DATE_OF_BIRTH_PATHS)),
        gender=extract_gender(profile),
    )


# Summary -------------------------------------------------------------------

def extract_report_summary(profile: Dict[str, Any]) -> ReportSummary:
    values = {
        name: coerce_int(resolve(profile, paths) or None, NumericPolicy.ZERO_DEFAULT)
        for name, paths in SUMMARY_FIELDS.items()
    }
    return ReportSummary(**values)


# Accounts ------------------------------------------------------------------

def _optional_text(node: Dict[str, Any], tag: str) -> Optional[str]:
    return text_at(node, (tag,)) or None


def extract_address(account: Dict[str, Any]) -> Address:
    details = as_object(dig(account, ("CAIS_Holder_Address_Details", FIRST)))

    def field(name: str) -> str:
        return text_at(details, (ADDRESS_TAGS[name],)) or ""

    return Address(
        first_line=field("first_line"),
        second_line=field("second_line") or None,
        third_line=field("third_line") or None,
        city=field("city"),
        state=field("state"),
        pin_code=field("pin_code"),
        country=field("country") or DEFAULT_COUNTRY,
    )


def extract_account_history(history: Any) -> List[AccountHistory]:
    entries = []
    for item in as_list(history):
        item = as_object(item)
        numbers = {
            name: coerce_int(text_at(item, (tag,)), policy)
            for name, (tag, policy) in HISTORY_NUMERIC_FIELDS.items()
        }
        entries.append(
            AccountHistory(
                **numbers,
                asset_classification=_optional_text(item, "Asset_Classification"),
            )
        )
    return entries


def extract_account(account: Dict[str, Any]) -> CreditAccount:
    numbers = {
        name: coerce_int(text_at(account, (tag,)), policy)
        for name, (tag, policy) in ACCOUNT_NUMERIC_FIELDS.items()
    }
    date_closed = text_at(account, ("Date_Closed",))

    return CreditAccount(
        subscriber_name=(text_at(account, ("Subscriber_Name",)) or "").strip(),
        account_number=text_at(account, ("Account_Number",)) or "",
        portfolio_type=text_at(account, ("Portfolio_Type",)) or "",
        account_type=text_at(account, ("Account_Type",)) or "",
        open_date=format_positional_date(text_at(account, ("Open_Date",)) or ""),
        date_reported=format_positional_date(text_at(account, ("Date_Reported",)) or ""),
        date_closed=format_positional_date(date_closed) if date_closed else None,
        account_status=text_at(account, ("Account_Status",)) or "",
        payment_rating=text_at(account, ("Payment_Rating",)) or "",
        address=extract_address(account),
        account_history=extract_account_history(account.get("CAIS_Account_History")),
        **numbers,
    )


def extract_credit_accounts(profile: Dict[str, Any]) -> List[CreditAccount]:
    containers = dig(profile, ("CAIS_Account", "CAIS_Account_DETAILS"))
    return [extract_account(as_object(entry)) for entry in as_list(containers)]


# Score ---------------------------------------------------------------------

def extract_credit_score(profile: Dict[str, Any]) -> Optional[int]:
    """Bureau score; None when the section, tag or value is missing (never 0)"""
    return parse_int(text_at(profile, ("SCORE", "BureauScore")) or None)


def extract_credit_score_confidence(profile: Dict[str, Any]) -> Optional[str]:
    return text_at(profile, ("SCORE", "BureauScoreConfidLevel")) or None

"""Document mapper - assembles one canonical CreditReport from a parsed XML tree"""

from datetime import datetime
from typing import Any, Dict, Optional

from credit_report_gateway.domain.exceptions import ReportParsingError
from credit_report_gateway.domain.models import CreditReport
from credit_report_gateway.domain.validation import ROOT_TAG
from credit_report_gateway.domain import extractors


def map_credit_report(tree: Dict[str, Any], now: Optional[datetime] = None) -> CreditReport:
    """
    Map a parsed tree into a CreditReport.

    A missing root element aborts the whole mapping. Every other missing field
    is defaulted or omitted by its extractor. Synthesized identity values
    (report number, date, time) are derived from ``now``.

    Raises:
        ReportParsingError: Root element missing or extraction failed on an
            unexpected tree shape
    """
    profile = tree.get(ROOT_TAG) if isinstance(tree, dict) else None
    if not isinstance(profile, dict):
        raise ReportParsingError(f"Invalid XML format: {ROOT_TAG} not found")

    now = now or datetime.now()

    try:
        return CreditReport(
            report_number=extractors.extract_report_number(profile, now),
            report_date=extractors.extract_report_date(profile, now),
            report_time=extractors.extract_report_time(profile, now),
            version=extractors.extract_version(profile),
            basic_details=extractors.extract_basic_details(profile),
            report_summary=extractors.extract_report_summary(profile),
            credit_accounts=extractors.extract_credit_accounts(profile),
            credit_score=extractors.extract_credit_score(profile),
            credit_score_confidence=extractors.extract_credit_score_confidence(profile),
        )
    except (AttributeError, TypeError, ValueError, KeyError) as e:
        raise ReportParsingError(f"Failed to parse XML: {e}") from e

"""GET /api/summary - statistics across all stored reports"""

from fastapi import APIRouter, Depends

from credit_report_gateway.api.v1.schemas import SummaryData, SummaryResponse
from credit_report_gateway.api.dependencies import get_summary_aggregator
from credit_report_gateway.infrastructure.observability.metrics import stored_reports_gauge
from credit_report_gateway.services.summary import SummaryAggregator

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(aggregator: SummaryAggregator = Depends(get_summary_aggregator)):
    """
    Totals over every stored report.

    averageCreditScore is null when no stored report carries a score.
    """
    summary = aggregator.compute()
    stored_reports_gauge.set(summary.total_reports)

    return SummaryResponse(
        data=SummaryData(
            total_reports=summary.total_reports,
            average_credit_score=summary.average_credit_score,
            total_active_accounts=summary.total_active_accounts,
            total_closed_accounts=summary.total_closed_accounts,
            total_outstanding_balance=summary.total_outstanding_balance,
        )
    )

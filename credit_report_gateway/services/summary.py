"""Summary aggregator - statistics across every stored report"""

import math
from typing import Optional, Protocol

from credit_report_gateway.domain.models import PortfolioSummary, ReportTotals


class TotalsStore(Protocol):
    def aggregate_totals(self) -> ReportTotals: ...


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class SummaryAggregator:
    """
    Computes totals over the full record set.

    There is no time windowing: every stored report contributes regardless of
    when it was uploaded.
    """

    def __init__(self, store: TotalsStore):
        self.store = store

    def compute(self) -> PortfolioSummary:
        totals = self.store.aggregate_totals()

        average: Optional[int] = None
        if totals.average_credit_score is not None:
            average = round_half_up(totals.average_credit_score)

        return PortfolioSummary(
            total_reports=totals.total_reports,
            average_credit_score=average,
            total_active_accounts=totals.total_active_accounts,
            total_closed_accounts=totals.total_closed_accounts,
            total_outstanding_balance=totals.total_outstanding_balance,
        )

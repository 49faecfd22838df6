"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from credit_report_gateway.config import Settings
from credit_report_gateway.infrastructure.database.repositories import CreditReportRepository
from credit_report_gateway.infrastructure.database.session import get_db
from credit_report_gateway.services.ingestion import ReportIngestionService
from credit_report_gateway.services.summary import SummaryAggregator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_report_repository(db: Session = Depends(get_db)) -> CreditReportRepository:
    """Provide a repository bound to the request's session"""
    return CreditReportRepository(db)


def get_ingestion_service(
    repository: CreditReportRepository = Depends(get_report_repository),
) -> ReportIngestionService:
    return ReportIngestionService(repository)


def get_summary_aggregator(
    repository: CreditReportRepository = Depends(get_report_repository),
) -> SummaryAggregator:
    return SummaryAggregator(repository)

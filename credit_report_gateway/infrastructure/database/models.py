"""SQLAlchemy ORM models for stored credit reports"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, BigInteger, DateTime, Integer, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreditReportRecord(Base):
    """Canonical credit report; basic details and summary counts are flattened for aggregation"""

    __tablename__ = "credit_report"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    report_number = Column(Text, nullable=False, unique=True, index=True)
    report_date = Column(Text, nullable=False, index=True)
    report_time = Column(Text, nullable=False)
    version = Column(Text, nullable=False)

    # Basic details
    first_name = Column(Text, nullable=False, default="")
    last_name = Column(Text, nullable=False, default="")
    mobile_phone = Column(Text, nullable=False, default="")
    pan = Column(Text, nullable=False, index=True)
    date_of_birth = Column(Text, nullable=False, default="")
    gender = Column(Text, nullable=True)

    # Report summary
    total_accounts = Column(BigInteger, nullable=False, default=0)
    active_accounts = Column(BigInteger, nullable=False, default=0)
    closed_accounts = Column(BigInteger, nullable=False, default=0)
    default_accounts = Column(BigInteger, nullable=False, default=0)
    outstanding_balance_secured = Column(BigInteger, nullable=False, default=0)
    outstanding_balance_unsecured = Column(BigInteger, nullable=False, default=0)
    outstanding_balance_all = Column(BigInteger, nullable=False, default=0)
    enquiries_last_7_days = Column(BigInteger, nullable=False, default=0)
    enquiries_last_30_days = Column(BigInteger, nullable=False, default=0)
    enquiries_last_90_days = Column(BigInteger, nullable=False, default=0)
    enquiries_last_180_days = Column(BigInteger, nullable=False, default=0)

    credit_score = Column(BigInteger, nullable=True)
    credit_score_confidence = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now(), index=True)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )

    credit_accounts = relationship(
        "CreditAccountRecord",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="CreditAccountRecord.position",
    )


class CreditAccountRecord(Base):
    """One credit facility inside a report, kept in source order"""

    __tablename__ = "credit_account"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    report_id = Column(Uuid(as_uuid=True), ForeignKey("credit_report.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    subscriber_name = Column(Text, nullable=False, default="")
    account_number = Column(Text, nullable=False, default="")
    portfolio_type = Column(Text, nullable=False, default="")
    account_type = Column(Text, nullable=False, default="")
    open_date = Column(Text, nullable=False, default="")
    date_reported = Column(Text, nullable=False, default="")
    date_closed = Column(Text, nullable=True)
    credit_limit = Column(BigInteger, nullable=True)
    highest_credit = Column(BigInteger, nullable=True)
    current_balance = Column(BigInteger, nullable=False, default=0)
    amount_past_due = Column(BigInteger, nullable=False, default=0)
    account_status = Column(Text, nullable=False, default="")
    payment_rating = Column(Text, nullable=False, default="")
    repayment_tenure = Column(BigInteger, nullable=True)

    # Address
    address_first_line = Column(Text, nullable=False, default="")
    address_second_line = Column(Text, nullable=True)
    address_third_line = Column(Text, nullable=True)
    address_city = Column(Text, nullable=False, default="")
    address_state = Column(Text, nullable=False, default="")
    address_pin_code = Column(Text, nullable=False, default="")
    address_country = Column(Text, nullable=False, default="IB")

    # [{"year", "month", "days_past_due", "asset_classification"}, ...] in source order
    account_history = Column(JSON, nullable=False, default=list)

    report = relationship("CreditReportRecord", back_populates="credit_accounts")

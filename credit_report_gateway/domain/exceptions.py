"""Domain-specific exceptions"""

import uuid
from typing import Optional


class CreditReportError(Exception):
    """Base exception for domain layer"""

    pass


class InvalidReportFormatError(CreditReportError):
    """Document failed the structural gate and is not an Experian report"""

    pass


class ReportParsingError(CreditReportError):
    """Document looked like a report but extraction failed"""

    pass


class DuplicateReportError(CreditReportError):
    """A report with the same report number is already stored"""

    def __init__(self, report_number: str, existing_id: Optional[uuid.UUID] = None):
        super().__init__(f"A credit report with number {report_number} already exists")
        self.report_number = report_number
        self.existing_id = existing_id


class ReportNotFoundError(CreditReportError):
    """No stored report matches the requested identity"""

    pass

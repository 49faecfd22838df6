"""POST /api/upload - Experian XML upload and ingestion endpoint"""

import os
import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session

from credit_report_gateway.api.errors import ApiError
from credit_report_gateway.api.v1.schemas import UploadBasicDetails, UploadData, UploadResponse, UploadSummary
from credit_report_gateway.api.dependencies import get_ingestion_service, get_request_id, get_settings
from credit_report_gateway.config import Settings
from credit_report_gateway.domain.exceptions import DuplicateReportError, InvalidReportFormatError, ReportParsingError
from credit_report_gateway.domain.validation import looks_like_xml, missing_upload_elements
from credit_report_gateway.infrastructure.database.session import get_db
from credit_report_gateway.infrastructure.observability.logging import log_ingestion
from credit_report_gateway.infrastructure.observability.metrics import record_ingestion
from credit_report_gateway.services.ingestion import ReportIngestionService

router = APIRouter()


def _reject_upload(error: str, message: str) -> ApiError:
    record_ingestion("rejected_upload")
    return ApiError(400, error, message)


async def read_xml_upload(xml_file: Optional[UploadFile], settings: Settings) -> str:
    """
    Run the transport checks on an uploaded file and return its text.

    Checks extension, content type, size, encoding and the presence of the
    mandatory report elements. Content stays in memory.
    """
    if xml_file is None or not xml_file.filename:
        raise _reject_upload("No file uploaded", "Please upload an XML file")

    extension = os.path.splitext(xml_file.filename)[1].lower()
    if extension not in settings.allowed_extensions:
        raise _reject_upload("Upload validation failed", "Only XML files are allowed")

    if xml_file.content_type not in settings.allowed_content_types:
        raise _reject_upload("Upload validation failed", "Invalid file type. Only XML files are allowed")

    raw = await xml_file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes / (1024 * 1024)
        raise _reject_upload("File too large", f"File size must be less than {limit_mb:g}MB")

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise _reject_upload("Invalid file content", "Unable to read XML content")

    if not looks_like_xml(content):
        raise _reject_upload(
            "Invalid XML file", "The uploaded file does not appear to be a valid XML credit report"
        )

    missing = missing_upload_elements(content)
    if missing:
        raise _reject_upload("Invalid credit report format", f"Missing required elements: {', '.join(missing)}")

    return content


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_report(
    request: Request,
    xml_file: Optional[UploadFile] = File(None, alias="xmlFile"),
    db: Session = Depends(get_db),
    service: ReportIngestionService = Depends(get_ingestion_service),
    settings: Settings = Depends(get_settings),
):
    """
    Upload an Experian XML report and store its canonical form.

    Flow:
    1. Transport checks on the uploaded file
    2. Structural gate, mapping, duplicate check, persist (ingestion service)
    3. Commit and return the condensed projection
    """
    start_time = time.time()
    request_id = get_request_id(request)
    content = await read_xml_upload(xml_file, settings)

    try:
        result = service.ingest(content)
        db.commit()

    except InvalidReportFormatError as e:
        db.rollback()
        record_ingestion("invalid_format")
        logging.warning(f"Invalid report format: {e}", extra={"request_id": request_id})
        raise ApiError(400, "Invalid XML structure", str(e))

    except ReportParsingError as e:
        db.rollback()
        record_ingestion("parse_error")
        logging.warning(f"Report parsing failed: {e}", extra={"request_id": request_id})
        raise ApiError(422, "Parsing failed", str(e))

    except DuplicateReportError as e:
        db.rollback()
        record_ingestion("conflict")
        logging.info(f"Duplicate report: {e}", extra={"request_id": request_id})
        raise ApiError(
            409,
            "Report already exists",
            str(e),
            reportId=str(e.existing_id) if e.existing_id else None,
        )

    except Exception as e:
        db.rollback()
        record_ingestion("error")
        logging.exception(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise ApiError(
            500,
            "Processing failed",
            "An unexpected error occurred while processing the credit report",
        )

    duration_ms = (time.time() - start_time) * 1000
    record_ingestion("created")
    log_ingestion(request_id, "created", duration_ms, result.report_number, xml_file.filename)

    return UploadResponse(
        data=UploadData(
            report_id=str(result.report_id),
            report_number=result.report_number,
            report_date=result.report_date,
            basic_details=UploadBasicDetails(
                name=result.name,
                pan=result.pan,
                mobile_phone=result.mobile_phone,
            ),
            summary=UploadSummary(
                total_accounts=result.total_accounts,
                credit_score=result.credit_score,
                total_balance=result.total_balance,
            ),
        )
    )

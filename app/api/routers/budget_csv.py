"""
app/api/routers/budget_csv.py

Budget CSV import/export HTTP endpoints.

POST /budgets/csv/validate  report only, nothing persisted
POST /budgets/csv/import    report + persistence of the valid rows
POST /budgets/csv/export    records in the body -> CSV text
GET  /budgets/csv/export    stored budgets -> CSV text
GET  /budgets/csv/template  header + example row
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload
from app.domain.budget import BudgetImportSummary, Finding
from app.schemas.budget_csv import (
    BudgetExportRequest,
    BudgetImportResponse,
    BudgetRecordPayload,
    BudgetValidationResponse,
    FindingResponse,
    SuggestionResponse,
)
from app.services.budget_import_service import (
    BudgetCSVDecodeError,
    BudgetImportService,
    BudgetPersistenceError,
    get_budget_import_service,
)
from db.session import get_db

router = APIRouter(prefix="/budgets/csv", tags=["budgets"])

_CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


@router.post("/validate", response_model=BudgetValidationResponse)
def validate_budget_csv(
    file: UploadFile = Depends(get_csv_upload),
    service: BudgetImportService = Depends(get_budget_import_service),
) -> BudgetValidationResponse:
    """
    Validate one budget CSV and return the report with corrected records.
    """

    try:
        summary = service.validate_csv(upload_file=file)
    except BudgetCSVDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    return BudgetValidationResponse(**_report_fields(summary))


@router.post("/import", response_model=BudgetImportResponse)
def import_budget_csv(
    file: UploadFile = Depends(get_csv_upload),
    owner_id: str | None = Query(default=None, max_length=64, description="Optional owner stamped on every row"),
    db: Session = Depends(get_db),
    service: BudgetImportService = Depends(get_budget_import_service),
) -> BudgetImportResponse:
    """
    Validate one budget CSV and persist every row without errors.
    """

    try:
        summary = service.import_csv(upload_file=file, db=db, owner_id=owner_id)
    except BudgetCSVDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except BudgetPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist valid budget rows.",
        ) from exc
    finally:
        file.file.close()

    return BudgetImportResponse(
        **_report_fields(summary),
        inserted=summary.inserted,
        persisted=summary.persisted,
    )


@router.post("/export")
def export_budget_csv(
    payload: BudgetExportRequest,
    service: BudgetImportService = Depends(get_budget_import_service),
) -> Response:
    """
    Render the records in the request body as budget CSV.
    """

    filters = payload.filters.to_filters() if payload.filters is not None else None
    content = service.export_records(
        [record.to_record() for record in payload.records],
        filters,
    )
    return _csv_response(content, filename="orcamentos.csv")


@router.get("/export")
def export_stored_budget_csv(
    owner_id: str | None = Query(default=None, max_length=64, description="Optional owner filter"),
    db: Session = Depends(get_db),
    service: BudgetImportService = Depends(get_budget_import_service),
) -> Response:
    """
    Render the persisted budgets as budget CSV.
    """

    try:
        content = service.export_stored(db=db, owner_id=owner_id)
    except BudgetPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load budgets for export.",
        ) from exc
    return _csv_response(content, filename="orcamentos.csv")


@router.get("/template")
def budget_csv_template(
    service: BudgetImportService = Depends(get_budget_import_service),
) -> Response:
    return _csv_response(service.generate_template(), filename="modelo_orcamentos.csv")


# ---------------------------------------------------------------------------
# Serialisation helpers (no business logic)
# ---------------------------------------------------------------------------


def _csv_response(content: str, *, filename: str) -> Response:
    return Response(
        content=content,
        media_type=_CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _report_fields(summary: BudgetImportSummary) -> dict[str, object]:
    report = summary.report
    return {
        "stage": report.stage.value,
        "total_rows": report.total_rows,
        "valid_rows": report.valid_rows,
        "invalid_rows": report.invalid_rows,
        "warned_rows": report.warned_rows,
        "corrections_applied": report.corrections_applied,
        "is_valid": report.is_valid,
        "findings": [_finding_response(finding) for finding in summary.reported_findings],
        "findings_truncated": summary.findings_truncated,
        "records": [BudgetRecordPayload.from_record(record) for record in report.records],
    }


def _finding_response(finding: Finding) -> FindingResponse:
    suggestion = finding.suggestion
    return FindingResponse(
        severity=finding.severity.value,
        code=finding.code,
        message=finding.message,
        row_number=finding.row_number,
        field=finding.field,
        value=finding.value,
        suggestion=(
            SuggestionResponse(
                original_value=suggestion.original_value,
                suggested_value=suggestion.suggested_value,
                confidence=suggestion.confidence.value,
                auto_applicable=suggestion.auto_applicable,
                applied=suggestion.applied,
                reason=suggestion.reason,
            )
            if suggestion is not None
            else None
        ),
    )

"""
app/services/budget_import_service.py

Service layer for the budget CSV import/export workflow.

The validation pipeline itself is pure; this service owns everything around
it: reading the upload, decoding it, logging, the database transaction and
the findings cap applied before the report leaves the process.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import BinaryIO, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import BudgetCSVSettings, get_budget_csv_settings
from app.domain.budget import BudgetImportSummary, BudgetRecord, Finding, ValidationReport
from app.logging_utils import log_event
from app.mappers.budget_schema import from_budget_model
from app.repositories.budget_repository import BudgetRepository
from app.services.budget_exporter import BudgetExporter, ExportFilters
from app.services.validation_pipeline import ValidationPipeline

logger = logging.getLogger(__name__)


class _Upload(Protocol):
    filename: str | None
    file: BinaryIO


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BudgetCSVDecodeError(ValueError):
    """
    Raised when the uploaded bytes are not UTF-8 text.
    """


class BudgetPersistenceError(RuntimeError):
    """
    Raised when budgets cannot be written to or read from the database.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BudgetImportService:
    """
    Coordinates decoding, validation, persistence and export of budget CSVs.
    """

    def __init__(
        self,
        *,
        settings: BudgetCSVSettings | None = None,
        pipeline: ValidationPipeline | None = None,
        exporter: BudgetExporter | None = None,
    ) -> None:
        self._settings = settings or BudgetCSVSettings()
        self._pipeline = pipeline or ValidationPipeline(settings=self._settings)
        self._exporter = exporter or BudgetExporter(settings=self._settings)

    def validate_csv(self, *, upload_file: _Upload) -> BudgetImportSummary:
        """
        Validate an upload without touching the database.
        """

        report = self._run_pipeline(upload_file)
        return self._summarize(report)

    def import_csv(
        self,
        *,
        upload_file: _Upload,
        db: Session,
        owner_id: str | None = None,
    ) -> BudgetImportSummary:
        """
        Validate an upload and persist every row that has no error.

        Rows with errors are reported and skipped; valid rows are written in
        one transaction.

        Args:
            upload_file: File to import.
            db:          Active SQLAlchemy session (caller owns lifecycle).
            owner_id:    Optional shop/user id stamped on every inserted row.
        """

        report = self._run_pipeline(upload_file)
        if not report.records:
            log_event(
                logger,
                logging.INFO,
                "budget_csv_import_skipped",
                filename=upload_file.filename,
                invalid_rows=report.invalid_rows,
            )
            return self._summarize(report)

        repository = BudgetRepository(db)
        try:
            inserted = repository.insert_many(
                report.records,
                owner_id=owner_id,
                batch_size=self._settings.batch_size,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise BudgetPersistenceError("Failed to persist valid budget rows.") from exc

        log_event(
            logger,
            logging.INFO,
            "budget_csv_import_persisted",
            filename=upload_file.filename,
            owner_id=owner_id,
            inserted=inserted,
        )
        return self._summarize(report, inserted=inserted, persisted=True)

    def export_records(
        self,
        records: Sequence[BudgetRecord],
        filters: ExportFilters | None = None,
    ) -> str:
        content = self._exporter.export(records, filters)
        log_event(
            logger,
            logging.INFO,
            "budget_csv_exported",
            source="payload",
            records=len(records),
            filtered=filters is not None,
        )
        return content

    def export_stored(
        self,
        *,
        db: Session,
        owner_id: str | None = None,
        filters: ExportFilters | None = None,
    ) -> str:
        """
        Export persisted budgets, optionally scoped to one owner.
        """

        try:
            models = BudgetRepository(db).list_for_owner(owner_id)
        except SQLAlchemyError as exc:
            raise BudgetPersistenceError("Failed to load budgets for export.") from exc

        records = [from_budget_model(model) for model in models]
        content = self._exporter.export(records, filters)
        log_event(
            logger,
            logging.INFO,
            "budget_csv_exported",
            source="database",
            owner_id=owner_id,
            records=len(records),
            filtered=filters is not None,
        )
        return content

    def generate_template(self) -> str:
        return self._exporter.generate_template()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_pipeline(self, upload_file: _Upload) -> ValidationReport:
        text = self._read_text(upload_file)
        log_event(
            logger,
            logging.INFO,
            "budget_csv_import_started",
            filename=upload_file.filename,
            size=len(text),
            strictness=self._settings.strictness.value,
        )

        report = self._pipeline.validate_and_correct(text)

        logger.info(
            "Budget CSV validated filename=%r total=%s valid=%s invalid=%s warned=%s corrections=%s",
            upload_file.filename,
            report.total_rows,
            report.valid_rows,
            report.invalid_rows,
            report.warned_rows,
            report.corrections_applied,
        )
        return report

    @staticmethod
    def _read_text(upload_file: _Upload) -> str:
        raw_file = upload_file.file
        raw_file.seek(0)
        raw = raw_file.read()
        try:
            # utf-8-sig drops a leading BOM written by spreadsheet exports.
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise BudgetCSVDecodeError("CSV must be UTF-8 encoded.") from exc

    def _summarize(
        self,
        report: ValidationReport,
        *,
        inserted: int = 0,
        persisted: bool = False,
    ) -> BudgetImportSummary:
        reported: list[Finding] = []
        for finding in report.findings:
            self._record_finding(reported, finding)
        return BudgetImportSummary(
            report=report,
            reported_findings=tuple(reported),
            inserted=inserted,
            persisted=persisted,
        )

    def _record_finding(self, reported: list[Finding], finding: Finding) -> None:
        if self._settings.log_findings:
            logger.warning(
                "Budget CSV finding severity=%s code=%s row=%s field=%s value=%r message=%s",
                finding.severity.value,
                finding.code,
                finding.row_number,
                finding.field,
                finding.value,
                finding.message,
            )

        if len(reported) < self._settings.max_reported_findings:
            reported.append(finding)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_budget_import_service() -> BudgetImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    return BudgetImportService(settings=get_budget_csv_settings())

"""
app/services/validation_pipeline.py

Orchestrates parsing, field validation, batch validation and scale analysis
of one budget CSV buffer into a ValidationReport.

Stages run strictly in order:

    Start -> HeadersParsed -> RowsParsed -> FieldsValidated
          -> BatchValidated -> ReportReady

A header failure jumps straight from Start to ReportReady with no valid rows.
Field-level corrections are applied before batch validation so relationship
checks see corrected values. Data problems never raise; they become findings.
"""

from __future__ import annotations

from decimal import Decimal

from app.config import BudgetCSVSettings
from app.converters.number_formatter import NumberFormatter
from app.converters.scale_converter import ScaleConverter
from app.domain.budget import (
    BudgetRecord,
    Finding,
    PipelineStage,
    Severity,
    ValidationReport,
)
from app.parsers.row_parser import MissingHeaderError, RowParser
from app.validators.field_validator import FieldValidationResult, FieldValidator
from app.validators.record_validator import RecordValidator


class ValidationPipeline:
    """
    Runs the full validation-and-correction pipeline over raw CSV text.

    Instances hold configuration only; each call works on its own state.
    """

    def __init__(
        self,
        *,
        settings: BudgetCSVSettings | None = None,
        parser: RowParser | None = None,
        field_validator: FieldValidator | None = None,
        record_validator: RecordValidator | None = None,
    ) -> None:
        self._settings = settings or BudgetCSVSettings()
        self._parser = parser or RowParser()
        scale_converter = ScaleConverter(
            minor_unit_threshold=self._settings.minor_unit_threshold,
        )
        self._field_validator = field_validator or FieldValidator(
            settings=self._settings,
            formatter=NumberFormatter(),
            scale_converter=scale_converter,
        )
        self._record_validator = record_validator or RecordValidator(
            settings=self._settings,
            scale_converter=scale_converter,
        )

    @property
    def settings(self) -> BudgetCSVSettings:
        return self._settings

    def validate_and_correct(self, raw_text: str) -> ValidationReport:
        """
        Validate one CSV buffer and return the report with corrected records.
        """

        trail: list[PipelineStage] = [PipelineStage.START]
        try:
            table = self._parser.parse(raw_text)
        except MissingHeaderError as exc:
            return self._header_failure_report(exc, trail=trail)
        trail.append(PipelineStage.HEADERS_PARSED)

        rows = table.rows
        trail.append(PipelineStage.ROWS_PARSED)

        results: list[FieldValidationResult] = [
            self._field_validator.validate_row(row=row, header_map=table.header_map)
            for row in rows
        ]
        trail.append(PipelineStage.FIELDS_VALIDATED)

        clean: list[tuple[int, BudgetRecord]] = [
            (result.row_number, result.record) for result in results if not result.has_errors
        ]
        findings_by_row: dict[int, list[Finding]] = {
            result.row_number: list(result.findings) for result in results
        }
        for row_number, record in clean:
            findings_by_row[row_number].extend(
                self._record_validator.validate_record(row_number=row_number, record=record)
            )
        duplicate_findings = self._record_validator.find_duplicates(clean)

        raw_prices: list[Decimal] = [price for result in results for price in result.raw_prices]
        scale_finding = self._record_validator.analyze_scale(raw_prices)
        trail.append(PipelineStage.BATCH_VALIDATED)

        findings: list[Finding] = []
        for result in results:
            findings.extend(findings_by_row[result.row_number])
        findings.extend(duplicate_findings)
        if scale_finding is not None:
            findings.append(scale_finding)

        error_rows = {finding.row_number for finding in findings if finding.is_error}
        warned_rows = {
            finding.row_number
            for finding in findings
            if finding.severity is Severity.WARNING and finding.row_number is not None
        }

        records = tuple(
            result.record for result in results if result.row_number not in error_rows
        )
        valid_row_numbers = {
            result.row_number for result in results if result.row_number not in error_rows
        }

        trail.append(PipelineStage.REPORT_READY)
        return ValidationReport(
            stage=PipelineStage.REPORT_READY,
            stages=tuple(trail),
            total_rows=len(results),
            valid_rows=len(records),
            invalid_rows=len(results) - len(records),
            warned_rows=len(warned_rows & valid_row_numbers),
            findings=tuple(findings),
            records=records,
        )

    @staticmethod
    def _header_failure_report(
        exc: MissingHeaderError,
        *,
        trail: list[PipelineStage],
    ) -> ValidationReport:
        findings = tuple(
            Finding(
                severity=Severity.ERROR,
                code="missing_header",
                message=f"Required header '{header}' is missing.",
                row_number=1,
                field=header,
                value=None,
            )
            for header in exc.missing
        )
        return ValidationReport(
            stage=PipelineStage.REPORT_READY,
            stages=(*trail, PipelineStage.REPORT_READY),
            total_rows=0,
            valid_rows=0,
            invalid_rows=0,
            warned_rows=0,
            findings=findings,
            records=(),
        )


def validate_and_correct(
    raw_text: str,
    *,
    settings: BudgetCSVSettings | None = None,
) -> ValidationReport:
    """
    Convenience entry point over a default-configured pipeline.
    """

    return ValidationPipeline(settings=settings).validate_and_correct(raw_text)

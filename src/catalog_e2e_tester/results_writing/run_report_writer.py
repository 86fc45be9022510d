"""Results workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .report_models import CaseResult, CaseStatus, RunMetadata

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"
RESULT_COLUMNS = (
    "Test Manifest",
    "Scope",
    "Run Kind",
    "Run Name",
    "Status",
    "Duration (s)",
    "Reason",
    "Cleanup Failures",
)
_MAX_COLUMN_WIDTH = 80


def write_results_workbook(
    output_path: Path | str,
    results: Sequence[CaseResult],
    run_metadata: RunMetadata,
) -> Path:
    """Write one row per test manifest plus a RunInfo summary sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULTS_SHEET_NAME
    _write_header(sheet, RESULT_COLUMNS)
    for row_index, result in enumerate(results, start=2):
        _write_result_row(sheet, row_index, result)
    _fit_columns(sheet)

    _write_run_info_sheet(workbook, results, run_metadata)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_header(sheet, columns: Sequence[str]) -> None:
    for column_index, title in enumerate(columns, start=1):
        cell = sheet.cell(row=1, column=column_index, value=title)
        cell.font = Font(bold=True)
    sheet.freeze_panes = "A2"


def _write_result_row(sheet, row_index: int, result: CaseResult) -> None:
    values = (
        result.test_file.name,
        result.scope_id,
        result.run.kind.manifest_kind if result.run else "",
        result.run.name if result.run else "",
        result.status.value,
        round(result.duration_seconds, 1),
        result.reason,
        "\n".join(result.cleanup_failures),
    )
    for column_index, value in enumerate(values, start=1):
        sheet.cell(row=row_index, column=column_index, value=value)


def _fit_columns(sheet) -> None:
    for column_cells in sheet.columns:
        longest = max(
            (len(line) for cell in column_cells for line in str(cell.value or "").splitlines()),
            default=0,
        )
        letter = get_column_letter(column_cells[0].column)
        sheet.column_dimensions[letter].width = min(max(longest + 2, 10), _MAX_COLUMN_WIDTH)


def _write_run_info_sheet(
    workbook: Workbook,
    results: Sequence[CaseResult],
    run_metadata: RunMetadata,
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    counts = {status: 0 for status in CaseStatus}
    for result in results:
        counts[result.status] += 1
    rows = [
        ("Run Start", run_metadata.run_start.isoformat()),
        ("StepAction Directory", str(run_metadata.step_action_dir)),
        ("Output File", str(run_metadata.output_path)),
        ("Execution Mode", run_metadata.mode),
        ("Expected Condition", run_metadata.expected_condition),
        ("Timeout (s)", run_metadata.timeout_seconds),
        ("Test Manifests", len(results)),
    ]
    rows.extend((status.value.title().replace("_", " "), counts[status]) for status in CaseStatus)
    rows.append(("Cleanup Failures", sum(len(result.cleanup_failures) for result in results)))
    for row_index, (label, value) in enumerate(rows, start=1):
        sheet.cell(row=row_index, column=1, value=label).font = Font(bold=True)
        sheet.cell(row=row_index, column=2, value=value)
    _fit_columns(sheet)

import re
import pandas as pd
from dataclasses import dataclass, field
from pathlib import Path
from openpyxl.styles import PatternFill, Font, Border, Side, Alignment
from openpyxl.utils import get_column_letter

from attendance import EmployeeGroup, DailyRecord

# ==============================================================================
# REPORT CONFIGURATION
# ==============================================================================
DETAILED_FILE_NAME: str = 'Final_Attendance_Report.xlsx'
DETAILED_SHEET_NAME: str = 'Attendance_Output'
DETAILED_HEADERS: list[str] = ['Emp Code', 'Emp Name', 'Att. Date', 'InTime', 'OutTime', 'Status',
                               'Punch Records', 'Total Working Hours', 'AbsentDays', 'PresentDays']
DETAILED_COLUMN_WIDTHS: list[int] = [10, 25, 15, 10, 10, 20, 30, 15, 10, 10]
SEPARATOR_ROWS: int = 4

SUMMARY_FILE_NAME: str = 'Department_Wise_Attendance_Report.xlsx'
SUMMARY_SHEET_NAME: str = 'Department_Report'
SUMMARY_HEADERS: list[str] = ['Sl', 'Emp Code', 'Name', 'P', 'A', 'WO', 'Total Hr']
SUMMARY_COLUMN_WIDTHS: list[int] = [5, 15, 30, 5, 5, 5, 12]

FONT_NAME: str = 'Calibri'
FONT_SIZE: int = 11
HEADER_FILL_COLOR: str = 'E0E0E0'
HIGHLIGHT_FILL_COLOR: str = 'FFFF00'


@dataclass(frozen=True)
class StyledCell:
    value: str | int | float = ''
    bold: bool = False
    highlighted: bool = False
    centered: bool = False
    header: bool = False
    bordered: bool = False

    @property
    def kind(self) -> str:
        if isinstance(self.value, (int, float)) and not isinstance(self.value, bool):
            return 'number'
        return 'text'


@dataclass
class ReportSheet:
    file_name: str
    sheet_name: str
    rows: list[list[StyledCell]] = field(default_factory=list)
    column_widths: list[int] = field(default_factory=list)


def natural_sort_key(code: str) -> list[tuple[int, int, str]]:
    """
    Sort key that compares digit runs by value, so 'EMP9' sorts before 'EMP10'.

    At any position a number sorts before text, and text compares case-insensitively.
    """
    key: list[tuple[int, int, str]] = []
    for part in re.split(r'(\d+)', str(code or '')):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part), part))
        else:
            key.append((1, 0, part.casefold()))
    return key


def is_missing_out_time(record: DailyRecord) -> bool:
    """An in-punch without a matching out-punch. Never true without an in-punch."""
    return bool(record.in_time) and not record.out_time


def header_row(headers: list[str], bordered: bool = False) -> list[StyledCell]:
    return [StyledCell(title, bold=True, centered=True, header=True, bordered=bordered) for title in headers]


def build_detailed_report(groups: list[EmployeeGroup]) -> ReportSheet:
    """
    Projects the employee groups into the detailed attendance ledger.

    For every employee, in processing order:
    1.  One row per daily record. Rows with an in-time but no out-time are
        highlighted. The AbsentDays/PresentDays columns stay blank.
    2.  A bold summary row with the 'Total Hours' label, the employee's total
        hours and the absent/present counts.
    3.  Four blank rows as a separator.

    Args:
        groups: Aggregated employee groups.

    Returns:
        The report sheet, ready for write_report.
    """
    report: ReportSheet = ReportSheet(file_name=DETAILED_FILE_NAME,
                                      sheet_name=DETAILED_SHEET_NAME,
                                      column_widths=list(DETAILED_COLUMN_WIDTHS))
    report.rows.append(header_row(DETAILED_HEADERS))

    for group in groups:
        if not group.records:
            continue
        employee_total: float = 0.0
        for record in group.records:
            flagged: bool = is_missing_out_time(record)
            hours: float | str = record.total_working_hours if record.total_working_hours is not None else ''
            values: list = [record.emp_code, record.emp_name, record.date, record.in_time, record.out_time,
                            record.status, record.punch_records, hours, '', '']
            report.rows.append([StyledCell(value, highlighted=flagged) for value in values])
            if record.total_working_hours is not None:
                employee_total += record.total_working_hours

        report.rows.append([
            StyledCell(group.code),
            StyledCell(group.name),
            StyledCell(''),
            StyledCell(''),
            StyledCell(''),
            StyledCell(''),
            StyledCell('Total Hours', bold=True),
            StyledCell(round(employee_total, 2), bold=True),
            StyledCell(group.absent_days, bold=True),
            StyledCell(group.present_days, bold=True),
        ])
        report.rows.extend([] for _ in range(SEPARATOR_ROWS))

    return report


def build_summary_report(groups: list[EmployeeGroup]) -> ReportSheet:
    """One bordered row per employee, sorted by employee code (numeric-aware)."""
    report: ReportSheet = ReportSheet(file_name=SUMMARY_FILE_NAME,
                                      sheet_name=SUMMARY_SHEET_NAME,
                                      column_widths=list(SUMMARY_COLUMN_WIDTHS))
    report.rows.append(header_row(SUMMARY_HEADERS, bordered=True))

    sorted_groups: list[EmployeeGroup] = sorted(groups, key=lambda group: natural_sort_key(group.code))
    for index, group in enumerate(sorted_groups, 1):
        report.rows.append([
            StyledCell(index, centered=True, bordered=True),
            StyledCell(group.code, centered=True, bordered=True),
            StyledCell(group.name, bordered=True),  # Left-aligned
            StyledCell(group.present_days, centered=True, bordered=True),
            StyledCell(group.absent_days, centered=True, bordered=True),
            StyledCell(group.week_off_days, centered=True, bordered=True),
            StyledCell(round(group.total_working_hours, 2), centered=True, bordered=True),
        ])
    return report


def report_candidates(path: Path):
    """Yields 'name.xlsx', then 'name (1).xlsx', 'name (2).xlsx', ..."""
    yield path
    copy_number: int = 1
    while True:
        yield path.with_name(f'{path.stem} ({copy_number}){path.suffix}')
        copy_number += 1


def is_writable(path: Path) -> bool:
    """A report still open in Excel refuses an append handle on Windows."""
    try:
        with open(path, 'a'):
            return True
    except PermissionError:
        return False


def find_writable_filename(output_path: str | Path) -> Path:
    """
    Returns the first report path that can be written.

    A locked report is left alone and the next numbered copy is tried instead.
    Errors other than PermissionError propagate.
    """
    target: Path = Path(output_path)
    for candidate in report_candidates(target):
        if is_writable(candidate):
            if candidate != target:
                print(f'Warning: {target.name} is locked, saving as {candidate.name}')
            return candidate


def write_report(report: ReportSheet, output_dir: str | Path = '.') -> Path:
    """
    Writes a report sheet to '<output_dir>/<report.file_name>'.

    Values are written through pandas, then styled with openpyxl:
    - Header cells: grey fill, bold, centered.
    - Highlighted cells: yellow fill.
    - Bold, centered and bordered flags as set on each cell.
    - Column widths from the report, and a frozen header row.

    Args:
        report: The report to write.
        output_dir: Destination directory; created if missing.

    Returns:
        The path the workbook was saved to.
    """
    directory: Path = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    final_output_path: Path = find_writable_filename(directory / report.file_name)

    header_fill = PatternFill(start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR, fill_type='solid')
    highlight_fill = PatternFill(start_color=HIGHLIGHT_FILL_COLOR, end_color=HIGHLIGHT_FILL_COLOR,
                                 fill_type='solid')
    thin_border_side = Side(style='thin')
    cell_border = Border(left=thin_border_side, right=thin_border_side, top=thin_border_side, bottom=thin_border_side)
    center_align = Alignment(horizontal='center', vertical='center')

    width: int = max((len(row) for row in report.rows), default=0)
    values: list[list] = [[cell.value for cell in row] + [None] * (width - len(row)) for row in report.rows]
    df: pd.DataFrame = pd.DataFrame(values)

    with pd.ExcelWriter(final_output_path, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=report.sheet_name, index=False, header=False)
        worksheet = writer.sheets[report.sheet_name]

        for row_idx, row in enumerate(report.rows, 1):
            for col_idx, styled in enumerate(row, 1):
                cell = worksheet.cell(row=row_idx, column=col_idx)
                if styled.kind == 'text' and styled.value == '':
                    cell.value = None
                cell.font = Font(name=FONT_NAME, size=FONT_SIZE, bold=styled.bold or styled.header)
                if styled.header:
                    cell.fill = header_fill
                if styled.highlighted:
                    cell.fill = highlight_fill
                if styled.centered or styled.header:
                    cell.alignment = center_align
                elif styled.bordered:
                    cell.alignment = Alignment(horizontal='left', vertical='center')
                if styled.bordered:
                    cell.border = cell_border

        for i, column_width in enumerate(report.column_widths, 1):
            worksheet.column_dimensions[get_column_letter(i)].width = column_width

        worksheet.freeze_panes = 'A2'

    return final_output_path


def save_reports(groups: list[EmployeeGroup], output_dir: str | Path = '.') -> list[Path]:
    """Builds and writes both the detailed and the summary workbook."""
    return [write_report(build_detailed_report(groups), output_dir),
            write_report(build_summary_report(groups), output_dir)]

import re
import sys
import pandas as pd
from dataclasses import dataclass, field, replace
from datetime import datetime, date, time, timedelta
from pathlib import Path

# ==============================================================================
# LABEL CONFIGURATION
# Central registry of every column/field label the scanner recognizes.
#
# Properties:
#   - field: The internal name of the field the label identifies.
#   - pattern: Case-insensitive regex the stripped cell text must match.
#   - exclude: Optional regex; a cell that also matches it is NOT this label.
#
# Header fields are evaluated in HEADER_FIELDS order and the first match wins,
# so date and status are claimed before punch can grab them.
# ==============================================================================


@dataclass(frozen=True)
class LabelRule:
    field: str
    pattern: re.Pattern
    exclude: re.Pattern | None = None

    def matches(self, text: str) -> bool:
        if not self.pattern.search(text):
            return False
        return not (self.exclude and self.exclude.search(text))


SHIFT_PATTERN: re.Pattern = re.compile(r'^S\.?|Shift', re.IGNORECASE)

LABEL_RULES: dict[str, LabelRule] = {
    'emp_code': LabelRule('emp_code', re.compile(r'Emp(?:loyee)?[\s.]*Code', re.IGNORECASE)),
    'emp_name': LabelRule('emp_name', re.compile(r'Emp(?:loyee)?[\s.]*Name', re.IGNORECASE)),
    'department': LabelRule('department', re.compile(r'Department|Dept\.?', re.IGNORECASE)),
    'date': LabelRule('date', re.compile(r'^(?:ATT\.?\s*DATE|DATE)$', re.IGNORECASE)),
    'in_time': LabelRule('in_time', re.compile(r'^(?:In\s*Time|InTime)$', re.IGNORECASE), SHIFT_PATTERN),
    'out_time': LabelRule('out_time', re.compile(r'^(?:Out\s*Time|OutTime)$', re.IGNORECASE), SHIFT_PATTERN),
    'status': LabelRule('status', re.compile(r'^Status$', re.IGNORECASE)),
    'punch': LabelRule('punch', re.compile(r'Punch', re.IGNORECASE)),
    'shift': LabelRule('shift', SHIFT_PATTERN),
}

METADATA_FIELDS: tuple[str, ...] = ('emp_code', 'emp_name', 'department')
HEADER_FIELDS: tuple[str, ...] = ('date', 'in_time', 'out_time', 'status', 'punch')
REQUIRED_HEADER_FIELDS: tuple[str, ...] = ('date', 'in_time', 'out_time', 'status')

# Status keywords. Applied to trimmed, uppercased status text.
WEEK_OFF_PATTERN: re.Pattern = re.compile(r'WEEK\s*OFF|WO|OFF', re.IGNORECASE)
HOLIDAY_PATTERN: re.Pattern = re.compile(r'HOLIDAY|PH', re.IGNORECASE)

INLINE_VALUE_PATTERN: re.Pattern = re.compile(r'[:\-]\s*\S')
SEPARATOR_PATTERN: re.Pattern = re.compile(r'[:\-]')
LEADING_SEPARATORS_PATTERN: re.Pattern = re.compile(r'^[:\-\s]+')
TIME_PATTERN: re.Pattern = re.compile(r'^(\d{1,2})[:.](\d{2})(?:\s*:(\d{2}))?(?:\s*([AaPp][Mm]))?')
NUMERIC_TEXT_PATTERN: re.Pattern = re.compile(r'^\d+(?:\.\d+)?$')
CLOCK_TEXT_PATTERN: re.Pattern = re.compile(r'^\d{1,2}\.\d{2}$')

# Spreadsheet serials count days from 1899-12-30; 25569 of them precede 1970-01-01.
EXCEL_EPOCH_OFFSET: int = 25569
UNIX_EPOCH: datetime = datetime(1970, 1, 1)
MONTH_ABBREVIATIONS: list[str] = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                                  'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

UNKNOWN_NAME: str = 'UNKNOWN'
EXCEL_SUFFIXES: list[str] = ['.xlsx', '.xlsm', '.xls']

# A cell is '' (empty), a number, text, or a decoded date.
CellValue = str | int | float | datetime


# ==============================================================================
# ERRORS
# ==============================================================================

class ProcessingError(ValueError):
    """Base class for failures that terminate a whole processing run."""


class EmptyResultError(ProcessingError):
    """Scanning finished without producing a single employee group."""

    def __init__(self, message: str = 'No valid records found.'):
        super().__init__(message)


class WorkbookReadError(ProcessingError):
    """The input file is missing, unsupported, or could not be decoded."""


# ==============================================================================
# DATA MODEL
# ==============================================================================

@dataclass(frozen=True)
class EmployeeIdentity:
    code: str | None = None
    name: str | None = None
    department: str | None = None


@dataclass(frozen=True)
class HeaderLayout:
    date_col: int
    in_time_col: int
    out_time_col: int
    status_col: int
    punch_col: int | None = None


@dataclass(frozen=True)
class ScanState:
    """Scan-scoped context: who the rows belong to and where their columns are."""
    identity: EmployeeIdentity = EmployeeIdentity()
    header: HeaderLayout | None = None


@dataclass(frozen=True)
class DailyRecord:
    emp_code: str
    emp_name: str
    date: str
    in_time: str
    out_time: str
    status: str
    punch_records: str
    total_working_hours: float | None = None
    department: str = ''


@dataclass
class EmployeeGroup:
    code: str
    name: str
    department: str
    records: list[DailyRecord] = field(default_factory=list)
    absent_days: int = 0
    present_days: int = 0
    holiday_days: int = 0
    week_off_days: int = 0
    total_working_hours: float = 0.0


@dataclass
class ProcessingResult:
    groups: list[EmployeeGroup]
    stats: dict[str, float | int]
    logs: list[str] = field(default_factory=list)


# ==============================================================================
# CELL TEXT CLASSIFIER
# ==============================================================================

def is_numeric(value: CellValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value: CellValue | None) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    return False


def cell_text(value: CellValue | None) -> str:
    """
    Returns the stripped text form of a cell.

    Integral floats lose their trailing '.0' so that numeric employee codes
    read back as the code the machine printed (1001.0 -> '1001').
    """
    if is_blank(value):
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def get_cell(row: list[CellValue], index: int | None) -> CellValue:
    """Out-of-range (or missing) column access reads as an empty cell."""
    if index is None or index < 0 or index >= len(row):
        return ''
    value = row[index]
    return '' if value is None else value


def format_date(value: date) -> str:
    return f'{value.day:02d}-{MONTH_ABBREVIATIONS[value.month - 1]}-{value.year}'


def parse_date_cell(value: CellValue, day_first: bool = True) -> str:
    """
    Normalizes a date cell to 'DD-Mon-YYYY'.

    Numeric input is a spreadsheet serial: the epoch offset is removed and the
    remaining days are added to the Unix epoch as naive datetimes, so no
    local-timezone shift is ever introduced. Text input is handed to pandas.
    Anything unparseable comes back as its stringified original.

    Args:
        value: The raw cell value.
        day_first: Hint for ambiguous text dates such as '03/04/2024'.

    Returns:
        The formatted date, or the original value as text.
    """
    if is_blank(value):
        return ''
    if isinstance(value, datetime):
        return format_date(value)
    if is_numeric(value):
        try:
            milliseconds: int = round((value - EXCEL_EPOCH_OFFSET) * 86400 * 1000)
            return format_date(UNIX_EPOCH + timedelta(milliseconds=milliseconds))
        except (OverflowError, ValueError):
            return cell_text(value)

    text: str = cell_text(value)
    try:
        parsed = pd.to_datetime(text, dayfirst=day_first, errors='coerce')
    except (ValueError, TypeError, OverflowError):
        return text
    if pd.isna(parsed):
        return text
    return format_date(parsed)


def parse_time_cell(value: CellValue) -> float | None:
    """
    Converts a time cell to decimal hours.

    Numbers are day-fractions and are simply scaled by 24. Text must look like
    'H:MM', 'H.MM', 'H:MM:SS', optionally followed by AM/PM; seconds do not
    contribute. Returns None when the cell holds no recognizable time.
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.hour + value.minute / 60
    if is_numeric(value):
        return value * 24

    match = TIME_PATTERN.match(cell_text(value))
    if not match:
        return None
    hours: int = int(match.group(1))
    minutes: int = int(match.group(2))
    meridiem: str | None = match.group(4).lower() if match.group(4) else None
    if meridiem == 'pm' and hours < 12:
        hours += 12
    if meridiem == 'am' and hours == 12:
        hours = 0
    return hours + minutes / 60


def format_time_cell(value: CellValue) -> str:
    """Day-fractions become zero-padded 'HH:MM'; text passes through."""
    if is_blank(value):
        return ''
    if isinstance(value, datetime):
        return value.strftime('%H:%M')
    if is_numeric(value):
        total_minutes: int = int(round(value * 24 * 60))
        return f'{total_minutes // 60:02d}:{total_minutes % 60:02d}'
    return cell_text(value)


def working_hours(in_value: CellValue, out_value: CellValue) -> float | None:
    """
    Hours between an in and an out punch, rounded to 2 decimals.

    A negative difference is taken as an overnight shift and wrapped by 24h.
    Returns None unless both punches resolve to decimal hours.
    """
    in_hours: float | None = parse_time_cell(in_value)
    out_hours: float | None = parse_time_cell(out_value)
    if in_hours is None or out_hours is None:
        return None
    diff: float = out_hours - in_hours
    if diff < 0:
        diff += 24
    return round(diff, 2)


# ==============================================================================
# LABEL MATCHER
# ==============================================================================

def match_label(field_name: str, value: CellValue) -> bool:
    text: str = cell_text(value)
    if not text:
        return False
    return LABEL_RULES[field_name].matches(text)


def header_field(value: CellValue) -> str | None:
    """Returns the header field a cell names, checked in HEADER_FIELDS order."""
    for field_name in HEADER_FIELDS:
        if match_label(field_name, value):
            return field_name
    return None


def is_header_text(value: CellValue) -> bool:
    return header_field(value) is not None


def extract_inline_value(text: str) -> str | None:
    """
    Pulls the value out of a 'Label: Value' or 'Label - Value' cell.

    Returns None if nothing but whitespace follows the first separator.
    """
    if not INLINE_VALUE_PATTERN.search(text):
        return None
    remainder: str = SEPARATOR_PATTERN.split(text, maxsplit=1)[1]
    remainder = LEADING_SEPARATORS_PATTERN.sub('', remainder).strip()
    return remainder or None


def find_value_to_right(row: list[CellValue], start_index: int) -> str | None:
    """
    Finds the value of a bare label cell in the same row.

    Skips cells that are empty or hold only a ':'/'-' separator, and strips any
    leading separator from the first real value found.
    """
    for index in range(start_index + 1, len(row)):
        text: str = cell_text(row[index])
        if not text or text in (':', '-'):
            continue
        text = LEADING_SEPARATORS_PATTERN.sub('', text).strip()
        if text:
            return text
    return None


def extract_label_value(row: list[CellValue], index: int) -> str | None:
    text: str = cell_text(row[index])
    if INLINE_VALUE_PATTERN.search(text):
        return extract_inline_value(text)
    return find_value_to_right(row, index)


def normalize_name(name: str) -> str:
    return re.sub(r'\s+', ' ', name).strip().upper()


def find_metadata(row: list[CellValue]) -> dict[str, str]:
    """
    Collects employee code, name and department values present in a row.

    Only an employee code or name makes a row a metadata row. A department
    label is read alongside them and ignored otherwise, since header and data
    rows often carry a 'Dept' column or values such as 'HR Dept'.
    """
    found: dict[str, str] = {}
    for index, value in enumerate(row):
        for field_name in METADATA_FIELDS:
            if field_name in found or not match_label(field_name, value):
                continue
            label_value: str | None = extract_label_value(row, index)
            if not label_value:
                continue
            if field_name == 'department' and is_header_text(label_value):
                continue
            found[field_name] = label_value
    if 'emp_code' not in found and 'emp_name' not in found:
        return {}
    return found


def detect_header(row: list[CellValue]) -> HeaderLayout | None:
    """
    Builds a HeaderLayout from a row, if the row is a header row.

    Date, in-time, out-time and status must all be present; punch is optional.
    When a label repeats, the right-most column wins.
    """
    positions: dict[str, int] = {}
    for index, value in enumerate(row):
        field_name: str | None = header_field(value)
        if field_name:
            positions[field_name] = index

    if not all(name in positions for name in REQUIRED_HEADER_FIELDS):
        return None
    return HeaderLayout(date_col=positions['date'],
                        in_time_col=positions['in_time'],
                        out_time_col=positions['out_time'],
                        status_col=positions['status'],
                        punch_col=positions.get('punch'))


# ==============================================================================
# STATUS RULES
# ==============================================================================

def normalize_status(value: CellValue) -> str:
    return cell_text(value).upper()


def is_absent(status: str) -> bool:
    status = status.strip().upper()
    return 'ABSENT' in status or status == 'A'


def is_week_off(status: str) -> bool:
    return bool(WEEK_OFF_PATTERN.search(status))


def is_holiday(status: str) -> bool:
    return bool(HOLIDAY_PATTERN.search(status))


def is_present(status: str, hours: float | None) -> bool:
    """PRESENT/P status, or any positive working hours regardless of status."""
    status = status.strip().upper()
    worked: bool = hours is not None and hours > 0
    return 'PRESENT' in status or status == 'P' or worked


# ==============================================================================
# BLOCK SCANNER
# ==============================================================================

def apply_metadata(state: ScanState, metadata: dict[str, str]) -> ScanState:
    """
    Adopts the employee metadata found on one row.

    A code that differs from the tracked one drops both the identity and the
    header layout before the row's values are taken over.
    """
    identity: EmployeeIdentity = state.identity
    header: HeaderLayout | None = state.header

    new_code: str | None = metadata.get('emp_code')
    if new_code and identity.code and new_code != identity.code:
        identity = EmployeeIdentity()
        header = None
    if new_code:
        identity = replace(identity, code=new_code)
    if 'emp_name' in metadata:
        identity = replace(identity, name=normalize_name(metadata['emp_name']))
    if 'department' in metadata:
        identity = replace(identity, department=metadata['department'])
    return ScanState(identity=identity, header=header)


def build_record(identity: EmployeeIdentity, header: HeaderLayout,
                 row: list[CellValue], day_first: bool = True) -> DailyRecord | None:
    """
    Turns a data row into a DailyRecord, or None if the row is not accepted.

    A row is accepted when it has an in-time, or when its status marks the day
    as absent, week-off or holiday.
    """
    date_value: CellValue = get_cell(row, header.date_col)
    if is_blank(date_value) or match_label('date', date_value):
        return None

    in_value: CellValue = get_cell(row, header.in_time_col)
    has_in_time: bool = not is_blank(in_value) and not match_label('in_time', in_value)

    status_value: CellValue = get_cell(row, header.status_col)
    status: str = normalize_status(status_value)
    if not (has_in_time or is_absent(status) or is_week_off(status) or is_holiday(status)):
        return None

    out_value: CellValue = get_cell(row, header.out_time_col)
    out_display: str = ''
    total_hours: float | None = None
    if not is_blank(out_value) and not match_label('out_time', out_value):
        out_display = format_time_cell(out_value)
        if has_in_time:
            total_hours = working_hours(in_value, out_value)

    return DailyRecord(emp_code=identity.code,
                       emp_name=identity.name or UNKNOWN_NAME,
                       date=parse_date_cell(date_value, day_first),
                       in_time=format_time_cell(in_value) if has_in_time else '',
                       out_time=out_display,
                       status=cell_text(status_value),
                       punch_records=cell_text(get_cell(row, header.punch_col)),
                       total_working_hours=total_hours,
                       department=identity.department or '')


def scan_row(state: ScanState, row: list[CellValue],
             day_first: bool = True) -> tuple[ScanState, DailyRecord | None]:
    """
    Advances the scanner by one row.

    Each row is tried, in order, as:
    1.  Metadata (employee code / name / department). Such rows carry no data.
    2.  A header row, once an employee is tracked. It replaces any earlier layout.
    3.  A data row, once both an employee and a layout are known.

    Args:
        state: The scan context before this row.
        row: The row's cell values.
        day_first: Hint for ambiguous text dates.

    Returns:
        The scan context after this row and the record it produced, if any.
    """
    if not row or all(is_blank(value) for value in row):
        return state, None

    metadata: dict[str, str] = find_metadata(row)
    if metadata:
        return apply_metadata(state, metadata), None

    if state.identity.code is None:
        return state, None

    header: HeaderLayout | None = detect_header(row)
    if header is not None:
        return replace(state, header=header), None

    if state.header is None:
        return state, None
    return state, build_record(state.identity, state.header, row, day_first)


def scan_sheet(rows: list[list[CellValue]], day_first: bool = True) -> list[DailyRecord]:
    """Folds scan_row over a worksheet, starting from an empty context."""
    state: ScanState = ScanState()
    records: list[DailyRecord] = []
    for row in rows:
        state, record = scan_row(state, row, day_first)
        if record is not None:
            records.append(record)
    return records


# ==============================================================================
# RECORD AGGREGATOR
# ==============================================================================

def group_records(records: list[DailyRecord],
                  groups: dict[str, EmployeeGroup] | None = None) -> dict[str, EmployeeGroup]:
    """
    Appends records to their employee's group, creating groups on first sight.

    The mapping keeps insertion order. A group's name and department come from
    the first record seen for its code.
    """
    if groups is None:
        groups = {}
    for record in records:
        if record.emp_code not in groups:
            groups[record.emp_code] = EmployeeGroup(code=record.emp_code,
                                                    name=record.emp_name,
                                                    department=record.department)
        groups[record.emp_code].records.append(record)
    return groups


def records_frame(groups: list[EmployeeGroup]) -> pd.DataFrame:
    rows: list[dict] = [{'CODE': group.code,
                         'STATUS': record.status,
                         'HOURS': record.total_working_hours}
                        for group in groups for record in group.records]
    return pd.DataFrame(rows, columns=['CODE', 'STATUS', 'HOURS'])


def summarize_groups(groups: list[EmployeeGroup]) -> dict[str, float | int]:
    """
    Computes per-employee day counts and hour sums, and the global totals.

    Counts are derived once over all records. A status that satisfies several
    rules (e.g. 'ABSENT' with recorded hours) is counted under each of them.

    Args:
        groups: The employee groups to update in place.

    Returns:
        Global statistics: total_employees, total_records, total_hours.
    """
    df: pd.DataFrame = records_frame(groups)
    status: pd.Series = df['STATUS'].astype(str).str.strip().str.upper()
    hours: pd.Series = pd.to_numeric(df['HOURS'], errors='coerce')

    df['ABSENT'] = status.map(is_absent).astype(bool)
    df['PRESENT'] = pd.Series([is_present(s, h) for s, h in zip(status, hours)], index=df.index, dtype=bool)
    df['WEEK_OFF'] = status.map(is_week_off).astype(bool)
    df['HOLIDAY'] = status.map(is_holiday).astype(bool)
    df['HOURS'] = hours.fillna(0.0)

    totals: pd.DataFrame = df.groupby('CODE', sort=False)[
        ['ABSENT', 'PRESENT', 'WEEK_OFF', 'HOLIDAY', 'HOURS']].sum()

    for group in groups:
        if group.code not in totals.index:
            continue
        summary: pd.Series = totals.loc[group.code]
        group.absent_days = int(summary['ABSENT'])
        group.present_days = int(summary['PRESENT'])
        group.week_off_days = int(summary['WEEK_OFF'])
        group.holiday_days = int(summary['HOLIDAY'])
        group.total_working_hours = float(summary['HOURS'])

    return {'total_employees': len(groups),
            'total_records': len(df),
            'total_hours': round(float(df['HOURS'].sum()), 2)}


def process_workbook(sheets: dict[str, list[list[CellValue]]], day_first: bool = True) -> ProcessingResult:
    """
    Runs the whole pipeline over a decoded workbook.

    Every worksheet is scanned independently (identity and header layout never
    leak between sheets), but records of the same employee code are merged
    into one group across sheets.

    Args:
        sheets: Worksheet name -> grid of cell values, in workbook order.
        day_first: Hint for ambiguous text dates.

    Returns:
        A ProcessingResult with the groups, global statistics and log messages.

    Raises:
        EmptyResultError: If no sheet yielded an accepted record.
    """
    logs: list[str] = []
    groups: dict[str, EmployeeGroup] = {}

    for sheet_name, rows in sheets.items():
        if not rows:
            logs.append(f'Skipping empty sheet: {sheet_name=}.')
            continue
        records: list[DailyRecord] = scan_sheet(rows, day_first)
        if not records:
            logs.append(f'Sheet {sheet_name=} contained no recognizable attendance rows.')
            continue
        group_records(records, groups)
        employees: int = len({record.emp_code for record in records})
        logs.append(f'Sheet {sheet_name=}: {len(records)} record(s) for {employees} employee(s).')

    if not groups:
        raise EmptyResultError()

    group_list: list[EmployeeGroup] = list(groups.values())
    stats: dict[str, float | int] = summarize_groups(group_list)
    logs.append(f'Processed {stats["total_employees"]} employee(s), '
                f'{stats["total_records"]} record(s), {stats["total_hours"]:.2f} total hours.')
    return ProcessingResult(groups=group_list, stats=stats, logs=logs)


# ==============================================================================
# WORKBOOK READING
# ==============================================================================

def normalize_cell(value) -> CellValue:
    """
    Maps whatever the workbook reader produced onto a CellValue.

    Empty cells become '', time-of-day and durations become day-fractions, and
    pandas timestamps become plain datetimes.
    """
    if value is None or value is pd.NaT:
        return ''
    if isinstance(value, (pd.Timestamp, datetime)):
        if pd.isna(value):
            return ''
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, time):
        return (value.hour * 3600 + value.minute * 60 + value.second) / 86400
    if isinstance(value, (timedelta, pd.Timedelta)):
        return pd.Timedelta(value).total_seconds() / 86400
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return '' if pd.isna(value) else value
    if hasattr(value, 'item'):
        # numpy scalars
        return normalize_cell(value.item())
    return str(value)


def coerce_numeric_text(value: CellValue) -> CellValue:
    """
    Turns plain numeric text from a CSV back into a number.

    '0.375' becomes the day-fraction 0.375 and '45366' a date serial. Text that
    reads as a clock time ('9.30', '18.45') or carries leading zeros ('007')
    stays text, so times and employee codes keep their meaning.
    """
    if not isinstance(value, str):
        return value
    text: str = value.strip()
    if not NUMERIC_TEXT_PATTERN.match(text) or CLOCK_TEXT_PATTERN.match(text):
        return value
    if re.match(r'^0\d', text):
        return value
    return float(text) if '.' in text else int(text)


def frame_to_grid(df: pd.DataFrame, numeric_text: bool = False) -> list[list[CellValue]]:
    """
    Converts a header-less DataFrame to rows, trimming trailing empty cells.

    With numeric_text, numbers that arrived as text (CSV) are converted back.
    """
    grid: list[list[CellValue]] = []
    for row in df.itertuples(index=False, name=None):
        cells: list[CellValue] = [normalize_cell(value) for value in row]
        if numeric_text:
            cells = [coerce_numeric_text(cell) for cell in cells]
        while cells and is_blank(cells[-1]):
            cells.pop()
        grid.append(cells)
    return grid


def read_input_file(file_path: str | Path) -> tuple[dict[str, list[list[CellValue]]], list[str]]:
    """
    Reads a spreadsheet export into ordered grids of raw cells.

    -   For Excel files, every worksheet is read, in workbook order, without
        assuming a header row.
    -   For CSV files, the file becomes a single sheet named after the file.

    Args:
        file_path: The path to the input file (.xlsx, .xlsm, .xls or .csv).

    Returns:
        A tuple containing:
        - Worksheet name -> list of rows of cell values.
        - A list of log messages generated during reading.

    Raises:
        WorkbookReadError: If the file is missing, of an unsupported format, or
                           cannot be decoded.
    """
    path: Path = Path(file_path)
    file_suffix: str = path.suffix.lower()
    logs: list[str] = []

    if not path.exists():
        raise WorkbookReadError(f'Input file not found: {path}')

    if file_suffix == '.csv':
        try:
            df_raw: pd.DataFrame = pd.read_csv(path, header=None, dtype=object, skip_blank_lines=False)
        except (ValueError, UnicodeDecodeError, pd.errors.ParserError) as e:
            raise WorkbookReadError(f'Error reading CSV file {path.name=}: {e}') from e
        logs.append(f'Read CSV file: {path.name=} ({len(df_raw)} rows).')
        return {path.stem: frame_to_grid(df_raw, numeric_text=True)}, logs

    if file_suffix in EXCEL_SUFFIXES:
        try:
            xls_sheets: dict[str, pd.DataFrame] = pd.read_excel(path, sheet_name=None, header=None, dtype=object)
        except Exception as e:
            raise WorkbookReadError(f'Error reading Excel file {path.name=}: {e}') from e

        sheets: dict[str, list[list[CellValue]]] = {}
        for sheet_name, sheet_df_raw in xls_sheets.items():
            sheets[str(sheet_name)] = frame_to_grid(sheet_df_raw)
        logs.append(f'Read {len(sheets)} sheet(s) from {path.name}.')
        return sheets, logs

    raise WorkbookReadError(f'Unsupported file format: {file_suffix=}. Please use a .xlsx, .xls or .csv file.')


def process_file(file_path: str | Path, day_first: bool = True) -> ProcessingResult:
    """Reads an attendance export and processes it; reader logs come first."""
    sheets, logs = read_input_file(file_path)
    result: ProcessingResult = process_workbook(sheets, day_first)
    result.logs = logs + result.logs
    return result


def run_default():
    # Parameters
    file_path: Path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path('sample.xlsx')
    output_dir: Path = Path('.')

    # Process
    try:
        result: ProcessingResult = process_file(file_path)
    except ProcessingError as e:
        print(f'Error: Could not process input file. Details: {e}')
        return

    for log_message in result.logs:
        print(log_message)

    from reports import save_reports
    for saved_path in save_reports(result.groups, output_dir):
        print(f'Report saved to: {saved_path}')


if __name__ == '__main__':
    run_default()

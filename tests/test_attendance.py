from datetime import datetime

import pytest

from attendance import (
    DailyRecord, EmployeeGroup, EmployeeIdentity, HeaderLayout, ScanState,
    EmptyResultError, ProcessingError,
    parse_date_cell, parse_time_cell, format_time_cell, working_hours, cell_text, get_cell,
    match_label, header_field, extract_inline_value, find_value_to_right, find_metadata, detect_header,
    scan_row, scan_sheet, group_records, summarize_groups, process_workbook,
)


def employee_block(code, name, rows, header=None):
    if header is None:
        header = ['Att. Date', 'Shift', 'InTime', 'OutTime', 'Status', 'Punch Records']
    return [['Emp. Code :', code, '', 'Emp Name', ':', name], header] + rows


SHEET = (
    [['Monthly Attendance Report'], []]
    + employee_block('1001', 'john   doe', [
        [45366, 'GS', '09:00', '18:30', 'Present', '09:00(in),18:30(out)'],
        ['16-03-2024', 'GS', '22:00', '06:00', 'Present', ''],
        ['17-03-2024', 'GS', '', '', 'WO', ''],
        ['18-03-2024', 'GS', '', '', 'Absent', ''],
        ['19-03-2024', 'GS', '09:15', '', 'Present', '09:15(in)'],
        ['20-03-2024', 'GS', '', '', 'Present', ''],
        ['', '', '', '', '', ''],
    ])
)


# --- Cell text classifier ---------------------------------------------------

def test_numeric_date_serial_formats():
    assert parse_date_cell(45366) == '15-Mar-2024'
    assert parse_date_cell(45366.75) == '15-Mar-2024'


def test_text_and_datetime_dates_format():
    assert parse_date_cell('15/03/2024') == '15-Mar-2024'
    assert parse_date_cell('2024-03-15') == '15-Mar-2024'
    assert parse_date_cell(datetime(2024, 3, 15, 8, 0)) == '15-Mar-2024'


def test_unparseable_date_returns_original_text():
    assert parse_date_cell('not a date') == 'not a date'
    assert parse_date_cell('') == ''


@pytest.mark.parametrize('value, expected', [
    ('09:00', 9.0),
    ('9.30', 9.5),
    ('18:45:59', 18.75),
    ('9:30 PM', 21.5),
    ('12:15 AM', 0.25),
    ('12:00 pm', 12.0),
    (0.5, 12.0),
    (datetime(2024, 3, 15, 7, 30), 7.5),
])
def test_parse_time_cell(value, expected):
    assert parse_time_cell(value) == pytest.approx(expected)


def test_parse_time_cell_rejects_non_times():
    assert parse_time_cell('Absent') is None
    assert parse_time_cell('') is None


def test_format_time_cell():
    assert format_time_cell(0.375) == '09:00'
    assert format_time_cell(0.7708333333) == '18:30'
    assert format_time_cell('9:05 AM') == '9:05 AM'
    assert format_time_cell('') == ''


def test_working_hours():
    assert working_hours('09:00', '18:30') == 9.5
    assert working_hours('22:00', '06:00') == 8
    assert working_hours('09:00', 'MISSING') is None


def test_cell_text_and_out_of_range_access():
    assert cell_text(1001.0) == '1001'
    assert cell_text('  A ') == 'A'
    assert get_cell(['x'], 5) == ''
    assert get_cell(['x'], None) == ''


# --- Label matcher ----------------------------------------------------------

@pytest.mark.parametrize('text', ['Emp Code', 'Employee Code', 'EMP.CODE', 'Emp. Code :', 'emp code: 12'])
def test_employee_code_label_variants(text):
    assert match_label('emp_code', text)


def test_date_label_is_exact_token():
    assert match_label('date', 'Date')
    assert match_label('date', 'ATT. DATE')
    assert match_label('date', 'Att.Date')
    assert not match_label('date', 'Date of Joining')


def test_header_fields():
    assert header_field('In Time') == 'in_time'
    assert header_field('OutTime') == 'out_time'
    assert header_field('STATUS') == 'status'
    assert header_field('Punch Records') == 'punch'
    assert header_field('Shift') is None
    assert header_field('Shift In Time') is None


def test_extract_inline_value():
    assert extract_inline_value('Emp Code: 1001') == '1001'
    assert extract_inline_value('Emp Code - E-12') == 'E-12'
    assert extract_inline_value('Emp Code :- 77') == '77'
    assert extract_inline_value('Emp Code :') is None


def test_find_value_to_right_skips_separators():
    assert find_value_to_right(['Emp Code', '', ':', ': 1001'], 0) == '1001'
    assert find_value_to_right(['Emp Code', '-', ''], 0) is None


def test_find_metadata():
    row = ['Emp Code: 1001', '', 'Employee Name', 'jane  roe', 'Department', ':', 'Sales']
    assert find_metadata(row) == {'emp_code': '1001', 'emp_name': 'jane  roe', 'department': 'Sales'}


def test_department_header_column_is_not_metadata():
    assert find_metadata(['Date', 'Dept', 'In Time', 'Out Time', 'Status']) == {}


def test_detect_header_requires_all_core_columns():
    layout = detect_header(['Att. Date', 'Shift', 'InTime', 'OutTime', 'Status', 'Punch Records'])
    assert layout == HeaderLayout(date_col=0, in_time_col=2, out_time_col=3, status_col=4, punch_col=5)
    assert detect_header(['Date', 'InTime', 'Status']) is None


# --- Block scanner ----------------------------------------------------------

def test_scan_row_state_transitions():
    state = ScanState()

    state, record = scan_row(state, ['Date', 'InTime', 'OutTime', 'Status'])
    assert state == ScanState() and record is None

    state, record = scan_row(state, ['Emp Code: 7', 'Emp Name: ann lee'])
    assert state.identity == EmployeeIdentity(code='7', name='ANN LEE')
    assert state.header is None and record is None

    state, record = scan_row(state, ['Date', 'InTime', 'OutTime', 'Status'])
    assert state.header == HeaderLayout(date_col=0, in_time_col=1, out_time_col=2, status_col=3)

    state, record = scan_row(state, ['Date', '', '', ''])
    assert record is None

    state, record = scan_row(state, [45366, '09:00', '17:00', 'P'])
    assert record.emp_code == '7'
    assert record.total_working_hours == 8


def test_scan_sheet_builds_records():
    records = scan_sheet(SHEET)
    assert [r.date for r in records] == ['15-Mar-2024', '16-Mar-2024', '17-Mar-2024', '18-Mar-2024', '19-Mar-2024']
    first = records[0]
    assert first == DailyRecord(emp_code='1001', emp_name='JOHN DOE', date='15-Mar-2024', in_time='09:00',
                                out_time='18:30', status='Present', punch_records='09:00(in),18:30(out)',
                                total_working_hours=9.5)
    assert records[1].total_working_hours == 8


def test_row_without_in_time_needs_absence_status():
    records = scan_sheet(SHEET)
    statuses = [r.status for r in records]
    assert 'Absent' in statuses
    assert '20-Mar-2024' not in [r.date for r in records]
    absent = next(r for r in records if r.status == 'Absent')
    assert absent.total_working_hours is None
    assert absent.in_time == '' and absent.out_time == ''


def test_missing_out_time_keeps_row_without_hours():
    record = next(r for r in scan_sheet(SHEET) if r.date == '19-Mar-2024')
    assert record.in_time == '09:15'
    assert record.out_time == ''
    assert record.total_working_hours is None


def test_header_layout_does_not_leak_between_employees():
    rows = (
        employee_block('A1', 'alpha', [['15-03-2024', 'GS', '09:00', '17:00', 'P', '']])
        + [['Emp Code', 'B2'],
           # B's rows before B's own header must be ignored
           ['15-03-2024', 'GS', '10:00', '18:00', 'P', ''],
           ['Status', 'Date', 'Out Time', 'In Time'],
           ['P', '16-03-2024', '19:00', '10:00']]
    )
    records = scan_sheet(rows)
    assert [(r.emp_code, r.date) for r in records] == [('A1', '15-Mar-2024'), ('B2', '16-Mar-2024')]
    b_record = records[1]
    assert b_record.in_time == '10:00'
    assert b_record.out_time == '19:00'
    assert b_record.total_working_hours == 9
    assert b_record.emp_name == 'UNKNOWN'


def test_same_code_repeated_keeps_header():
    rows = employee_block('A1', 'alpha', [
        ['Emp Code', 'A1'],
        ['15-03-2024', 'GS', '09:00', '17:00', 'P', ''],
    ])
    records = scan_sheet(rows)
    assert len(records) == 1
    assert records[0].emp_name == 'ALPHA'


def test_name_left_of_code_survives_reset():
    rows = employee_block('A1', 'alpha', [['15-03-2024', 'GS', '09:00', '17:00', 'P', '']])
    rows += [['Emp Name: beta', 'Emp Code: B2'],
             ['Date', 'InTime', 'OutTime', 'Status'],
             ['16-03-2024', '09:00', '17:00', 'P']]
    records = scan_sheet(rows)
    assert records[-1].emp_code == 'B2'
    assert records[-1].emp_name == 'BETA'


def test_short_rows_read_missing_columns_as_empty():
    rows = [['Emp Code', '9'], ['Date', 'InTime', 'OutTime', 'Status'], ['16-03-2024', '08:00']]
    records = scan_sheet(rows)
    assert len(records) == 1
    assert records[0].out_time == '' and records[0].status == ''


def test_department_is_carried_to_group():
    rows = [['Emp Code: 5', 'Department: Stores'], ['Date', 'InTime', 'OutTime', 'Status'],
            ['16-03-2024', '08:00', '16:00', 'P']]
    groups = group_records(scan_sheet(rows))
    assert groups['5'].department == 'Stores'


# --- Aggregation ------------------------------------------------------------

def make_record(status, hours=None, code='E1'):
    return DailyRecord(emp_code=code, emp_name='X', date='01-Jan-2024', in_time='', out_time='',
                       status=status, punch_records='', total_working_hours=hours)


def test_summarize_counts_and_double_counting():
    group = EmployeeGroup(code='E1', name='X', department='', records=[
        make_record('Present', 9.5),
        make_record('Absent'),
        make_record('WO'),
        make_record('Holiday'),
        make_record('', 8.0),
        make_record('Absent', 4.0),
    ])
    stats = summarize_groups([group])

    assert group.absent_days == 2
    assert group.present_days == 3
    assert group.week_off_days == 1
    assert group.holiday_days == 1
    assert group.total_working_hours == pytest.approx(21.5)
    assert stats == {'total_employees': 1, 'total_records': 6, 'total_hours': 21.5}


def test_group_records_preserves_first_seen_order():
    groups = group_records([make_record('P', code='B'), make_record('P', code='A'), make_record('A', code='B')])
    assert list(groups) == ['B', 'A']
    assert len(groups['B'].records) == 2


# --- Processing -------------------------------------------------------------

def test_process_workbook_merges_sheets():
    second = employee_block('1001', 'john doe', [['21-03-2024', 'GS', '09:00', '17:00', 'Present', '']])
    result = process_workbook({'March-1': SHEET, 'Empty': [], 'March-2': second})

    assert len(result.groups) == 1
    group = result.groups[0]
    assert len(group.records) == 6
    assert group.total_working_hours == pytest.approx(25.5)
    assert result.stats['total_employees'] == 1
    assert result.stats['total_hours'] == 25.5
    assert any('Empty' in message for message in result.logs)


def test_process_workbook_is_idempotent():
    first = process_workbook({'Sheet1': SHEET})
    second = process_workbook({'Sheet1': SHEET})
    assert first.groups == second.groups
    assert first.stats == second.stats


def test_no_employee_label_fails():
    grid = [['Date', 'InTime', 'OutTime', 'Status'], ['15-03-2024', '09:00', '17:00', 'P']]
    with pytest.raises(EmptyResultError, match='No valid records found.'):
        process_workbook({'Sheet1': grid})


def test_empty_result_is_a_processing_error():
    with pytest.raises(ProcessingError):
        process_workbook({})


def test_department_column_in_header_is_still_a_header():
    rows = [['Emp Code', '7'],
            ['Date', 'Dept', 'Shift', 'In Time', 'Out Time', 'Status'],
            ['16-03-2024', 'Sales', 'GS', '09:00', '17:00', 'P']]
    records = scan_sheet(rows)
    assert len(records) == 1
    assert records[0].total_working_hours == 8


def test_department_values_in_data_rows_are_kept():
    rows = [['Emp Code: 12'],
            ['Date', 'Department', 'In Time', 'Out Time', 'Status'],
            ['16-03-2024', 'HR Dept', '09:00', '17:00', 'P'],
            ['17-03-2024', 'HR Dept', '09:00', '18:00', 'P']]
    records = scan_sheet(rows)
    assert [r.date for r in records] == ['16-Mar-2024', '17-Mar-2024']
    assert all(r.emp_code == '12' for r in records)


def test_department_alone_is_not_metadata():
    assert find_metadata(['Dept: Sales']) == {}
    assert find_metadata(['16-03-2024', 'HR Dept', '09:00']) == {}

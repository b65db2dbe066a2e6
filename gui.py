import sys
from PyQt6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFileDialog,
    QLabel, QLineEdit, QGroupBox, QTableWidget, QTableWidgetItem, QHeaderView,
    QMessageBox, QTextEdit, QStyleFactory, QSizePolicy
)
from PyQt6.QtGui import QFont, QColor
from datetime import datetime

from attendance import process_file, ProcessingError, ProcessingResult, DailyRecord
from reports import build_detailed_report, build_summary_report, write_report, is_missing_out_time

__version__ = "20260115"

PREVIEW_ROWS: int = 5
PREVIEW_HEADERS: list[str] = ["Emp Name", "Date", "In Time", "Out Time", "Status", "Total Hours"]
MISSING_OUT_COLOR: str = "#fef3c7"


def preview_values(record: DailyRecord) -> list[str]:
    """Cell texts for one preview row. A zero-hour day still shows '0.0 hrs'."""
    hours = f"{record.total_working_hours} hrs" if record.total_working_hours is not None else "-"
    out_time = record.out_time or ("MISSING" if record.in_time else "-")
    return [record.emp_name, record.date, record.in_time or "-", out_time, record.status, hours]


class AttendanceApp(QWidget):
    def __init__(self):
        super().__init__()
        self.result: ProcessingResult | None = None
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle(f'Attendance Report Processor v{__version__}')
        self.setGeometry(100, 100, 800, 650)

        main_layout = QVBoxLayout(self)
        main_layout.addLayout(self._create_input_layout())
        main_layout.addWidget(self._create_process_button())
        main_layout.addWidget(self._create_preview_group())
        main_layout.addLayout(self._create_download_layout())
        main_layout.addWidget(self._create_log_box())
        self.show()

    def _create_input_layout(self):
        input_layout = QHBoxLayout()
        input_label = QLabel("Select Attendance File:")
        self.input_path_edit = QLineEdit()
        self.input_path_edit.setPlaceholderText("Click 'Browse' to select an XLSX, XLS or CSV export...")
        self.input_path_edit.setReadOnly(True)
        browse_btn = QPushButton("Browse...")
        # noinspection PyUnresolvedReferences
        browse_btn.clicked.connect(self._select_input_file)
        input_layout.addWidget(input_label)
        input_layout.addWidget(self.input_path_edit)
        input_layout.addWidget(browse_btn)
        return input_layout

    def _create_process_button(self):
        self.process_btn = QPushButton("Process && Generate")
        self.process_btn.setFont(QFont('Arial', 14, QFont.Weight.Bold))
        self.process_btn.setMinimumHeight(50)
        self.process_btn.setEnabled(False)
        self.process_btn.setStyleSheet("""
            QPushButton { background-color: #2563eb; color: white; border: none; border-radius: 5px; padding: 5px; }
            QPushButton:hover { background-color: #1d4ed8; }
            QPushButton:pressed { background-color: #1e40af; }
            QPushButton:disabled { background-color: #cccccc; color: #666666; }
        """)
        # noinspection PyUnresolvedReferences
        self.process_btn.clicked.connect(self._run_processing)
        return self.process_btn

    def _create_preview_group(self):
        group_box = QGroupBox("Data Preview")
        layout = QVBoxLayout(group_box)
        self.stats_label = QLabel("No file processed.")
        self.stats_label.setStyleSheet("font-style: italic; color: #9c9a9a;")
        layout.addWidget(self.stats_label)
        self.preview_table = QTableWidget()
        self.preview_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.preview_table.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        layout.addWidget(self.preview_table)
        return group_box

    def _create_download_layout(self):
        layout = QHBoxLayout()
        layout.addStretch()
        self.detailed_btn = QPushButton("Detailed Report")
        self.summary_btn = QPushButton("Summary Excel")
        for button in (self.detailed_btn, self.summary_btn):
            button.setEnabled(False)
            layout.addWidget(button)
        # noinspection PyUnresolvedReferences
        self.detailed_btn.clicked.connect(lambda: self._save_report(build_detailed_report))
        # noinspection PyUnresolvedReferences
        self.summary_btn.clicked.connect(lambda: self._save_report(build_summary_report))
        return layout

    def _reset_results(self):
        self.result = None
        self.detailed_btn.setEnabled(False)
        self.summary_btn.setEnabled(False)
        self.stats_label.setText("No file processed.")
        self.preview_table.clear()
        self.preview_table.setRowCount(0)
        self.preview_table.setColumnCount(0)

    def _select_input_file(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Select Attendance File", "",
            "Attendance Files (*.xlsx *.xls *.xlsm *.csv);;Excel Files (*.xlsx *.xls *.xlsm);;CSV Files (*.csv);;All Files (*)"
        )
        if file_path:
            self.log_edit.clear()
            self._reset_results()
            self.input_path_edit.setText(file_path)
            self.process_btn.setEnabled(True)
            self.log(f"Selected input file: {file_path}")

    def _run_processing(self):
        input_file = self.input_path_edit.text()
        if not input_file:
            error_msg = "Please select an input file first."
            QMessageBox.critical(self, "Error", error_msg)
            self.log(f"Error: {error_msg}")
            return

        self._reset_results()
        self.process_btn.setEnabled(False)
        self.process_btn.setText("Processing...")
        QApplication.processEvents()

        try:
            self.log("Reading and scanning input file...")
            QApplication.processEvents()
            result = process_file(input_file)
            for msg in result.logs:
                self.log(msg)
            self.result = result
            self._update_preview(result)
            self.detailed_btn.setEnabled(True)
            self.summary_btn.setEnabled(True)
        except ProcessingError as e:
            QMessageBox.critical(self, "File or Data Error", f"Failed to read or process the input file:\n\n{e}")
            self.log(f"ERROR: {str(e).replace(chr(10), ' ')}")
        except Exception as e:
            error_msg = f"An unexpected error occurred during processing:\n\n{type(e).__name__}: {e}"
            QMessageBox.critical(self, "Processing Error", error_msg)
            self.log(f"FATAL ERROR: {error_msg.replace(chr(10), ' ')}")
        finally:
            self.process_btn.setEnabled(True)
            self.process_btn.setText("Process && Generate")

    def _update_preview(self, result: ProcessingResult):
        self.stats_label.setText(
            f"<strong>{result.stats['total_employees']}</strong> employee(s), "
            f"<strong>{result.stats['total_hours']:.2f}</strong> total hours. "
            f"Previewing first {PREVIEW_ROWS} rows (yellow background indicates missing OutTime).")

        records = result.groups[0].records[:PREVIEW_ROWS] if result.groups else []
        self.preview_table.clear()
        self.preview_table.setColumnCount(len(PREVIEW_HEADERS))
        self.preview_table.setHorizontalHeaderLabels(PREVIEW_HEADERS)
        self.preview_table.setRowCount(len(records))
        for r_idx, record in enumerate(records):
            missing_out = is_missing_out_time(record)
            for c_idx, val in enumerate(preview_values(record)):
                item = QTableWidgetItem(str(val))
                if missing_out:
                    item.setBackground(QColor(MISSING_OUT_COLOR))
                self.preview_table.setItem(r_idx, c_idx, item)
        self.preview_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)

    def _save_report(self, builder):
        if self.result is None:
            return
        output_dir = QFileDialog.getExistingDirectory(self, "Save Report To")
        if not output_dir:
            self.log("Save cancelled by user.")
            return
        try:
            saved_path = write_report(builder(self.result.groups), output_dir)
        except OSError as e:
            error_msg = f"Could not write the report. Please ensure it's not open elsewhere.\n\n{e}"
            QMessageBox.critical(self, "File Error", error_msg)
            self.log(f"Error: {error_msg.replace(chr(10), ' ')}")
            return
        success_msg = f"Report saved to:\n{saved_path}"
        QMessageBox.information(self, "Success", success_msg)
        self.log(success_msg.replace('\n', ' '))

    def _create_log_box(self):
        group_box = QGroupBox("Logs")
        layout = QVBoxLayout()
        self.log_edit = QTextEdit()
        self.log_edit.setReadOnly(True)
        log_font = QFont()
        log_font.setPointSize(9)
        self.log_edit.setFont(log_font)
        self.log_edit.setMaximumHeight(100)
        layout.addWidget(self.log_edit)
        group_box.setLayout(layout)
        return group_box

    def log(self, message):
        timestamp = datetime.now().strftime('%H:%M:%S')
        self.log_edit.append(f"{timestamp} - {message}")


if __name__ == '__main__':
    app = QApplication(sys.argv)
    if "Fusion" in QStyleFactory.keys():
        app.setStyle("Fusion")
    ex = AttendanceApp()
    sys.exit(app.exec())

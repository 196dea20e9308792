import logging
import os
import sys
from PySide6 import QtWidgets, QtCore
from PySide6.QtCore import Qt

from ase_palette import AseDecodeError, load_ase
from colors_export import output_path_for, write_colors_file
from swatch_config import ConfigManager
from swatch_preview import save_preview

CORE_LOGGERS = ("ase_palette", "colors_export", "swatch_config")


class ConsoleLogHandler(logging.Handler):
    """Mirrors log records into the viewer console."""
    def __init__(self, viewer):
        super().__init__(logging.INFO)
        self.viewer = viewer
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record):
        self.viewer.log(self.format(record))


class SwatchLabel(QtWidgets.QLabel):
    """A custom QLabel to display a color swatch."""
    def __init__(self, record, parent=None):
        super().__init__(parent)
        self.record = record
        self.setFixedSize(100, 100)
        self.setToolTip(
            f"{record.name}\n{record.color_space.label} {list(record.values)}\n"
            f"{record.color_type.name.title()}\nRGBA: {record.rgba}"
        )
        r, g, b = [int(round(c * 255)) for c in record.display_rgb]
        self.setStyleSheet(f"background-color: rgb({r},{g},{b}); border: 1px solid black;")


class SwatchViewer(QtWidgets.QWidget):
    """Browse .ase palettes and export them as Unity .colors libraries."""
    def __init__(self, config_manager=None):
        super().__init__()
        self.setWindowTitle("ASE Swatch Viewer")
        self.setMinimumSize(600, 500)

        self.config_manager = config_manager or ConfigManager()
        config = self.config_manager.load_config()
        self.default_path = config.get("default_path", os.path.expanduser("~"))
        self.output_dir = config.get("output_dir", "")

        self.current_path = None
        self.swatches = []
        self.swatch_widgets = []
        self._resize_timer = QtCore.QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self._delayed_relayout)

        self._init_ui()

        self._log_handler = ConsoleLogHandler(self)
        for name in CORE_LOGGERS:
            core_logger = logging.getLogger(name)
            if core_logger.level == logging.NOTSET:
                core_logger.setLevel(logging.INFO)
            core_logger.addHandler(self._log_handler)

        self.populate_path_dropdown()
        self.update_dropdown()

    def _init_ui(self):
        self.tabs = QtWidgets.QTabWidget(self)
        self.library_tab, self.pref_tab = QtWidgets.QWidget(), QtWidgets.QWidget()
        self.tabs.addTab(self.library_tab, "Library")
        self.tabs.addTab(self.pref_tab, "Preference")

        main_layout = QtWidgets.QVBoxLayout(self)
        main_layout.addWidget(self.tabs)
        self.setLayout(main_layout)

        lib_layout = QtWidgets.QVBoxLayout(self.library_tab)
        path_layout = QtWidgets.QHBoxLayout()

        self.path_dropdown = QtWidgets.QComboBox()
        self.path_dropdown.currentIndexChanged.connect(self.update_dropdown)
        self.path_dropdown.setEditable(True)
        self.path_dropdown.lineEdit().editingFinished.connect(self.on_path_edit_finished)

        self.file_dropdown = QtWidgets.QComboBox()
        self.file_dropdown.currentIndexChanged.connect(self.load_selected_ase)
        self.file_dropdown.setMaximumWidth(250)

        self.open_btn = QtWidgets.QPushButton("Open .ASE...")
        self.open_btn.clicked.connect(self.open_ase_dialog)

        path_layout.addWidget(self.path_dropdown)
        path_layout.addWidget(self.file_dropdown)
        path_layout.addWidget(self.open_btn)
        lib_layout.addLayout(path_layout)

        self.scroll_area = QtWidgets.QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        lib_layout.addWidget(self.scroll_area)

        self.container = QtWidgets.QWidget()
        self.grid = QtWidgets.QGridLayout(self.container)
        self.grid.setContentsMargins(0, 0, 0, 0)
        self.grid.setSpacing(6)
        self.grid.setVerticalSpacing(20)
        self.scroll_area.setWidget(self.container)

        button_layout = QtWidgets.QHBoxLayout()
        self.export_btn = QtWidgets.QPushButton("Export .colors")
        self.export_btn.clicked.connect(self.export_colors)
        self.preview_btn = QtWidgets.QPushButton("Save Preview...")
        self.preview_btn.clicked.connect(self.save_preview_dialog)
        button_layout.addWidget(self.export_btn)
        button_layout.addWidget(self.preview_btn)
        lib_layout.addLayout(button_layout)
        self._update_buttons()

        self.console = QtWidgets.QPlainTextEdit()
        self.console.setReadOnly(True)
        self.console.setMaximumHeight(100)
        self.console.setStyleSheet("background-color: #111; color: #eee; font-family: Consolas;")
        lib_layout.addWidget(self.console)

        pref_layout = QtWidgets.QVBoxLayout(self.pref_tab)
        self.pref_edit = QtWidgets.QLineEdit(self.default_path)
        self.pref_edit.setPlaceholderText("Default ASE directory path")
        self.pref_edit.editingFinished.connect(self.save_preference)
        self.output_edit = QtWidgets.QLineEdit(self.output_dir)
        self.output_edit.setPlaceholderText("Editor folder next to the .ase file")
        self.output_edit.editingFinished.connect(self.save_output_dir)
        pref_layout.addWidget(QtWidgets.QLabel("Default ASE Path:"))
        pref_layout.addWidget(self.pref_edit)
        pref_layout.addWidget(QtWidgets.QLabel("Export Folder:"))
        pref_layout.addWidget(self.output_edit)
        pref_layout.addStretch()

    def save_preference(self):
        path = self.pref_edit.text().strip()
        if os.path.isdir(path):
            self.default_path = path
            self.config_manager.update(default_path=path)
            self.log(f"Default path saved: {path}")
            self.populate_path_dropdown()
        else:
            self.log(f"Invalid path: {path}")

    def save_output_dir(self):
        self.output_dir = self.output_edit.text().strip()
        self.config_manager.update(output_dir=self.output_dir)
        self.log(f"Export folder saved: {self.output_dir or '(next to the .ase file)'}")

    def log(self, message):
        self.console.appendPlainText(str(message))

    def report_error(self, error):
        self.log(f"Error: {error}")
        QtWidgets.QMessageBox.critical(self, "ASE Decode Error", str(error))

    def closeEvent(self, event):
        for name in CORE_LOGGERS:
            logging.getLogger(name).removeHandler(self._log_handler)
        super().closeEvent(event)

    def clear_grid(self):
        self.swatch_widgets = []
        while self.grid.count():
            if item := self.grid.takeAt(0):
                if widget := item.widget():
                    widget.deleteLater()

    def on_path_edit_finished(self):
        new_path = self.path_dropdown.currentText().strip()
        if os.path.isdir(new_path):
            if new_path not in [self.path_dropdown.itemText(i) for i in range(self.path_dropdown.count())]:
                self.path_dropdown.addItem(new_path)
            self.path_dropdown.setCurrentText(new_path)
        else:
            self.log(f"Invalid folder: {new_path}")

    def update_dropdown(self):
        path = self.path_dropdown.currentText().strip()
        self.file_dropdown.clear()
        if not os.path.isdir(path):
            self.log(f"Invalid folder: {path}")
            return
        try:
            ase_files = [f for f in os.listdir(path) if f.lower().endswith(".ase")]
            if not ase_files:
                self.log("No .ase files found.")
                return
            self.file_dropdown.addItems(sorted(ase_files))
        except OSError as e:
            self.log(f"Error reading directory: {e}")

    def load_selected_ase(self):
        folder = self.path_dropdown.currentText().strip()
        filename = self.file_dropdown.currentText()
        if not filename: return

        filepath = os.path.join(folder, filename)
        if os.path.exists(filepath):
            self.load_ase_file(filepath)

    def open_ase_dialog(self):
        filepath, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Import ase Palette", self.default_path, "ASE Palettes (*.ase)"
        )
        if not filepath:
            self.log("No file selected.")
            return
        self.load_ase_file(filepath)

    def load_ase_file(self, filepath):
        self.log(f"Loading ASE file: {filepath}")
        try:
            swatches = load_ase(filepath)
        except (AseDecodeError, OSError) as e:
            self.current_path, self.swatches = None, []
            self.clear_grid()
            self._update_buttons()
            self.report_error(e)
            return False

        self.current_path, self.swatches = filepath, swatches
        self.populate_grid()
        self._update_buttons()
        self.log(f"Loaded {len(self.swatches)} swatches.")
        return True

    def export_colors(self):
        if self.current_path is None: return None
        out_path = output_path_for(self.current_path, self.output_dir or None)
        try:
            write_colors_file(self.swatches, out_path)
        except OSError as e:
            self.report_error(e)
            return None
        self.log(f"Exported {out_path}")
        return out_path

    def save_preview_dialog(self):
        if not self.swatches: return
        base = os.path.splitext(self.current_path)[0] + ".png"
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Save Palette Preview", base, "PNG (*.png)")
        if not path: return
        try:
            save_preview(self.swatches, path)
        except OSError as e:
            self.report_error(e)
            return
        self.log(f"Preview saved: {path}")

    def _update_buttons(self):
        self.export_btn.setEnabled(self.current_path is not None)
        self.preview_btn.setEnabled(bool(self.swatches))

    def populate_path_dropdown(self):
        """Populates dropdown with subdirectories containing .ase files."""
        self.path_dropdown.clear()
        if not os.path.isdir(self.default_path):
            self.log(f"Invalid default path: {self.default_path}")
            self.path_dropdown.addItem(self.default_path)
            return
        try:
            paths = [dp for dp, _, fns in os.walk(self.default_path) if any(f.lower().endswith(".ase") for f in fns)]
            if paths:
                self.path_dropdown.addItems(sorted(paths))
            else:
                self.log(f"No folders with .ase files found under {self.default_path}")
                self.path_dropdown.addItem(self.default_path)
        except OSError as e:
            self.log(f"Error scanning directories: {e}")

    def populate_grid(self):
        self.clear_grid()
        if not self.swatches: return

        max_cols = max(1, self.scroll_area.viewport().width() // 110)
        for i, record in enumerate(self.swatches):
            row, col = divmod(i, max_cols)
            swatch = SwatchLabel(record)
            self.swatch_widgets.append(swatch)

            name_label = QtWidgets.QLabel(record.name)
            name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            name_label.setToolTip(record.name)
            name_label.setFixedWidth(100)

            wrapper = QtWidgets.QWidget()
            vbox = QtWidgets.QVBoxLayout(wrapper)
            vbox.setContentsMargins(0, 0, 0, 0)
            vbox.setSpacing(4)
            vbox.addWidget(swatch, alignment=Qt.AlignmentFlag.AlignCenter)
            vbox.addWidget(name_label, alignment=Qt.AlignmentFlag.AlignCenter)
            self.grid.addWidget(wrapper, row, col)

        self.grid.setRowStretch(self.grid.rowCount(), 1)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._resize_timer.start(100)

    def _delayed_relayout(self):
        if self.swatches:
            self.populate_grid()


def main(argv=None):
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(argv if argv is not None else sys.argv)
    viewer = SwatchViewer()
    viewer.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())

import logging
import os
import signal
import sys
import threading
import traceback
import warnings
from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QApplication, QLabel, QMainWindow, QMessageBox,
                               QScrollArea, QVBoxLayout, QWidget)

from listview.utils.settings import settings
from listview.widgets.list_view import ListView

CRASH_LOG_PATH = os.path.abspath('listview_crash.log')
INITIAL_ROWS = 2000
PAGE_ROWS = 500
MAX_ROWS = 100_000


def _append_crash_log(title: str, exc_info=None):
    """Append a timestamped crash entry to the crash log."""
    ts = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"{ts} | {title}\n")
            f.write("=" * 80 + "\n")
            if exc_info is None:
                f.write(traceback.format_exc())
            else:
                f.writelines(traceback.format_exception(*exc_info))
            f.write("\n")
    except Exception as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def install_crash_handlers():
    """Log unhandled Python and thread exceptions to the crash log."""
    def _unhandled_exception(exc_type, exc_value, exc_traceback):
        _append_crash_log("UNHANDLED EXCEPTION", (exc_type, exc_value, exc_traceback))
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    def _thread_exception(args):
        thread_name = getattr(args.thread, 'name', 'unknown')
        _append_crash_log(
            f"THREAD EXCEPTION ({thread_name})",
            (args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = _unhandled_exception
    threading.excepthook = _thread_exception


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('LISTVIEW_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        logging.basicConfig(level=logging.DEBUG)
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


def make_row(item, parent):
    # Uneven row heights so placeholders carry real measurements.
    label = QLabel(f"Row {item:,}", parent)
    label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter)
    label.setMargin(8)
    label.setFixedHeight(28 + (item % 5) * 12)
    return label


class DemoWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle('ListView demo')
        self.resize(480, 720)

        # Window mode: the list scrolls with this outer scroll area.
        scroll_area = QScrollArea(self)
        scroll_area.setWidgetResizable(True)
        page = QWidget()
        page_layout = QVBoxLayout(page)
        page_layout.setContentsMargins(0, 0, 0, 0)
        self.list_view = ListView(make_row, page, load_more=self.load_more)
        header = QLabel('Scroll down; more rows load at the end.')
        header.setMargin(8)
        self.list_view.set_list_start(header)
        page_layout.addWidget(self.list_view)
        scroll_area.setWidget(page)
        self.setCentralWidget(scroll_area)

        self.list_view.set_items(range(INITIAL_ROWS))

    def load_more(self):
        count = len(self.list_view.items())
        if count >= MAX_ROWS:
            return
        self.list_view.set_items(self.list_view.items() + list(range(count, min(MAX_ROWS, count + PAGE_ROWS))))

    def closeEvent(self, event):
        # Window-mode lists are not top-level, so they never see closeEvent.
        self.list_view.teardown()
        super().closeEvent(event)


def run_demo():
    app = QApplication([])
    app.setApplicationName('ListView')
    app.setStyle('Fusion')

    window = DemoWindow()
    window.show()

    def signal_handler(signum, frame):
        print("\n[SHUTDOWN] Closing demo...")
        settings.sync()
        window.close()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    return int(app.exec())


def main():
    suppress_warnings()
    install_crash_handlers()
    try:
        return run_demo()
    except Exception as exception:
        _append_crash_log("TOP-LEVEL EXCEPTION", sys.exc_info())
        error_message_box = QMessageBox()
        error_message_box.setWindowTitle('Error')
        error_message_box.setIcon(QMessageBox.Icon.Critical)
        error_message_box.setText(str(exception))
        error_message_box.setDetailedText(traceback.format_exc())
        error_message_box.exec()
        return 1


if __name__ == '__main__':
    sys.exit(main())

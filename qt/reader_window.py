from __future__ import annotations

import html
import logging

from core.errors import ParseFailure
from core.position import describe_time_remaining
from core.transitions import TransitionMode, TransitionPhase
from qt.qt_compat import QtCore, QtWidgets
from qt.styles import build_qss, page_document_css

log = logging.getLogger(__name__)

Key = QtCore.Qt.Key
Modifier = QtCore.Qt.KeyboardModifier


def _code(key):
    # PyQt6 reports ints from event.key(); enum members carry .value.
    return getattr(key, "value", key)


PREVIOUS_KEYS = {_code(Key.Key_Left), _code(Key.Key_PageUp)}
NEXT_KEYS = {_code(Key.Key_Right), _code(Key.Key_PageDown), _code(Key.Key_Space)}


def page_html(page) -> str:
    if page is None:
        return ""
    return "".join(f"<p>{html.escape(paragraph)}</p>" for paragraph in page.paragraphs)


class ReaderWindow(QtWidgets.QMainWindow):
    """Renders the engine's session; all state changes arrive via subscriptions."""

    def __init__(self, engine, debug=False):
        super().__init__()
        self.engine = engine
        self.debug = debug
        self.setWindowTitle("Mindful Reader")
        self.resize(1100, 760)
        self._build_ui()
        self._unsubscribe = [
            engine.subscribe_layout(self._on_layout_changed),
            engine.subscribe_position(self._on_position_changed),
            engine.subscribe_phase(self._on_phase_changed),
            engine.subscribe_warning(self._on_warning),
        ]
        self.apply_settings()
        self.render_session()

    def _build_ui(self):
        root = QtWidgets.QWidget()
        root.setObjectName("ReaderRoot")
        self.setCentralWidget(root)
        layout = QtWidgets.QVBoxLayout(root)
        layout.setContentsMargins(24, 16, 24, 16)
        layout.setSpacing(10)

        self.lbl_title = QtWidgets.QLabel("No book open")
        self.lbl_title.setObjectName("BookTitle")
        self.lbl_author = QtWidgets.QLabel("")
        layout.addWidget(self.lbl_title)
        layout.addWidget(self.lbl_author)

        pages = QtWidgets.QHBoxLayout()
        pages.setSpacing(16)
        self.left_view = QtWidgets.QTextBrowser()
        self.left_view.setObjectName("PageView")
        self.right_view = QtWidgets.QTextBrowser()
        self.right_view.setObjectName("PageView")
        for view in (self.left_view, self.right_view):
            view.setFocusPolicy(QtCore.Qt.FocusPolicy.NoFocus)
            pages.addWidget(view, 1)
        layout.addLayout(pages, 1)

        self.progress = QtWidgets.QProgressBar()
        self.progress.setObjectName("ReadingProgress")
        self.progress.setRange(0, 100)
        self.progress.setTextVisible(False)
        layout.addWidget(self.progress)

        footer = QtWidgets.QHBoxLayout()
        self.lbl_page = QtWidgets.QLabel("")
        self.lbl_percent = QtWidgets.QLabel("")
        self.lbl_time = QtWidgets.QLabel("")
        self.lbl_chapter = QtWidgets.QLabel("")
        footer.addWidget(self.lbl_page)
        footer.addWidget(self.lbl_percent)
        footer.addStretch(1)
        footer.addWidget(self.lbl_chapter)
        footer.addStretch(1)
        footer.addWidget(self.lbl_time)
        layout.addLayout(footer)

        self.lbl_status = QtWidgets.QLabel("Ctrl+O: Open | Left/Right: Turn | Home/End | Ctrl+F: Search | M: 2D/3D")
        layout.addWidget(self.lbl_status)

    def apply_settings(self):
        settings = self.engine.settings
        self.setStyleSheet(build_qss(settings["theme"]))
        css = page_document_css(settings["font_family"], settings["font_size"], settings["line_height"])
        for view in (self.left_view, self.right_view):
            view.document().setDefaultStyleSheet(css)

    # --- rendering ---

    def render_session(self):
        session = self.engine.session
        layered = self.engine.mode is TransitionMode.LAYERED
        self.right_view.setVisible(layered)
        if session is None:
            self.lbl_title.setText("No book open")
            self.lbl_author.setText("")
            self.left_view.setHtml("")
            self.right_view.setHtml("")
            self.progress.setValue(0)
            for label in (self.lbl_page, self.lbl_percent, self.lbl_time, self.lbl_chapter):
                label.setText("")
            return
        document = session.document
        self.lbl_title.setText(document.title)
        self.lbl_author.setText(document.author or "Unknown Author")
        self.render_position(session.position)

    def render_position(self, position):
        session = self.engine.session
        if session is None:
            return
        self.left_view.setHtml(page_html(session.page_set[position.page_index]))
        next_index = position.page_index + 1
        if self.engine.mode is TransitionMode.LAYERED and next_index < position.page_count:
            self.right_view.setHtml(page_html(session.page_set[next_index]))
        else:
            self.right_view.setHtml("")

        self.lbl_page.setText(position.describe())
        self.lbl_percent.setText(f"{position.percentage:.0f}%")
        self.progress.setValue(int(round(position.percentage)))
        self.lbl_time.setText(describe_time_remaining(position.page_index, position.page_count))
        chapter = self.engine.current_chapter
        self.lbl_chapter.setText(chapter.title if chapter is not None else "")
        if self.debug:
            log.debug("Rendered %s", position.describe())

    def _on_layout_changed(self, _session):
        self.render_session()

    def _on_position_changed(self, position):
        self.render_position(position)

    def _on_phase_changed(self, phase, _direction):
        turning = phase is not TransitionPhase.IDLE
        for view in (self.left_view, self.right_view):
            view.setProperty("turning", turning)
            view.style().unpolish(view)
            view.style().polish(view)

    def _on_warning(self, failure):
        self.lbl_status.setText(f"Warning: {failure}")

    # --- actions ---

    def open_path(self, file_path):
        try:
            self.engine.open_document(file_path)
        except ParseFailure as exc:
            log.error("%s", exc)
            QtWidgets.QMessageBox.critical(self, "Open Failed", f"Failed to parse document: {exc.reason}")
            return False
        return True

    def open_file_dialog(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Open Document", "", "Text (*.txt)")
        if path:
            self.open_path(path)

    def search_dialog(self):
        if self.engine.session is None:
            return
        query, ok = QtWidgets.QInputDialog.getText(self, "Search", "Find in document:")
        if ok:
            self.show_search_result(query)

    def show_search_result(self, query):
        count = self.engine.search(query)
        if count is None:
            self.lbl_status.setText("Search failed")
        else:
            self.lbl_status.setText(f'Found {count} results for "{query.strip()}"')

    def toggle_mode(self):
        target = TransitionMode.FLAT if self.engine.mode is TransitionMode.LAYERED else TransitionMode.LAYERED
        self.engine.set_reading_mode(target)

    def keyPressEvent(self, event):
        key = _code(event.key())
        ctrl = bool(event.modifiers() & (Modifier.ControlModifier | Modifier.MetaModifier))
        if ctrl and key == _code(Key.Key_O):
            self.open_file_dialog()
        elif ctrl and key == _code(Key.Key_F):
            self.search_dialog()
        elif key in PREVIOUS_KEYS:
            self.engine.previous_page()
        elif key in NEXT_KEYS:
            self.engine.next_page()
        elif key == _code(Key.Key_Home):
            self.engine.first_page()
        elif key == _code(Key.Key_End):
            self.engine.last_page()
        elif key == _code(Key.Key_M):
            self.toggle_mode()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def closeEvent(self, event):
        self.engine.close_document()
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
        super().closeEvent(event)

"""Reading session engine: the public entry point used by the UI shells.

Wires the paginator, chapter index, transition state machine, navigation and
progress persister around one exclusively owned ``ReadingSession``. Rendering
happens in subscribers; the engine itself never touches widgets.
"""

import logging

from core.errors import PersistenceFailure
from core.navigation import NavigationController
from core.progress import SAVE_DELAY_MS, ProgressPersister
from core.session import ReadingSession
from core.transitions import TransitionMode, TransitionStateMachine
from system.reader_settings import DEFAULTS, normalize_settings

log = logging.getLogger(__name__)


class ReaderEngine:
    def __init__(self, store, scheduler, save_delay_ms=SAVE_DELAY_MS):
        self.store = store
        self.scheduler = scheduler
        self.settings = dict(DEFAULTS)
        self.session = None

        self._layout_listeners = []
        self._phase_listeners = []
        self._warning_listeners = []

        self.transitions = TransitionStateMachine(
            scheduler,
            mode=TransitionMode.parse(self.settings["reading_mode"], TransitionMode.FLAT),
            on_phase_changed=self._on_phase_changed,
            on_mode_changed=lambda _mode: self._emit_layout(),
        )
        self.navigation = NavigationController(self.transitions)
        self.persister = ProgressPersister(scheduler, store, delay_ms=save_delay_ms, on_failure=self._warn)
        self.navigation.subscribe(self.persister.on_position_changed)

    # --- subscriptions ---

    def subscribe_position(self, listener):
        return self.navigation.subscribe(listener)

    def subscribe_layout(self, listener):
        return self._subscribe(self._layout_listeners, listener)

    def subscribe_phase(self, listener):
        return self._subscribe(self._phase_listeners, listener)

    def subscribe_warning(self, listener):
        return self._subscribe(self._warning_listeners, listener)

    @staticmethod
    def _subscribe(listeners, listener):
        listeners.append(listener)

        def unsubscribe():
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _emit_layout(self):
        for listener in list(self._layout_listeners):
            listener(self.session)

    def _on_phase_changed(self, phase, direction):
        for listener in list(self._phase_listeners):
            listener(phase, direction)

    def _warn(self, failure):
        log.warning("%s", failure)
        for listener in list(self._warning_listeners):
            listener(failure)

    # --- settings ---

    @property
    def words_per_page(self):
        return int(self.settings["words_per_page"])

    @property
    def mode(self):
        return self.transitions.mode

    def load_settings(self):
        try:
            raw = self.store.get_settings()
        except Exception as exc:
            self._warn(exc if isinstance(exc, PersistenceFailure) else PersistenceFailure("Loading settings", exc))
            raw = {}
        self.settings = normalize_settings(raw)
        self.transitions.set_mode(TransitionMode.parse(self.settings["reading_mode"], TransitionMode.FLAT))
        return dict(self.settings)

    def _save_settings(self):
        try:
            self.store.save_settings(dict(self.settings))
        except Exception as exc:
            self._warn(exc if isinstance(exc, PersistenceFailure) else PersistenceFailure("Saving settings", exc))
            return False
        return True

    def update_settings(self, changes):
        """Apply presentation settings; pagination and mode keys are routed to their setters."""
        changes = dict(changes)
        words_per_page = changes.pop("words_per_page", None)
        reading_mode = changes.pop("reading_mode", None)
        if changes:
            merged = dict(self.settings)
            merged.update(changes)
            self.settings = normalize_settings(merged)
            self._save_settings()
        if reading_mode is not None:
            self.set_reading_mode(reading_mode)
        if words_per_page is not None:
            self.set_words_per_page(words_per_page)
        return dict(self.settings)

    def set_words_per_page(self, words_per_page):
        words_per_page = int(words_per_page)
        if words_per_page < 1:
            raise ValueError(f"words_per_page must be >= 1, got {words_per_page}")
        if words_per_page == self.words_per_page and (
            self.session is None or self.session.words_per_page == words_per_page
        ):
            return False
        if self.transitions.locked:
            log.debug("Repagination to %d words/page refused during page turn", words_per_page)
            return False
        self.settings["words_per_page"] = words_per_page
        self._save_settings()
        if self.session is not None:
            self.session.repaginate(words_per_page)
            log.debug("Repaginated to %d words/page: %d pages", words_per_page, self.session.page_count)
            self._emit_layout()
        return True

    def set_reading_mode(self, mode):
        mode = TransitionMode.parse(mode)
        if not self.transitions.set_mode(mode):
            return False
        self.settings["reading_mode"] = mode.value
        self._save_settings()
        return True

    # --- document lifecycle ---

    def _load_chapters(self, document_id):
        try:
            return list(self.store.get_chapters(document_id) or [])
        except Exception as exc:
            log.warning("No chapters for %s: %s", document_id, exc)
            return []

    def open_document(self, file_path):
        """Open a document and start a session; ParseFailure propagates to the caller."""
        document = self.store.open_document(file_path)
        if self.session is not None:
            self.close_document()
        chapters = self._load_chapters(document.id)
        self.session = ReadingSession(document, chapters, words_per_page=self.words_per_page)
        self.navigation.attach(self.session)
        log.debug(
            "Opened %s: %d pages, %d chapters, starting on page %d",
            document.title,
            self.session.page_count,
            len(chapters),
            self.session.page_index + 1,
        )
        self._emit_layout()
        return self.session

    def close_document(self):
        if self.session is None:
            return
        self.persister.flush()
        self.navigation.detach()
        self.session = None
        self._emit_layout()

    # --- navigation ---

    @property
    def position(self):
        return self.session.position if self.session is not None else None

    @property
    def current_chapter(self):
        if self.session is None:
            return None
        return self.session.chapter_index.chapter_at(self.session.page_index)

    def next_page(self):
        return self.navigation.next_page()

    def previous_page(self):
        return self.navigation.previous_page()

    def go_to_page(self, index):
        return self.navigation.go_to_page(index)

    def go_to_chapter(self, chapter):
        return self.navigation.go_to_chapter(chapter)

    def first_page(self):
        return self.navigation.go_to_page(0)

    def last_page(self):
        if self.session is None:
            return False
        return self.navigation.go_to_page(self.session.page_count - 1)

    # --- search ---

    def search(self, query):
        """Return the number of matches for ``query``; None if the search failed."""
        query = (query or "").strip()
        if self.session is None or not query:
            return 0
        try:
            results = self.store.search_in_document(self.session.document.id, query)
        except Exception as exc:
            self._warn(exc if isinstance(exc, PersistenceFailure) else PersistenceFailure("Searching document", exc))
            return None
        log.debug("Search %r: %d results", query, len(results))
        return len(results)

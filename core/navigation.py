import logging

from core.position import clamp_page_index
from core.transitions import Direction

log = logging.getLogger(__name__)


class NavigationController:
    """Moves the reader between pages and reports every successful move.

    Every operation is a no-op returning False when no session is attached or
    a page-turn transition is still in flight.
    """

    def __init__(self, transitions):
        self.transitions = transitions
        self.session = None
        self._listeners = []

    def attach(self, session):
        self.session = session

    def detach(self):
        self.session = None

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _ready(self):
        return self.session is not None and not self.transitions.locked

    def next_page(self):
        if not self._ready():
            return False
        if self.session.page_index >= self.session.page_count - 1:
            return False
        return self._turn(Direction.FORWARD, 1)

    def previous_page(self):
        if not self._ready():
            return False
        if self.session.page_index <= 0:
            return False
        return self._turn(Direction.BACKWARD, -1)

    def go_to_page(self, index):
        if not self._ready():
            return False
        target = clamp_page_index(index, self.session.page_count)
        if target == self.session.page_index:
            return False
        self.session.set_page_index(target)
        self._emit()
        return True

    def go_to_chapter(self, chapter):
        if self.session is None:
            return False
        page = self.session.chapter_index.page_for(chapter)
        if page is None:
            log.debug("Chapter %r not in index; ignoring", getattr(chapter, "id", chapter))
            return False
        return self.go_to_page(page)

    def _turn(self, direction, step):
        session = self.session

        def complete():
            # The session may have been closed while the page was turning.
            if self.session is not session:
                return
            session.set_page_index(session.page_index + step)
            self._emit()

        return self.transitions.request(direction, complete)

    def _emit(self):
        position = self.session.position
        log.debug("Position changed: %s (%.0f%%)", position.describe(), position.percentage)
        for listener in list(self._listeners):
            listener(position)

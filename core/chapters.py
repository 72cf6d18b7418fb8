import bisect
import logging

from core.models import Chapter
from core.position import clamp_page_index

log = logging.getLogger(__name__)


def chapter_page(chapter, words_per_page, page_count):
    return clamp_page_index(chapter.start_position // words_per_page, page_count)


def build_chapter_index(chapters, words_per_page, page_count):
    """Map chapter id -> page; when ids repeat, the first chapter keeps the id."""
    pages = {}
    for chapter in chapters:
        if chapter.id in pages:
            log.warning("Duplicate chapter id %r (%s); id lookups resolve to the first", chapter.id, chapter.title)
            continue
        pages[chapter.id] = chapter_page(chapter, words_per_page, page_count)
    return pages


class ChapterIndex:
    """Chapter -> page lookup for one pagination of a document."""

    def __init__(self, chapters, words_per_page, page_count):
        # sorted() is stable, so chapters sharing a start keep their source order.
        self.chapters = tuple(sorted(chapters, key=lambda ch: ch.start_position))
        self.words_per_page = int(words_per_page)
        self.page_count = int(page_count)
        self._pages = build_chapter_index(self.chapters, self.words_per_page, self.page_count)
        self._start_pages = [chapter_page(ch, self.words_per_page, self.page_count) for ch in self.chapters]

    def __len__(self):
        return len(self.chapters)

    def __bool__(self):
        return bool(self.chapters)

    def page_for(self, chapter):
        if isinstance(chapter, Chapter):
            if chapter in self.chapters:
                return chapter_page(chapter, self.words_per_page, self.page_count)
            chapter = chapter.id
        return self._pages.get(chapter)

    def chapter_at(self, page_index):
        if not self.chapters:
            return None
        pos = bisect.bisect_right(self._start_pages, page_index) - 1
        if pos < 0:
            return None
        return self.chapters[pos]

    def as_dict(self):
        return dict(self._pages)

from core.chapters import ChapterIndex
from core.paginator import paginate
from core.position import ReadingPosition, absolute_to_page_index, clamp_page_index


class ReadingSession:
    """State of one open document: pages, chapter map and the current page."""

    def __init__(self, document, chapters=(), words_per_page=400):
        self.document = document
        self.chapters = tuple(chapters)
        self.page_set = None
        self.chapter_index = None
        self.page_index = 0
        self._layout(words_per_page)
        self.page_index = absolute_to_page_index(
            document.current_position, document.total_pages, self.page_count
        )

    @property
    def page_count(self):
        return len(self.page_set)

    @property
    def words_per_page(self):
        return self.page_set.words_per_page

    @property
    def current_page(self):
        return self.page_set[self.page_index]

    @property
    def position(self):
        return ReadingPosition(
            document_id=self.document.id,
            page_index=self.page_index,
            page_count=self.page_count,
            total_absolute_units=self.document.total_pages,
        )

    def set_page_index(self, index):
        self.page_index = clamp_page_index(index, self.page_count)
        return self.page_index

    def repaginate(self, words_per_page):
        """Rebuild pages and chapter map, keeping the reader's absolute place."""
        absolute = self.position.absolute
        self._layout(words_per_page)
        self.page_index = absolute_to_page_index(absolute, self.document.total_pages, self.page_count)
        return self.page_index

    def _layout(self, words_per_page):
        self.page_set = paginate(self.document.content, words_per_page)
        self.chapter_index = ChapterIndex(self.chapters, self.page_set.words_per_page, len(self.page_set))

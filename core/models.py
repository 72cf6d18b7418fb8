from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class Document:
    id: str
    title: str
    content: str
    total_pages: int
    file_type: str
    author: Optional[str] = None
    file_path: Optional[Path] = None
    current_position: int = 0
    chapters: Tuple["Chapter", ...] = ()


@dataclass(frozen=True)
class Chapter:
    id: str
    title: str
    start_position: int
    end_position: Optional[int] = None

    @classmethod
    def from_record(cls, record, order=0):
        """Build from a cache record; a blank id becomes 'chapter-<n>' from its position."""
        end = record.get("end_position")
        raw_id = record.get("id")
        chapter_id = str(raw_id).strip() if raw_id is not None else ""
        return cls(
            id=chapter_id or f"chapter-{order + 1}",
            title=str(record.get("title", "")),
            start_position=max(0, int(record.get("start_position", 0) or 0)),
            end_position=int(end) if end is not None else None,
        )

    def to_record(self):
        return {
            "id": self.id,
            "title": self.title,
            "start_position": self.start_position,
            "end_position": self.end_position,
        }


@dataclass(frozen=True)
class Page:
    paragraphs: Tuple[str, ...]
    start_word: int
    end_word: int

    @property
    def word_count(self):
        return self.end_word - self.start_word

    @property
    def text(self):
        return "\n\n".join(self.paragraphs)


@dataclass(frozen=True)
class PageSet:
    pages: Tuple[Page, ...]
    words: Tuple[str, ...] = field(repr=False)
    words_per_page: int

    def __len__(self):
        return len(self.pages)

    def __getitem__(self, index):
        return self.pages[index]

    def __iter__(self):
        return iter(self.pages)

    def words_for(self, index):
        page = self.pages[index]
        return self.words[page.start_word:page.end_word]

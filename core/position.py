"""Conversions between page index, completion percentage and absolute units.

Absolute units are the host format's own length measure (for example a PDF
page count), independent of the word-based pagination. The conversions are
lossy: reopening a document after ``words_per_page`` changed may land the
reader on an adjacent page.
"""

import math
from dataclasses import dataclass

MINUTES_PER_PAGE = 1.5


def clamp_page_index(index, page_count):
    if page_count <= 0:
        return 0
    return max(0, min(int(index), page_count - 1))


def page_index_to_percentage(index, page_count):
    if page_count <= 1:
        return 0.0
    return index / (page_count - 1) * 100.0


def page_index_to_absolute(index, page_count, total_absolute_units):
    if page_count <= 0:
        return 0
    return int(index) * int(total_absolute_units) // page_count


def absolute_to_page_index(absolute, total_absolute_units, page_count):
    if total_absolute_units <= 0:
        return 0
    raw = int(absolute) * page_count // int(total_absolute_units)
    return clamp_page_index(raw, page_count)


def describe_time_remaining(index, page_count):
    pages_left = page_count - (index + 1)
    if pages_left <= 0:
        return "Finished!"
    if pages_left == 1:
        return "Last page!"
    minutes = max(1, math.floor(pages_left * MINUTES_PER_PAGE + 0.5))
    if minutes < 60:
        return f"~{minutes} min left"
    hours, mins = divmod(minutes, 60)
    return f"~{hours}h {mins}m left" if mins else f"~{hours}h left"


@dataclass(frozen=True)
class ReadingPosition:
    document_id: str
    page_index: int
    page_count: int
    total_absolute_units: int

    @property
    def percentage(self):
        return page_index_to_percentage(self.page_index, self.page_count)

    @property
    def absolute(self):
        return page_index_to_absolute(self.page_index, self.page_count, self.total_absolute_units)

    @property
    def page_number(self):
        return self.page_index + 1

    def describe(self):
        return f"Page {self.page_number} of {self.page_count}"

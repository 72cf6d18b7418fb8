import re

from core.models import Page, PageSet

PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


def split_words(text):
    return text.split()


def format_page_content(text):
    """Split page text into stripped paragraphs on blank-line boundaries."""
    return tuple(paragraph.strip() for paragraph in PARAGRAPH_BREAK_RE.split(text))


def paginate(text, words_per_page):
    """Split document text into pages of ``words_per_page`` words.

    Always returns at least one page: text without any words becomes a single
    page holding its formatted content, so position math can divide by the
    page count safely.
    """
    words_per_page = int(words_per_page)
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be >= 1, got {words_per_page}")

    words = tuple(split_words(text or ""))
    pages = []
    for start in range(0, len(words), words_per_page):
        end = min(start + words_per_page, len(words))
        page_text = " ".join(words[start:end])
        pages.append(Page(paragraphs=format_page_content(page_text), start_word=start, end_word=end))

    if not pages:
        pages.append(Page(paragraphs=format_page_content(text or ""), start_word=0, end_word=0))

    return PageSet(pages=tuple(pages), words=words, words_per_page=words_per_page)

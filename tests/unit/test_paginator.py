import math

import pytest

from core.paginator import format_page_content, paginate


def _rebuilt_words(page_set):
    words = []
    for index in range(len(page_set)):
        words.extend(page_set.words_for(index))
    return words


def test_paginate_splits_words_into_fixed_pages():
    page_set = paginate("a b c d e", 2)

    assert len(page_set) == 3
    assert [page.text for page in page_set] == ["a b", "c d", "e"]


@pytest.mark.parametrize(
    "text,words_per_page",
    [
        ("one two three four five six seven", 3),
        ("  leading\n\n and   trailing\twhitespace  ", 1),
        ("para one words here\n\npara two words here\n\n\npara three", 4),
        ("single", 50),
    ],
)
def test_pages_partition_the_word_sequence(text, words_per_page):
    page_set = paginate(text, words_per_page)

    assert _rebuilt_words(page_set) == text.split()
    assert len(page_set) == max(1, math.ceil(len(text.split()) / words_per_page))
    for page in page_set.pages[:-1]:
        assert page.word_count == words_per_page


def test_page_slices_are_contiguous():
    page_set = paginate(" ".join(str(i) for i in range(23)), 5)

    previous_end = 0
    for page in page_set:
        assert page.start_word == previous_end
        previous_end = page.end_word
    assert previous_end == 23


def test_empty_text_yields_one_empty_page():
    page_set = paginate("", 10)

    assert len(page_set) == 1
    assert page_set[0].paragraphs == ("",)
    assert page_set[0].word_count == 0


def test_whitespace_only_text_still_yields_one_page():
    page_set = paginate("   \n\n   ", 10)

    assert len(page_set) == 1
    assert page_set.words == ()


def test_chunks_are_rejoined_with_single_spaces():
    page_set = paginate("alpha\n\nbeta   gamma\ndelta", 10)

    assert page_set[0].paragraphs == ("alpha beta gamma delta",)


def test_format_page_content_splits_on_blank_lines():
    assert format_page_content("first\n\n  second \n \n third") == ("first", "second", "third")


def test_paginate_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        paginate("a b c", 0)

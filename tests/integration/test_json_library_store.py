import json

import pytest

from adapters.json_library_store import JsonLibraryStore, atomic_json_write
from core.errors import ParseFailure, PersistenceFailure
from core.models import Chapter


def _write_book(base, name, words):
    path = base / name
    path.write_text(words, encoding="utf-8")
    return path


def test_open_text_document_registers_it_in_library(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    book = _write_book(tmp_path, "moby_dick.txt", " ".join(["whale"] * 1200))

    document = store.open_document(book)

    assert document.title == "moby_dick"
    assert document.file_type == "txt"
    assert document.total_pages == 2
    assert document.current_position == 0

    records = store.list_documents()
    assert [rec["id"] for rec in records] == [document.id]
    assert records[0]["file_path"] == str(book.resolve())


def test_reopening_same_file_keeps_id_and_progress(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    book = _write_book(tmp_path, "short.txt", "one two three")
    first = store.open_document(book)

    store.update_reading_progress(first.id, 42)
    second = store.open_document(book)

    assert second.id == first.id
    assert second.current_position == 42
    assert len(store.list_documents()) == 1


def test_tiny_text_still_counts_as_one_page(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    book = _write_book(tmp_path, "empty.txt", "")

    assert store.open_document(book).total_pages == 1


@pytest.mark.parametrize("name", ["novel.pdf", "README"])
def test_unsupported_files_raise_parse_failure(tmp_path, name):
    store = JsonLibraryStore(tmp_path / "library")
    path = _write_book(tmp_path, name, "content")

    with pytest.raises(ParseFailure) as excinfo:
        store.open_document(path)

    assert excinfo.value.file_path.endswith(name)
    assert store.list_documents() == []


def test_invalid_utf8_raises_parse_failure(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(ParseFailure):
        store.open_document(path)


def test_update_progress_for_unknown_document_fails(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")

    with pytest.raises(PersistenceFailure):
        store.update_reading_progress("missing", 10)


def test_chapter_cache_round_trip_and_delete(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    document = store.open_document(_write_book(tmp_path, "book.txt", "a b c"))
    chapters = [Chapter("c1", "One", 0, 499), Chapter("c2", "Two", 500)]

    assert store.get_chapters(document.id) == []
    store.save_chapters(document.id, chapters)
    assert store.get_chapters(document.id) == chapters

    assert store.delete_document(document.id) is True
    assert store.get_chapters(document.id) == []
    assert store.list_documents() == []
    assert store.delete_document(document.id) is False


def test_corrupt_chapter_cache_raises_persistence_failure(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    store.chapters_dir.mkdir(parents=True)
    (store.chapters_dir / "doc.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(PersistenceFailure):
        store.get_chapters("doc")


def test_search_is_case_insensitive_line_scan(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")
    text = "Call me Ishmael.\nThe WHALE surfaced.\nNothing here\nwhale, whale"
    document = store.open_document(_write_book(tmp_path, "search.txt", text))

    results = store.search_in_document(document.id, "whale")

    assert results == [(1, "The WHALE surfaced."), (3, "whale, whale")]


def test_settings_persist_under_library_root(tmp_path):
    store = JsonLibraryStore(tmp_path / "library")

    assert store.get_settings()["words_per_page"] == 400
    store.save_settings({"words_per_page": 250, "reading_mode": "3d"})

    payload = json.loads(store.settings_path.read_text(encoding="utf-8"))
    assert payload["words_per_page"] == 250
    assert store.get_settings()["reading_mode"] == "3d"


def test_corrupt_index_does_not_block_opening(tmp_path, caplog):
    store = JsonLibraryStore(tmp_path / "library")
    store.root.mkdir(parents=True)
    store.index_path.write_text("not json", encoding="utf-8")

    document = store.open_document(_write_book(tmp_path, "book.txt", "still readable"))

    assert document.content == "still readable"
    assert "opening without library record" in caplog.text


def test_atomic_json_write_leaves_no_temp_file(tmp_path):
    target = tmp_path / "out" / "data.json"

    atomic_json_write(target, {"ok": True})

    assert json.loads(target.read_text(encoding="utf-8")) == {"ok": True}
    assert not (tmp_path / "out" / "data.json.tmp").exists()

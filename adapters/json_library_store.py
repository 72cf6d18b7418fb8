import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from core.errors import PersistenceFailure
from core.models import Chapter
from core.store import LibraryStore
from system import reader_settings
from system.document_loader import load_document

log = logging.getLogger(__name__)

INDEX_NAME = "library.json"
SETTINGS_NAME = "reader_settings.json"
CHAPTERS_DIR = "chapters"


def atomic_json_write(path, payload, indent=None):
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as file:
        json.dump(payload, file, indent=indent)
    os.replace(tmp_path, target)


def _now():
    return datetime.now(timezone.utc).isoformat()


class JsonLibraryStore(LibraryStore):
    """Library index, chapter cache and settings kept as JSON files under ``root``."""

    def __init__(self, root=None):
        self.root = Path(root) if root is not None else reader_settings.resolve_library_dir()
        self.index_path = self.root / INDEX_NAME
        self.settings_path = self.root / SETTINGS_NAME
        self.chapters_dir = self.root / CHAPTERS_DIR

    def _read_index(self):
        if not self.index_path.exists():
            return {}
        try:
            with open(self.index_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError) as exc:
            raise PersistenceFailure("Reading library index", exc) from exc
        documents = data.get("documents") if isinstance(data, dict) else None
        return documents if isinstance(documents, dict) else {}

    def _write_index(self, documents):
        try:
            atomic_json_write(self.index_path, {"documents": documents}, indent=2)
        except OSError as exc:
            raise PersistenceFailure("Writing library index", exc) from exc

    def _chapters_path(self, document_id):
        return self.chapters_dir / f"{document_id}.json"

    def _find_by_path(self, documents, file_path):
        for record in documents.values():
            if record.get("file_path") == file_path:
                return record
        return None

    def _require(self, documents, document_id, operation):
        record = documents.get(document_id)
        if record is None:
            raise PersistenceFailure(operation, f"document {document_id} not found")
        return record

    def open_document(self, file_path):
        resolved = str(Path(file_path).resolve())
        try:
            documents = self._read_index()
        except PersistenceFailure as exc:
            log.warning("%s; opening without library record", exc)
            documents = None

        known = self._find_by_path(documents or {}, resolved)
        document = load_document(
            resolved,
            document_id=known.get("id") if known else None,
            current_position=known.get("current_position", 0) if known else 0,
        )
        if document.chapters:
            try:
                self.save_chapters(document.id, document.chapters)
            except PersistenceFailure as exc:
                log.warning("%s; chapters for %s not cached", exc, document.title)

        if documents is None:
            return document
        now = _now()
        documents[document.id] = {
            "id": document.id,
            "title": document.title,
            "author": document.author,
            "file_path": resolved,
            "file_type": document.file_type,
            "total_pages": document.total_pages,
            "current_position": document.current_position,
            "last_read": now,
            "added_date": known.get("added_date", now) if known else now,
        }
        try:
            self._write_index(documents)
        except PersistenceFailure as exc:
            log.warning("%s; document opened but not added to library", exc)
        return document

    def list_documents(self):
        documents = self._read_index()
        return sorted(documents.values(), key=lambda rec: rec.get("last_read", ""), reverse=True)

    def delete_document(self, document_id):
        documents = self._read_index()
        removed = documents.pop(document_id, None)
        if removed is None:
            return False
        self._write_index(documents)
        self.clear_chapters(document_id)
        return True

    def save_chapters(self, document_id, chapters):
        try:
            atomic_json_write(self._chapters_path(document_id), [ch.to_record() for ch in chapters], indent=2)
        except OSError as exc:
            raise PersistenceFailure("Caching chapters", exc) from exc

    def clear_chapters(self, document_id):
        path = self._chapters_path(document_id)
        if path.exists():
            path.unlink()

    def get_chapters(self, document_id):
        path = self._chapters_path(document_id)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as file:
                records = json.load(file)
        except (OSError, ValueError) as exc:
            raise PersistenceFailure("Reading chapters", exc) from exc
        if not isinstance(records, list):
            return []
        return [Chapter.from_record(rec, order) for order, rec in enumerate(records) if isinstance(rec, dict)]

    def update_reading_progress(self, document_id, absolute_position):
        documents = self._read_index()
        record = self._require(documents, document_id, "Saving reading progress")
        record["current_position"] = int(absolute_position)
        record["last_read"] = _now()
        self._write_index(documents)

    def save_settings(self, settings):
        return reader_settings.save_settings(settings, path=self.settings_path)

    def get_settings(self):
        return reader_settings.load_settings(path=self.settings_path)

    def search_in_document(self, document_id, query):
        documents = self._read_index()
        record = self._require(documents, document_id, "Searching document")
        document = load_document(record["file_path"], document_id=document_id)

        needle = query.lower()
        return [
            (line_num, line)
            for line_num, line in enumerate(document.content.splitlines())
            if needle in line.lower()
        ]

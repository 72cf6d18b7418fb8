from abc import ABC, abstractmethod


class LibraryStore(ABC):
    """Persistence and parsing collaborator consumed by the reading engine."""

    @abstractmethod
    def open_document(self, file_path):
        """Return a Document for ``file_path`` or raise ParseFailure."""
        raise NotImplementedError

    @abstractmethod
    def list_documents(self):
        raise NotImplementedError

    @abstractmethod
    def delete_document(self, document_id):
        raise NotImplementedError

    @abstractmethod
    def get_chapters(self, document_id):
        raise NotImplementedError

    @abstractmethod
    def update_reading_progress(self, document_id, absolute_position):
        raise NotImplementedError

    @abstractmethod
    def save_settings(self, settings):
        raise NotImplementedError

    @abstractmethod
    def get_settings(self):
        raise NotImplementedError

    @abstractmethod
    def search_in_document(self, document_id, query):
        raise NotImplementedError

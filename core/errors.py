class ReaderError(Exception):
    """Base class for reading engine failures."""


class ParseFailure(ReaderError):
    """A document could not be turned into text and metadata."""

    def __init__(self, file_path, reason):
        super().__init__(f"Failed to parse document {file_path}: {reason}")
        self.file_path = str(file_path)
        self.reason = str(reason)


class PersistenceFailure(ReaderError):
    """Settings or reading progress could not be read or written."""

    def __init__(self, operation, reason):
        super().__init__(f"{operation} failed: {reason}")
        self.operation = operation
        self.reason = str(reason)

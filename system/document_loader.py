import re
import uuid
from pathlib import Path

from core.errors import ParseFailure
from core.models import Chapter, Document

SUPPORTED_EXTENSIONS = {".txt"}
WORDS_PER_ABSOLUTE_PAGE = 500
MAX_HEADING_LENGTH = 80

# "Chapter 12", "CHAPTER IV: The Storm", "Part 2", "Book III"
HEADING_RE = re.compile(r"^(?i:chapter|part|book)\s+(\d+|[IVXLCDM]+)(?:[\s.:-].*)?$")


def estimate_total_pages(content):
    return max(1, len(content.split()) // WORDS_PER_ABSOLUTE_PAGE)


def detect_chapters(content):
    """Find heading lines and return chapters keyed by their word offset."""
    headings = []
    offset = 0
    for line in content.splitlines():
        heading = line.strip()
        if heading and len(heading) <= MAX_HEADING_LENGTH and HEADING_RE.match(heading):
            headings.append((heading, offset))
        offset += len(line.split())

    chapters = []
    for number, (title, start) in enumerate(headings, start=1):
        end = headings[number][1] - 1 if number < len(headings) else offset - 1
        chapters.append(Chapter(f"chapter-{number}", title, start, max(start, end)))
    return tuple(chapters)


def load_text_document(file_path, document_id=None, current_position=0):
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseFailure(path, f"not valid UTF-8 text ({exc})") from exc
    except OSError as exc:
        raise ParseFailure(path, f"failed to read text file ({exc})") from exc

    return Document(
        id=document_id or str(uuid.uuid4()),
        title=path.stem or "Unknown Title",
        author=None,
        content=content,
        file_path=path,
        file_type="txt",
        total_pages=estimate_total_pages(content),
        current_position=max(0, int(current_position or 0)),
        chapters=detect_chapters(content),
    )


def load_document(file_path, document_id=None, current_position=0):
    """Dispatch on file extension; only plain text is handled here."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if not suffix:
        raise ParseFailure(path, "invalid file extension")
    if suffix not in SUPPORTED_EXTENSIONS:
        raise ParseFailure(
            path,
            f"unsupported file format '{suffix}' (supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))})",
        )
    return load_text_document(path, document_id=document_id, current_position=current_position)

from pathlib import Path

from ladieval.document.exceptions import DocumentReadError
from ladieval.document.models import DocumentHandle


def load_document(path: Path) -> DocumentHandle:
    """Read a manuscript file from disk into a DocumentHandle.

    Raises:
        DocumentReadError: if the path is missing, not a file, or unreadable.
    """
    if not path.is_file():
        raise DocumentReadError(f"File not found: {path}")
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise DocumentReadError(f"Failed to read {path}: {exc}") from exc
    return DocumentHandle(name=path.name, size_bytes=len(content), content=content)

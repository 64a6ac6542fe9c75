"""Acceptance checks run by the presentation layer before a document is selected."""

from collections.abc import Iterable

from ladieval.config.settings import Settings
from ladieval.document.exceptions import DocumentTooLargeError, UnsupportedDocumentTypeError
from ladieval.document.models import DocumentHandle

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def validate_document(handle: DocumentHandle, settings: Settings) -> DocumentHandle:
    """Check extension and size against configured limits.

    Returns:
        The same handle, so callers can chain into select_document().

    Raises:
        UnsupportedDocumentTypeError: if the extension is not accepted.
        DocumentTooLargeError: if the document exceeds max_document_size_bytes.
    """
    if not is_accepted_extension(handle.name, settings.accepted_extensions):
        raise UnsupportedDocumentTypeError(
            f"'{handle.name}' is not supported. Accepted: "
            f"{', '.join(settings.accepted_extensions)}"
        )
    if handle.size_bytes > settings.max_document_size_bytes:
        raise DocumentTooLargeError(
            f"'{handle.name}' is {format_file_size(handle.size_bytes)}, limit is "
            f"{format_file_size(settings.max_document_size_bytes)}"
        )
    return handle


def is_accepted_extension(file_name: str, accepted: Iterable[str]) -> bool:
    lowered = file_name.lower()
    return any(lowered.endswith(ext.lower()) for ext in accepted)


def format_file_size(size_bytes: int) -> str:
    """Render a byte count as '0 Bytes', '512 Bytes', '1.5 KB', '10 MB'."""
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(size_bytes / 1024**exponent, 2)
    # drop trailing zeros: 10.0 -> 10, 1.50 -> 1.5
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def is_plain_text(content: bytes) -> bool:
    """True when the bytes are NUL-free UTF-8, i.e. readable without an extractor."""
    if b"\x00" in content:
        return False
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True

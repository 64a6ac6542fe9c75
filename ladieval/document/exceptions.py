class DocumentError(Exception):
    """Base exception for document selection errors."""


class UnsupportedDocumentTypeError(DocumentError):
    """Raised when a document's extension is not accepted."""


class DocumentTooLargeError(DocumentError):
    """Raised when a document exceeds the configured size limit."""


class DocumentReadError(DocumentError):
    """Raised when a document cannot be read from disk."""

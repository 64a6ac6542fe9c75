import pytest

from ladieval.document.models import DocumentHandle


@pytest.fixture()
def manuscript() -> DocumentHandle:
    """A small selected manuscript with plain-text content."""
    content = b"Chapter One\n\nThe lighthouse keeper had not spoken in years."
    return DocumentHandle(name="lighthouse.docx", size_bytes=len(content), content=content)


@pytest.fixture()
def other_manuscript() -> DocumentHandle:
    content = b"Prologue\n\nNobody in the valley remembered the flood."
    return DocumentHandle(name="valley.pdf", size_bytes=len(content), content=content)

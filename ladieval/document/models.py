from dataclasses import dataclass, field
from pathlib import PurePath


@dataclass(frozen=True)
class DocumentHandle:
    """An uploaded manuscript: file name, size, and raw bytes."""

    name: str
    size_bytes: int
    content: bytes = field(default=b"", repr=False)

    @property
    def extension(self) -> str:
        """Lower-case file suffix including the dot, or '' when absent."""
        return PurePath(self.name).suffix.lower()

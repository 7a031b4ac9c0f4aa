# Standard library imports
from dataclasses import dataclass


@dataclass(frozen=True)
class MediaUpload:
    """A file handed over by the upload transport."""
    filename: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

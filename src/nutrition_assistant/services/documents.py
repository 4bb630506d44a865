"""Contract for turning uploaded medical documents into text."""

from typing import Protocol


class DocumentTextExtractor(Protocol):
    """Interface for extracting plain text from an uploaded file."""

    def extract_text(self, content: bytes, content_type: str) -> str | None:
        """Return extracted text, or ``None`` when unsupported or unreadable."""

"""Text extraction for images, PDFs, Word documents and plain text."""

import io
import logging
from dataclasses import dataclass

import docx
import pdfplumber
import pytesseract
from PIL import Image

from nutrition_assistant.services.documents import DocumentTextExtractor

IMAGE_SUBTYPES = frozenset({"jpg", "jpeg", "png"})
PDF_SUBTYPES = frozenset({"pdf"})
WORD_SUBTYPES = frozenset(
    {
        "msword",
        "vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
TEXT_SUBTYPES = frozenset({"plain"})

_logger = logging.getLogger(__name__)


@dataclass
class FileDocumentTextExtractor(DocumentTextExtractor):
    """Extractor that dispatches on the MIME subtype of an upload."""

    ocr_language: str = "eng"

    def extract_text(self, content: bytes, content_type: str) -> str | None:
        """Extract and trim text; unsupported types and failures yield ``None``."""
        subtype = _mime_subtype(content_type)
        try:
            if subtype in IMAGE_SUBTYPES:
                return self._extract_image(content).strip()
            if subtype in PDF_SUBTYPES:
                return _extract_pdf(content).strip()
            if subtype in WORD_SUBTYPES:
                return _extract_word(content).strip()
            if subtype in TEXT_SUBTYPES:
                return content.decode("utf-8").strip()
        except Exception:
            _logger.warning(
                "Text extraction failed", exc_info=True, extra={"subtype": subtype}
            )
            return None
        _logger.info("Unsupported document type: %s", content_type)
        return None

    def _extract_image(self, content: bytes) -> str:
        with Image.open(io.BytesIO(content)) as image:
            return pytesseract.image_to_string(
                image.convert("RGB"), lang=self.ocr_language
            )


def _extract_pdf(content: bytes) -> str:
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages)


def _extract_word(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _mime_subtype(content_type: str) -> str:
    """Return the lowercased MIME subtype without parameters."""
    media_type = content_type.split(";", maxsplit=1)[0].strip().lower()
    _, _, subtype = media_type.partition("/")
    return subtype

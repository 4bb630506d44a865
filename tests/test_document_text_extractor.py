"""Tests for document text extraction."""

import io

import docx
import pytest
from PIL import Image

from nutrition_assistant.adapters import document_text_extractor
from nutrition_assistant.adapters.document_text_extractor import (
    FileDocumentTextExtractor,
)


def test_plain_text_is_decoded_and_trimmed() -> None:
    extractor = FileDocumentTextExtractor()

    text = extractor.extract_text(b"  Cholesterol: 210 mg/dL\n", "text/plain")

    assert text == "Cholesterol: 210 mg/dL"


def test_content_type_parameters_are_ignored() -> None:
    extractor = FileDocumentTextExtractor()

    text = extractor.extract_text(b"BP 140/90", "text/plain; charset=utf-8")

    assert text == "BP 140/90"


def test_unsupported_type_returns_none() -> None:
    extractor = FileDocumentTextExtractor()

    assert extractor.extract_text(b"\x00\x01", "application/zip") is None


def test_corrupt_pdf_returns_none() -> None:
    extractor = FileDocumentTextExtractor()

    assert extractor.extract_text(b"not a pdf", "application/pdf") is None


def test_word_document_text_is_extracted() -> None:
    document = docx.Document()
    document.add_paragraph("Patient: Alice")
    document.add_paragraph("Vitamin D: 18 ng/mL")
    buffer = io.BytesIO()
    document.save(buffer)
    extractor = FileDocumentTextExtractor()

    text = extractor.extract_text(
        buffer.getvalue(),
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )

    assert text == "Patient: Alice\nVitamin D: 18 ng/mL"


def test_image_is_sent_to_ocr(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def fake_image_to_string(image: Image.Image, lang: str) -> str:
        seen["mode"] = image.mode
        seen["lang"] = lang
        return "  Glucose 180 mg/dL \n"

    monkeypatch.setattr(
        document_text_extractor.pytesseract, "image_to_string", fake_image_to_string
    )
    buffer = io.BytesIO()
    Image.new("L", (8, 8), color=255).save(buffer, format="PNG")

    text = FileDocumentTextExtractor().extract_text(buffer.getvalue(), "image/png")

    assert text == "Glucose 180 mg/dL"
    assert seen == {"mode": "RGB", "lang": "eng"}

"""Tests for document validation and text extraction."""

from unittest.mock import MagicMock, patch

import pytest

from talentscope.core.errors import UnsupportedInput
from talentscope.core.schemas import DocumentText
from talentscope.requirements.documents import (
    MAX_DOCUMENT_BYTES,
    DocumentReader,
    PdfTextExtractor,
    validate_document,
)


class _StaticExtractor:
    def __init__(self, text: str) -> None:
        self.text = text

    def extract(self, data: bytes, media_type: str) -> DocumentText:
        return DocumentText(text=self.text, confidence=0.8, processing_time_ms=12.5)


class TestValidateDocument:
    @pytest.mark.parametrize(
        ("media_type", "expected"),
        [
            ("application/pdf", "application/pdf"),
            ("Application/PDF; charset=binary", "application/pdf"),
            ("image/png", "image/png"),
            ("image/webp", "image/webp"),
        ],
    )
    def test_accepted_types(self, media_type: str, expected: str) -> None:
        assert validate_document(b"data", media_type) == expected

    @pytest.mark.parametrize("media_type", ["text/plain", "image/gif", "application/msword"])
    def test_rejected_types(self, media_type: str) -> None:
        with pytest.raises(UnsupportedInput, match="Unsupported file type"):
            validate_document(b"data", media_type)

    def test_empty_document(self) -> None:
        with pytest.raises(UnsupportedInput, match="empty"):
            validate_document(b"", "application/pdf")

    def test_size_limit(self) -> None:
        validate_document(b"x" * MAX_DOCUMENT_BYTES, "image/png")
        with pytest.raises(UnsupportedInput, match="Maximum size is 10MB"):
            validate_document(b"x" * (MAX_DOCUMENT_BYTES + 1), "image/png")


class TestDocumentReader:
    def test_image_without_ocr_rejected(self) -> None:
        with pytest.raises(UnsupportedInput, match="No OCR extractor"):
            DocumentReader().read(b"\x89PNG", "image/png")

    def test_image_with_extractor(self) -> None:
        reader = DocumentReader(image_extractor=_StaticExtractor("Hiring a Go developer"))
        result = reader.read(b"\xff\xd8", "image/jpeg")
        assert result.text == "Hiring a Go developer"
        assert result.confidence == 0.8

    def test_empty_extraction_rejected(self) -> None:
        reader = DocumentReader(pdf_extractor=_StaticExtractor("   "))
        with pytest.raises(UnsupportedInput, match="No text could be extracted"):
            reader.read(b"%PDF", "application/pdf")


class TestPdfTextExtractor:
    def test_reads_text_layer(self) -> None:
        pages = [MagicMock(), MagicMock()]
        pages[0].get_text.return_value = "Senior Python role\n"
        pages[1].get_text.return_value = "Remote, EU timezone\n"
        doc = MagicMock()
        doc.__iter__.return_value = iter(pages)
        mock_pymupdf = MagicMock()
        mock_pymupdf.open.return_value = doc

        with patch.dict("sys.modules", {"pymupdf": mock_pymupdf}):
            result = PdfTextExtractor().extract(b"%PDF-1.7")

        assert "Senior Python role" in result.text
        assert "Remote, EU timezone" in result.text
        assert result.confidence == 1.0
        mock_pymupdf.open.assert_called_once_with(stream=b"%PDF-1.7", filetype="pdf")
        doc.close.assert_called_once()

    def test_scanned_pdf_has_zero_confidence(self) -> None:
        doc = MagicMock()
        doc.__iter__.return_value = iter([])
        mock_pymupdf = MagicMock()
        mock_pymupdf.open.return_value = doc

        with patch.dict("sys.modules", {"pymupdf": mock_pymupdf}):
            result = PdfTextExtractor().extract(b"%PDF-1.7")

        assert result.text == ""
        assert result.confidence == 0.0

    def test_unreadable_pdf(self) -> None:
        mock_pymupdf = MagicMock()
        mock_pymupdf.open.side_effect = RuntimeError("cannot open broken document")

        with (
            patch.dict("sys.modules", {"pymupdf": mock_pymupdf}),
            pytest.raises(UnsupportedInput, match="Unreadable PDF"),
        ):
            PdfTextExtractor().extract(b"garbage")

    def test_missing_pymupdf(self) -> None:
        with (
            patch.dict("sys.modules", {"pymupdf": None}),
            pytest.raises(ImportError, match="talentscope\\[pdf\\]"),
        ):
            PdfTextExtractor().extract(b"%PDF-1.7")

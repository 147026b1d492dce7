"""Uploaded-document validation and text extraction.

PDFs with a text layer are read with pymupdf (optional dependency). Image OCR
is an external collaborator: plug one in through ``DocumentReader(image_extractor=...)``.
"""

import time
from typing import Protocol

from talentscope.core.errors import UnsupportedInput
from talentscope.core.schemas import DocumentText

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

PDF_MEDIA_TYPE = "application/pdf"
IMAGE_MEDIA_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
ALLOWED_MEDIA_TYPES = IMAGE_MEDIA_TYPES | {PDF_MEDIA_TYPE}


class DocumentTextExtractor(Protocol):
    def extract(self, data: bytes, media_type: str) -> DocumentText: ...


def validate_document(data: bytes, media_type: str) -> str:
    """Check an upload before extraction and return its normalized media type.

    Raises:
        UnsupportedInput: Empty, larger than 10 MB, or not a PDF/JPEG/PNG/WEBP.
    """
    normalized = media_type.split(";", 1)[0].strip().lower()
    if normalized not in ALLOWED_MEDIA_TYPES:
        msg = f"Unsupported file type: {media_type}. Please upload PDF or image files."
        raise UnsupportedInput(msg)
    if not data:
        msg = "Document is empty"
        raise UnsupportedInput(msg)
    if len(data) > MAX_DOCUMENT_BYTES:
        msg = "File size too large. Maximum size is 10MB."
        raise UnsupportedInput(msg)
    return normalized


class PdfTextExtractor:
    """Reads the embedded text layer of a PDF."""

    def extract(self, data: bytes, media_type: str = PDF_MEDIA_TYPE) -> DocumentText:
        try:
            import pymupdf
        except ImportError:
            msg = (
                "pymupdf is required for PDF extraction. "
                "Install with: pip install 'talentscope[pdf]'"
            )
            raise ImportError(msg) from None

        started = time.perf_counter()
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except Exception as e:
            msg = f"Unreadable PDF document: {e}"
            raise UnsupportedInput(msg) from e

        text_parts: list[str] = []
        for page in doc:
            text_parts.append(page.get_text())
        doc.close()

        text = "\n".join(text_parts).strip()
        elapsed_ms = (time.perf_counter() - started) * 1000
        # A text layer is exact; an empty one means the PDF is a scan and needs OCR.
        return DocumentText(
            text=text,
            confidence=1.0 if text else 0.0,
            processing_time_ms=elapsed_ms,
        )


class DocumentReader:
    """Validates an upload and dispatches it to the extractor for its media type."""

    def __init__(
        self,
        *,
        pdf_extractor: DocumentTextExtractor | None = None,
        image_extractor: DocumentTextExtractor | None = None,
    ) -> None:
        self._pdf_extractor = pdf_extractor or PdfTextExtractor()
        self._image_extractor = image_extractor

    def read(self, data: bytes, media_type: str) -> DocumentText:
        normalized = validate_document(data, media_type)
        if normalized == PDF_MEDIA_TYPE:
            result = self._pdf_extractor.extract(data, normalized)
        elif self._image_extractor is None:
            msg = f"No OCR extractor configured for {normalized}"
            raise UnsupportedInput(msg)
        else:
            result = self._image_extractor.extract(data, normalized)

        if not result.text.strip():
            msg = f"No text could be extracted from the {normalized} document"
            raise UnsupportedInput(msg)
        return result

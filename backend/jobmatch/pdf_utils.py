from io import BytesIO
from typing import Optional

import fitz  # PyMuPDF
from docx import Document

from .exceptions import DocumentParsingError
from .logging_utils import get_logger

logger = get_logger(__name__)

# Legacy .doc files are rejected; python-docx only reads the OOXML format.
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def is_pdf(content_type: Optional[str]) -> bool:
    return bool(content_type) and "pdf" in content_type.lower()


def is_word(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.lower() == DOCX_MEDIA_TYPE


def is_supported_media_type(content_type: Optional[str]) -> bool:
    return is_pdf(content_type) or is_word(content_type)


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """Extract readable text from a PDF file."""
    text = ""
    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            for page in doc:
                text += page.get_text("text")
    except Exception as e:
        logger.error(f"PDF extraction error: {e}")
        raise DocumentParsingError(
            "Error processing PDF file. Please make sure you uploaded a valid PDF."
        ) from e
    return text.strip()


def extract_text_from_docx_bytes(docx_bytes: bytes) -> str:
    """Extract paragraph text from a Word document."""
    try:
        doc = Document(BytesIO(docx_bytes))
    except Exception as e:
        logger.error(f"DOCX extraction error: {e}")
        raise DocumentParsingError(
            "Error processing Word file. Please make sure you uploaded a valid .docx document."
        ) from e
    return "\n".join(paragraph.text for paragraph in doc.paragraphs).strip()


def extract_text(content: bytes, content_type: Optional[str]) -> str:
    if is_pdf(content_type):
        return extract_text_from_pdf_bytes(content)
    if is_word(content_type):
        return extract_text_from_docx_bytes(content)
    raise DocumentParsingError(f"Unsupported document type: {content_type}")

"""
PDF parsing for CV and customer documents.

Extracts text content from PDF files using pypdf.
"""

from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from cvhjelper.exceptions import PDFParseError


def parse_pdf(pdf_content: bytes) -> str:
    """
    Extract text from a PDF file.

    Args:
        pdf_content: Raw bytes of the PDF file

    Returns:
        Extracted text content from all pages

    Raises:
        PDFParseError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(BytesIO(pdf_content))
        text_parts = []

        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)

        return "\n\n".join(text_parts)

    except (PyPdfError, ValueError, KeyError, TypeError, OSError) as e:
        raise PDFParseError(f"Error parsing PDF: {e}") from e


def parse_pdf_from_path(file_path: str) -> str:
    """
    Extract text from a PDF file path.

    Args:
        file_path: Path to the PDF file

    Returns:
        Extracted text content
    """
    with open(file_path, "rb") as f:
        return parse_pdf(f.read())

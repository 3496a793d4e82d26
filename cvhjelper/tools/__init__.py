"""
Tools for CV Hjelper.

- pdf_parser: Extract text from CV and customer PDF files
"""

from cvhjelper.tools.pdf_parser import parse_pdf, parse_pdf_from_path

__all__ = ["parse_pdf", "parse_pdf_from_path"]

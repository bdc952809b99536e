#!/usr/bin/env python3
"""
Quote document text extraction.
Reads plain-text documents directly and PDFs through pdfplumber, with the
pdftotext command-line tool as a second strategy. OCR of scanned images is
out of scope.
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path

import pdfplumber

from .exceptions import TextExtractionError

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {'.txt', '.text', '.csv'}


class TextExtractor:
    """Extracts the text of a quote document given its reference (a local path)."""

    def __init__(self):
        self.pdf_methods = [
            self._extract_with_pdfplumber,
            self._extract_with_pdftotext,
        ]

    def extract_text(self, document_reference: str) -> str:
        """
        Extract text from a quote document.

        Args:
            document_reference: Path to the document

        Returns:
            Extracted text with normalized line breaks

        Raises:
            TextExtractionError: the document is missing or yields no text
        """
        path = Path(document_reference)
        if not path.exists():
            raise TextExtractionError(f"Document not found: {document_reference}")

        if path.suffix.lower() in TEXT_SUFFIXES:
            try:
                text = path.read_text(encoding='utf-8', errors='replace')
            except OSError as e:
                raise TextExtractionError(f"Could not read {document_reference}: {e}") from e
            return self.clean_text(text)

        for method in self.pdf_methods:
            try:
                text = method(str(path))
            except Exception as e:
                logger.warning(f"Method {method.__name__} failed: {e}")
                continue
            if text and text.strip():
                logger.info(f"Successfully extracted {len(text)} characters using {method.__name__}")
                return self.clean_text(text)

        raise TextExtractionError(f"No text could be extracted from {document_reference}")

    def _extract_with_pdfplumber(self, pdf_path: str) -> str:
        pages = []
        with pdfplumber.open(pdf_path) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if not page_text:
                    page_text = page.extract_text(layout=True, x_tolerance=3, y_tolerance=3)
                if page_text:
                    pages.append(page_text)
        return "\n".join(pages)

    def _extract_with_pdftotext(self, pdf_path: str) -> str:
        if shutil.which('pdftotext') is None:
            logger.debug("pdftotext not available")
            return ""

        result = subprocess.run(
            ['pdftotext', '-layout', pdf_path, '-'],
            capture_output=True, text=True,
        )
        if result.returncode != 0:
            logger.warning(f"pdftotext failed: {result.stderr}")
            return ""
        return result.stdout

    @staticmethod
    def clean_text(text: str) -> str:
        """
        Remove CID encoding artifacts and blank lines, keeping one line per text line.
        Line structure matters: line items are read from the line around each dimension.
        """
        if not text:
            return ""

        text = re.sub(r'\(cid:\d+\)', '', text)
        text = text.replace('\r\n', '\n').replace('\r', '\n')

        lines = [re.sub(r'[ \t]+', ' ', line).strip() for line in text.split('\n')]
        return '\n'.join(line for line in lines if line)


def extract_text(document_reference: str) -> str:
    """Convenience function to extract text from a quote document."""
    return TextExtractor().extract_text(document_reference)

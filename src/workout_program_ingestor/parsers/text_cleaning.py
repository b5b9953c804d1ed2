"""
Text Cleaning

Strips the noise that PDF/document text extraction leaves behind before the
text reaches the classifier. Line breaks, tabs and runs of spaces inside a
line are preserved: the segmenter works line by line and the delimited
strategy splits columns on runs of whitespace.
"""

import re
import logging

logger = logging.getLogger(__name__)

# Control characters other than tab and newline
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]')
XMLNS_FRAGMENT = re.compile(r'xmlns[^>]*>', re.IGNORECASE)
URL_PATTERN = re.compile(r'(?:https?://|www\.)[^\s"\']*', re.IGNORECASE)
PDF_TIMESTAMP = re.compile(r'\d{4}/\d{2}/\d{2}-\d{2}:\d{2}:\d{2}')
PDF_OBJECT_TOKENS = re.compile(r'\b\d+\s+0\s+obj\b|\bendstream\b|\bendobj\b', re.IGNORECASE)
BLANK_LINE_RUN = re.compile(r'\n[ \t]*(?:\n[ \t]*)+\n')


def clean_document_text(text: str) -> str:
    """
    Remove extraction artifacts from document text.

    Drops control characters, xmlns fragments, URLs, PDF timestamps and
    PDF object tokens, trims trailing whitespace per line and collapses
    runs of blank lines into a single blank line.
    """
    if not text:
        return ""

    cleaned = text.replace('\r\n', '\n').replace('\r', '\n')
    cleaned = CONTROL_CHARS.sub(' ', cleaned)
    cleaned = XMLNS_FRAGMENT.sub('', cleaned)
    cleaned = URL_PATTERN.sub('', cleaned)
    cleaned = PDF_TIMESTAMP.sub('', cleaned)
    cleaned = PDF_OBJECT_TOKENS.sub('', cleaned)

    cleaned = '\n'.join(line.rstrip() for line in cleaned.split('\n'))
    cleaned = BLANK_LINE_RUN.sub('\n\n', cleaned)
    cleaned = cleaned.strip('\n')

    if len(cleaned) != len(text):
        logger.debug(f"Cleaned document text: {len(text)} -> {len(cleaned)} chars")
    return cleaned


def printable_ratio(text: str) -> float:
    """Share of characters that are printable or ordinary whitespace."""
    if not text:
        return 0.0
    printable = sum(1 for ch in text if ch.isprintable() or ch in '\n\t')
    return printable / len(text)


def is_garbage_text(text: str, min_printable_ratio: float = 0.5) -> bool:
    """True when less than `min_printable_ratio` of the text is printable."""
    return printable_ratio(text) < min_printable_ratio

"""Text normalization for raw Shakespeare corpora."""

import re
import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

# Ordered: collections first, then individual plays
START_MARKERS = (
    "THE COMPLETE WORKS OF WILLIAM SHAKESPEARE",
    "THE SONNETS",
    "VENUS AND ADONIS",
    "THE RAPE OF LUCRECE",
    "THE PHOENIX AND THE TURTLE",
    "A LOVER'S COMPLAINT",
    "HAMLET",
    "MACBETH",
    "ROMEO AND JULIET",
    "JULIUS CAESAR",
)

_LINE_ENDINGS_RE = re.compile(r"\r\n?")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_STAGE_DIRECTION_RE = re.compile(r"\[.*?\]", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_ANNOTATION_RE = re.compile(r"<<.*?>>")
_LICENSE_RE = re.compile(r"THIS ELECTRONIC VERSION.*?PERMISSION\.")


def find_start_marker(text: str, markers: Sequence[str] = START_MARKERS) -> Optional[int]:
    """Return the offset of the first marker (in list order) found in text."""
    for marker in markers:
        index = text.find(marker)
        if index != -1:
            return index
    return None


def _normalize_pass(raw: str, markers: Sequence[str]) -> str:
    text = _LINE_ENDINGS_RE.sub("\n", raw)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _STAGE_DIRECTION_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _ANNOTATION_RE.sub("", text)
    text = _LICENSE_RE.sub("", text)

    start = find_start_marker(text, markers)
    if start is not None:
        text = text[start:]

    return text.strip()


def normalize_text(raw: str, markers: Sequence[str] = START_MARKERS) -> str:
    """Clean a raw corpus into a single-line, annotation-free text.

    Steps run in a fixed order: unify line endings, collapse blank lines,
    strip ``[stage directions]``, collapse whitespace, strip ``<<annotations>>``
    and the licence notice, then drop everything before the first known
    start-of-content marker. Collapsing whitespace discards paragraph
    structure.

    A removal can expose a new match (e.g. a doubled space left by a stripped
    annotation), so passes repeat until the text is stable.
    """
    text = _normalize_pass(raw, markers)
    while True:
        again = _normalize_pass(text, markers)
        if again == text:
            break
        text = again

    logger.debug(f"Normalized {len(raw)} chars to {len(text)} chars")
    return text


def clean_play_text(text: str) -> str:
    """Light cleanup for text scraped from a single play page."""
    text = _WHITESPACE_RE.sub(" ", text).strip()
    text = _STAGE_DIRECTION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()

"""
Best-effort value extraction from loosely structured HTML.

Profile pages on CodeChef and GeeksforGeeks have no public API and no stable
markup, so every lookup takes an ordered list of strategies (CSS selectors or
label patterns) and returns the first hit. Nothing in here raises: a miss is
``None`` and callers supply their own zero value.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup  # type: ignore

logger = logging.getLogger(__name__)

DIGITS_RE = re.compile(r"\d+")
BARE_NUMBER_RE = re.compile(r"^\d+$")

NumberCandidate = Tuple[int, str]


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _first_int(text: str) -> Optional[int]:
    match = DIGITS_RE.search(text.replace(",", ""))
    return int(match.group(0)) if match else None


def extract_number(document: BeautifulSoup, selectors: Sequence[str]) -> Optional[int]:
    """Parse the first integer out of the first selector that matches anything."""
    for selector in selectors:
        try:
            element = document.select_one(selector)
        except Exception:
            # Malformed selector; try the next one
            logger.debug("Selector %r failed", selector, exc_info=True)
            continue
        if element is None:
            continue
        value = _first_int(element.get_text(strip=True))
        if value is not None:
            return value
    return None


def extract_text(document: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    for selector in selectors:
        try:
            element = document.select_one(selector)
        except Exception:
            logger.debug("Selector %r failed", selector, exc_info=True)
            continue
        if element is None:
            continue
        text = element.get_text(" ", strip=True)
        if text:
            return text
    return None


def _labeled_pattern(label: str) -> re.Pattern:
    return re.compile(rf"{re.escape(label)}\s*\(\s*(\d+)\s*\)", re.IGNORECASE)


def extract_labeled_number(
    document: BeautifulSoup, label: str, exclude: Optional[str] = None
) -> Optional[int]:
    """
    Find badge-style ``LABEL (16)`` markup anywhere in the document.

    Elements are scanned innermost first so the tightest element carrying the
    label wins over the ancestors that merely contain it. When ``exclude`` is
    given, elements whose text also mentions that word are skipped.
    """
    pattern = _labeled_pattern(label)
    for element in reversed(document.find_all(True)):
        text = element.get_text(" ", strip=True)
        if "(" not in text:
            continue
        if exclude and exclude.lower() in text.lower():
            continue
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def search_labeled_number(text: str, label: str) -> Optional[int]:
    match = _labeled_pattern(label).search(text)
    return int(match.group(1)) if match else None


def number_candidates(document: BeautifulSoup, keyword: Optional[str] = None) -> List[NumberCandidate]:
    """
    Every element whose whole text is a bare number, paired with the lower-cased
    text of its parent and grandparent.
    """
    candidates: List[NumberCandidate] = []
    for element in document.find_all(True):
        text = element.get_text(" ", strip=True)
        if not BARE_NUMBER_RE.match(text):
            continue
        number = int(text)
        if number >= 10000:
            continue
        parent = element.parent
        grandparent = parent.parent if parent is not None else None
        context = " ".join(
            node.get_text(" ", strip=True) for node in (parent, grandparent) if node is not None
        ).lower()
        if keyword and keyword.lower() not in context:
            continue
        candidates.append((number, context))
    return candidates


def find_number_by_range(candidates: Iterable[NumberCandidate], minimum: int, maximum: int) -> Optional[int]:
    for number, _context in candidates:
        if minimum <= number <= maximum:
            return number
    return None

"""Streaming parser turning arXiv Atom feeds into paper records."""

import re
import threading
from collections.abc import Iterable, Iterator
from datetime import datetime
from enum import Enum
from typing import Any

from core import get_logger

from .constants import (
    ARXIV_NAMESPACE,
    ATOM_NAMESPACE,
    ERROR_EXPECTED_END_TAG,
    ERROR_PARSE_RESULTS,
    ERROR_SEARCH_CANCELLED,
    ERROR_UNEXPECTED_EOF,
    LOG_INVALID_TIMESTAMP,
    LOG_PARSED_PAPER,
)
from .exceptions import ArxivCancelledError, ArxivDecodeError
from .models import Author, Paper
from .scanner import EndTag, QName, StartTag, Text, Token, TokenScanner

logger = get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+", re.ASCII)
_PAGE_WORDS = ("page", "pages")
# Second fractions are optional
_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z")

ENTRY = QName(ATOM_NAMESPACE, "entry")


class EntryField(Enum):
    """Elements of an Atom entry that carry paper metadata."""

    ID = QName(ATOM_NAMESPACE, "id")
    TITLE = QName(ATOM_NAMESPACE, "title")
    SUMMARY = QName(ATOM_NAMESPACE, "summary")
    UPDATED = QName(ATOM_NAMESPACE, "updated")
    PUBLISHED = QName(ATOM_NAMESPACE, "published")
    AUTHOR = QName(ATOM_NAMESPACE, "author")
    CATEGORY = QName(ATOM_NAMESPACE, "category")
    DOI = QName(ARXIV_NAMESPACE, "doi")
    JOURNAL_REF = QName(ARXIV_NAMESPACE, "journal_ref")
    COMMENT = QName(ARXIV_NAMESPACE, "comment")

    @classmethod
    def lookup(cls, name: QName) -> "EntryField | None":
        try:
            return cls(name)
        except ValueError:
            return None


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip(" ")


def count_pages(comment: str) -> int:
    """Guess the page count from an author comment.

    Looks for a number directly followed by "page" or "pages", e.g.
    "12 pages, 4 figures". The last match wins.

    Returns:
        Number of pages, or 0 if the comment does not state it
    """
    pages = 0
    words = comment.split()
    for i, word in enumerate(words[1:], start=1):
        if word.strip(",").lower() not in _PAGE_WORDS:
            continue
        previous = words[i - 1]
        if previous.isascii() and previous.isdigit():
            pages = int(previous)
    return pages


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None if it is not one."""
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    logger.debug(LOG_INVALID_TIMESTAMP.format(value))
    return None


def _cancellable(tokens: Iterator[Token], cancel: threading.Event) -> Iterator[Token]:
    for token in tokens:
        if cancel.is_set():
            raise ArxivCancelledError(ERROR_SEARCH_CANCELLED)
        yield token


class ArxivParser:
    """Parser for arXiv API search results.

    The parser walks a single token stream. Each entry is read by
    ``parse_entry`` starting right after its start tag, and each author block
    by ``parse_author``; both stop at their own end tag or at the end of the
    stream. Elements that are not recognized are skipped without descending
    into them.
    """

    def parse(
        self, chunks: Iterable[bytes], cancel: threading.Event | None = None
    ) -> Iterator[Paper]:
        """Parse a raw response body.

        Args:
            chunks: Response body as byte chunks
            cancel: Event that stops parsing once set

        Yields:
            Papers in document order
        """
        return self.iter_papers(TokenScanner(chunks), cancel=cancel)

    def iter_papers(
        self, tokens: Iterator[Token], cancel: threading.Event | None = None
    ) -> Iterator[Paper]:
        """Yield a paper for every Atom entry in the token stream.

        Raises:
            ArxivDecodeError: If the stream is malformed
            ArxivCancelledError: If ``cancel`` is set while parsing
        """
        if cancel is not None:
            tokens = _cancellable(tokens, cancel)

        for token in tokens:
            if isinstance(token, StartTag) and token.name == ENTRY:
                paper = self.parse_entry(tokens)
                logger.debug(LOG_PARSED_PAPER.format(paper.arxiv_id, paper.title))
                yield paper

    def parse_entry(self, tokens: Iterator[Token]) -> Paper:
        """Read one entry, positioned right after its start tag."""
        values: dict[str, Any] = {"categories": [], "authors": []}

        for token in tokens:
            if isinstance(token, EndTag):
                if token.name.local == ENTRY.local:
                    break
                continue
            if not isinstance(token, StartTag):
                continue

            field = EntryField.lookup(token.name)
            if field is None:
                continue

            if field is EntryField.ID:
                values["url"] = self._read_text(tokens)
            elif field is EntryField.TITLE:
                values["title"] = normalize_whitespace(self._read_text(tokens))
            elif field is EntryField.SUMMARY:
                values["summary"] = normalize_whitespace(self._read_text(tokens))
            elif field is EntryField.UPDATED:
                values["updated"] = parse_timestamp(self._read_text(tokens))
            elif field is EntryField.PUBLISHED:
                values["published"] = parse_timestamp(self._read_text(tokens))
            elif field is EntryField.AUTHOR:
                values["authors"].append(self.parse_author(tokens))
            elif field is EntryField.CATEGORY:
                term = token.get("term")
                if term is not None:
                    values["categories"].append(term)
                self._expect_end(next(tokens, None))
            elif field is EntryField.DOI:
                values["doi"] = self._read_text(tokens)
            elif field is EntryField.JOURNAL_REF:
                values["journal"] = self._read_text(tokens)
            elif field is EntryField.COMMENT:
                values["comment"] = self._read_text(tokens)
                values["pages"] = count_pages(values["comment"])

        return Paper(**values)

    def parse_author(self, tokens: Iterator[Token]) -> Author:
        """Read one author block, positioned right after its start tag.

        Fields are matched by local name only: arXiv puts ``affiliation`` in
        its own namespace while ``name`` is an Atom element.
        """
        values: dict[str, str] = {}

        for token in tokens:
            if isinstance(token, EndTag):
                if token.name.local == "author":
                    break
                continue
            if not isinstance(token, StartTag):
                continue

            if token.name.local == "name":
                values["name"] = self._read_text(tokens)
            elif token.name.local == "affiliation":
                values["affiliation"] = self._read_text(tokens)

        return Author(**values)

    def _read_text(self, tokens: Iterator[Token]) -> str:
        """Read the text of a leaf element up to and including its end tag.

        An element without text yields an empty string.
        """
        token = next(tokens, None)
        value = ""
        if isinstance(token, Text):
            value = token.data
            token = next(tokens, None)
        self._expect_end(token)
        return value

    @staticmethod
    def _expect_end(token: Token | None) -> None:
        if token is None:
            raise ArxivDecodeError(ERROR_PARSE_RESULTS.format(ERROR_UNEXPECTED_EOF))
        if not isinstance(token, EndTag):
            raise ArxivDecodeError(ERROR_PARSE_RESULTS.format(ERROR_EXPECTED_END_TAG))

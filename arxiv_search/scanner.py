"""Streaming XML tokenizer for arXiv API responses."""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, TypeAlias
from xml.parsers import expat

from .constants import ERROR_PARSE_RESULTS
from .exceptions import ArxivDecodeError

# expat joins namespace URI and local name with this separator
_NS_SEPARATOR = " "


class QName(NamedTuple):
    """Namespace-qualified XML name."""

    space: str
    local: str

    @classmethod
    def from_expat(cls, name: str) -> "QName":
        space, _, local = name.rpartition(_NS_SEPARATOR)
        return cls(space, local)


@dataclass(frozen=True)
class StartTag:
    """Start of an element."""

    name: QName
    attrs: dict[QName, str] = field(default_factory=dict)

    def get(self, local: str, default: str | None = None) -> str | None:
        """Return the first attribute with the given local name."""
        for attr_name, value in self.attrs.items():
            if attr_name.local == local:
                return value
        return default


@dataclass(frozen=True)
class EndTag:
    """End of an element."""

    name: QName


@dataclass(frozen=True)
class Text:
    """Character data between two tags."""

    data: str


Token: TypeAlias = StartTag | EndTag | Text


class TokenScanner(Iterator[Token]):
    """Single-pass iterator of XML tokens read from a byte stream.

    Chunks are pulled from the underlying stream only when the tokens parsed
    so far have been consumed. Adjacent character data is delivered as one
    ``Text`` token. Exhaustion of the iterator marks the end of the stream.

    Raises:
        ArxivDecodeError: If the markup is not well-formed
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = iter(chunks)
        self._pending: deque[Token] = deque()
        self._text: list[str] = []
        self._error: ArxivDecodeError | None = None
        self._started = False
        self._done = False

        self._parser = expat.ParserCreate(namespace_separator=_NS_SEPARATOR)
        self._parser.buffer_text = True
        self._parser.StartElementHandler = self._on_start
        self._parser.EndElementHandler = self._on_end
        self._parser.CharacterDataHandler = self._on_text

    def __iter__(self) -> "TokenScanner":
        return self

    def __next__(self) -> Token:
        while not self._pending:
            if self._error is not None:
                raise self._error
            if self._done:
                raise StopIteration
            self._feed()
        return self._pending.popleft()

    def _feed(self) -> None:
        chunk = next(self._chunks, None)
        try:
            if chunk is None:
                self._done = True
                # An empty body is an empty result, not a syntax error
                if self._started:
                    self._parser.Parse(b"", True)
            elif not self._started:
                # Whitespace may precede the XML declaration
                chunk = chunk.lstrip()
                if chunk:
                    self._started = True
                    self._parser.Parse(chunk, False)
            else:
                self._parser.Parse(chunk, False)
        except expat.ExpatError as e:
            self._done = True
            self._error = ArxivDecodeError(ERROR_PARSE_RESULTS.format(e))
        # Text may continue in the next chunk
        if self._done:
            self._flush_text()

    def _flush_text(self) -> None:
        if self._text:
            self._pending.append(Text("".join(self._text)))
            self._text.clear()

    def _on_start(self, name: str, attrs: dict[str, str]) -> None:
        self._flush_text()
        self._pending.append(
            StartTag(
                QName.from_expat(name),
                {QName.from_expat(key): value for key, value in attrs.items()},
            )
        )

    def _on_end(self, name: str) -> None:
        self._flush_text()
        self._pending.append(EndTag(QName.from_expat(name)))

    def _on_text(self, data: str) -> None:
        self._text.append(data)

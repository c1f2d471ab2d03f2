"""Multipart body scanner.

Walks a fully buffered multipart body with a small state machine::

    PREAMBLE -> PART_HEADERS -> PART_BODY -> (PART_HEADERS | END)

Part bodies are exact byte slices of the input buffer.
"""

from collections.abc import Iterator
from enum import StrEnum

from app.core.errors import MalformedPartHeadersError, NoPartsError, TruncatedMultipartError
from app.core.logger import LogIcon, logger
from app.models.core import Part

CRLF = b"\r\n"
HEADER_SEPARATOR = CRLF + CRLF
CLOSE_MARKER = b"--"
TRANSPORT_PADDING = b" \t"
HEADER_ENCODING = "latin-1"


class ScanState(StrEnum):
    PREAMBLE = "preamble"
    PART_HEADERS = "part_headers"
    PART_BODY = "part_body"
    END = "end"


class _Delimiter:
    """A located delimiter: where it starts, where the next part begins, and whether it closes the body."""

    __slots__ = ("start", "end", "terminal")

    def __init__(self, start: int, end: int, terminal: bool) -> None:
        self.start = start
        self.end = end
        self.terminal = terminal


class MultipartScanner:
    """Iterate the parts of a multipart body delimited by ``--boundary``."""

    def __init__(self, data: bytes, boundary: bytes) -> None:
        if not boundary:
            raise ValueError("Boundary must not be empty")
        self._data = bytes(data)
        self._dash_boundary = CLOSE_MARKER + boundary
        self._position = 0
        self._headers = ""
        self.state = ScanState.PREAMBLE

    def __iter__(self) -> Iterator[Part]:
        while self.state is not ScanState.END:
            match self.state:
                case ScanState.PREAMBLE:
                    self._skip_preamble()
                case ScanState.PART_HEADERS:
                    self._read_headers()
                case ScanState.PART_BODY:
                    yield self._read_body()

    def _match_tail(self, start: int) -> _Delimiter | None:
        """Check what follows the dash-boundary found at ``start``.

        Returns None when the bytes there cannot belong to a delimiter line.
        """
        data = self._data
        pos = start + len(self._dash_boundary)

        if data[pos : pos + 2] == CLOSE_MARKER:
            return _Delimiter(start, pos + 2, terminal=True)

        while pos < len(data) and data[pos] in TRANSPORT_PADDING:
            pos += 1

        tail = data[pos : pos + 2]
        if tail == CRLF:
            return _Delimiter(start, pos + 2, terminal=False)
        if len(tail) < 2 and (CRLF.startswith(tail) or CLOSE_MARKER.startswith(tail)):
            raise TruncatedMultipartError("Multipart body ends inside a boundary line")
        return None

    def _find_delimiter(self, start: int, needle: bytes) -> _Delimiter | None:
        """Find the next valid delimiter whose ``needle`` occurrence starts at or after ``start``."""
        offset = len(needle) - len(self._dash_boundary)
        index = self._data.find(needle, start)
        while index >= 0:
            if (found := self._match_tail(index + offset)) is not None:
                found.start = index
                return found
            index = self._data.find(needle, index + 1)
        return None

    def _skip_preamble(self) -> None:
        found = self._find_delimiter(0, self._dash_boundary)
        if found is None:
            raise NoPartsError("No multipart boundary found in request body")
        if found.terminal:
            raise NoPartsError("Multipart body closes before its first part")

        logger.debug("Preamble skipped", icon=LogIcon.DETECTION, preamble_bytes=found.start)
        self._position = found.end
        self.state = ScanState.PART_HEADERS

    def _read_headers(self) -> None:
        data = self._data
        start = self._position

        if data[start : start + 2] == CRLF:
            self._headers = ""
            self._position = start + 2
            self.state = ScanState.PART_BODY
            return

        end = data.find(HEADER_SEPARATOR, start)
        next_delimiter = data.find(CRLF + self._dash_boundary, start)
        if end < 0 or 0 <= next_delimiter < end:
            raise MalformedPartHeadersError("Part header block is not terminated by a blank line")

        self._headers = data[start:end].decode(HEADER_ENCODING)
        self._position = end + len(HEADER_SEPARATOR)
        self.state = ScanState.PART_BODY

    def _read_body(self) -> Part:
        body_start = self._position
        # The blank line closing the headers may double as the delimiter's CRLF for an empty body
        found = self._find_delimiter(body_start - len(CRLF), CRLF + self._dash_boundary)
        if found is None:
            raise TruncatedMultipartError("Multipart body ends before the closing boundary")

        part = Part(headers=self._headers, body=self._data[body_start : max(found.start, body_start)])
        logger.debug("Part scanned", icon=LogIcon.FILE, headers=part.headers, body_bytes=len(part.body))

        self._position = found.end
        self.state = ScanState.END if found.terminal else ScanState.PART_HEADERS
        return part


def scan(data: bytes, boundary: bytes) -> Iterator[Part]:
    """Yield every part of ``data`` in encounter order."""
    return iter(MultipartScanner(data, boundary))


def first_part(data: bytes, boundary: bytes) -> Part:
    """Scan the whole body and return its first part.

    Later parts are validated but discarded.
    """
    parts = list(scan(data, boundary))
    return parts[0]

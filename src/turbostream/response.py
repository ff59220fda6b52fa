"""Incremental HTTP/1.1 response parser.

The transport may split a response anywhere, including inside the status
line or a header. ``ResponseParser.feed`` accepts each fragment as it
arrives and keeps every partial value in accumulator fields until the
delimiter that ends it has been seen.

Completion rules:

* chunked bodies complete when the zero-size chunk is announced;
* any other body completes only when the caller reports the end of the
  stream with ``feed_eof()``. ``Content-Length`` is not enforced.
"""

import enum
import re
import types

from .chunked import ChunkedBodyDecoder
from .errors import IncompleteResponseError, MalformedStatusLineError
from .log import get_logger

logger = get_logger(__name__)

_STATUS_LINE_PATTERN = re.compile(r"HTTP/1\.1 ([0-9]+) (.+)", re.DOTALL)

DEFAULT_CHARSET = "utf-8"


class ResponseState(enum.IntEnum):
    AWAITING_STATUS_LINE = 0
    AWAITING_STATUS_LINE_END = 1
    AWAITING_HEADER_NAME = 2
    AWAITING_HEADER_SPACE = 3
    AWAITING_HEADER_VALUE = 4
    AWAITING_HEADER_LINE_END = 5
    AWAITING_HEADER_BLOCK_END = 6
    AWAITING_BODY = 7


class ResponseRecord:
    __slots__ = ("body", "headers", "status_code", "status_text")

    def __init__(self, status_code, status_text, headers, body):
        object.__setattr__(self, "status_code", status_code)
        object.__setattr__(self, "status_text", status_text)
        object.__setattr__(self, "headers", types.MappingProxyType(dict(headers)))
        object.__setattr__(self, "body", body)

    def __setattr__(self, name, value):
        msg = f"ResponseRecord is immutable (cannot set {name!r})"
        raise AttributeError(msg)

    def __eq__(self, other):
        if not isinstance(other, ResponseRecord):
            return NotImplemented
        return (
            self.status_code == other.status_code
            and self.status_text == other.status_text
            and self.headers == other.headers
            and self.body == other.body
        )

    __hash__ = None

    def __repr__(self):
        return f"ResponseRecord({self.status_code} {self.status_text!r}, headers={len(self.headers)}, body={len(self.body)} chars)"

    @property
    def charset(self):
        content_type = self.headers.get("Content-Type", "")
        for param in content_type.split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return None

    def decode_body(self, charset=None):
        """Re-decode a body that was fed as bytes.

        Byte fragments are decoded as ISO-8859-1 on the way in so chunk sizes
        count octets; this turns the octets back into text using ``charset``,
        the response's declared charset, or UTF-8.
        """
        charset = charset or self.charset or DEFAULT_CHARSET
        return self.body.encode("latin-1").decode(charset, errors="replace")


class ResponseParser:
    __slots__ = (
        "_record",
        "body_decoder",
        "body_parts",
        "eof",
        "header_name",
        "header_value",
        "headers",
        "state",
        "status_line",
    )

    def __init__(self):
        self.state = ResponseState.AWAITING_STATUS_LINE
        self.status_line = []
        self.header_name = []
        self.header_value = []
        self.headers = {}
        self.body_decoder = None
        self.body_parts = []
        self.eof = False
        self._record = None

    def feed(self, fragment):
        if isinstance(fragment, (bytes, bytearray, memoryview)):
            fragment = bytes(fragment).decode("latin-1")
        if not fragment:
            return
        was_complete = self.is_complete()
        state = self.state
        step = self._step
        for c in fragment:
            state = step(state, c)
        self.state = state
        if not was_complete and self.is_complete():
            logger.debug("Chunked response complete after %d header(s)", len(self.headers))

    def feed_eof(self):
        self.eof = True
        if self.body_decoder is None and self.state == ResponseState.AWAITING_BODY:
            logger.debug("Response complete at end of stream (%d body chars)", len(self.body_parts))

    def is_complete(self):
        if self.body_decoder is not None:
            return self.body_decoder.is_finished()
        return self.eof and self.state == ResponseState.AWAITING_BODY

    def result(self):
        if self._record is not None:
            return self._record
        if not self.is_complete():
            msg = f"Response is not complete (parser state {self.state.name})"
            raise IncompleteResponseError(msg)
        status_line = "".join(self.status_line)
        match = _STATUS_LINE_PATTERN.match(status_line)
        if match is None:
            raise MalformedStatusLineError(status_line)
        if self.body_decoder is not None:
            body = self.body_decoder.content()
        else:
            body = "".join(self.body_parts)
        self._record = ResponseRecord(int(match.group(1)), match.group(2), self.headers, body)
        return self._record

    def _step(self, state, c):
        if state == ResponseState.AWAITING_BODY:
            if self.body_decoder is not None:
                self.body_decoder.receive(c)
            else:
                self.body_parts.append(c)
            return state
        if state == ResponseState.AWAITING_STATUS_LINE:
            if c == "\r":
                return ResponseState.AWAITING_STATUS_LINE_END
            if c == "\n":
                return ResponseState.AWAITING_HEADER_NAME
            self.status_line.append(c)
            return state
        if state == ResponseState.AWAITING_STATUS_LINE_END:
            if c == "\n":
                return ResponseState.AWAITING_HEADER_NAME
            return state
        if state == ResponseState.AWAITING_HEADER_NAME:
            if c == ":":
                return ResponseState.AWAITING_HEADER_SPACE
            if c == "\r":
                return ResponseState.AWAITING_HEADER_BLOCK_END
            self.header_name.append(c)
            return state
        if state == ResponseState.AWAITING_HEADER_SPACE:
            if c == " ":
                return ResponseState.AWAITING_HEADER_VALUE
            return state
        if state == ResponseState.AWAITING_HEADER_VALUE:
            if c == "\r":
                self.headers["".join(self.header_name)] = "".join(self.header_value)
                self.header_name.clear()
                self.header_value.clear()
                return ResponseState.AWAITING_HEADER_LINE_END
            self.header_value.append(c)
            return state
        if state == ResponseState.AWAITING_HEADER_LINE_END:
            if c == "\n":
                return ResponseState.AWAITING_HEADER_NAME
            return state
        # AWAITING_HEADER_BLOCK_END
        if c == "\n":
            if self.headers.get("Transfer-Encoding") == "chunked":
                self.body_decoder = ChunkedBodyDecoder()
            return ResponseState.AWAITING_BODY
        return state

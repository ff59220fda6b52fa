"""Chunked transfer-encoding decoder.

A chunked body is a run of ``<hex-size>\\r\\n<size chars>\\r\\n`` units closed
by a zero-size chunk ``0\\r\\n\\r\\n``. The decoder is fed one character at a
time and can be suspended between any two characters.
"""

import enum

from .errors import ChunkSizeError

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class ChunkState(enum.IntEnum):
    AWAITING_LENGTH = 0
    AWAITING_LENGTH_LINE_END = 1
    READING_CHUNK = 2
    AWAITING_CHUNK_TRAILER_CR = 3
    AWAITING_CHUNK_TRAILER_LF = 4
    AWAITING_FINAL_CR = 5
    AWAITING_FINAL_LF = 6
    DONE = 7


class ChunkedBodyDecoder:
    __slots__ = ("_content", "finished", "remaining", "size", "state")

    def __init__(self):
        self.state = ChunkState.AWAITING_LENGTH
        self.size = 0
        self.remaining = 0
        self.finished = False
        self._content = []

    def is_finished(self):
        return self.finished

    def content(self):
        return "".join(self._content)

    def receive(self, c):
        self.state = self._step(self.state, c)

    def receive_all(self, data):
        step = self._step
        state = self.state
        for c in data:
            state = step(state, c)
        self.state = state

    def _step(self, state, c):
        if state == ChunkState.AWAITING_LENGTH:
            if c == "\r":
                if self.size == 0:
                    self.finished = True
                self.remaining = self.size
                self.size = 0
                return ChunkState.AWAITING_LENGTH_LINE_END
            if c not in _HEX_DIGITS:
                raise ChunkSizeError(c)
            self.size = self.size * 16 + int(c, 16)
            return state
        if state == ChunkState.AWAITING_LENGTH_LINE_END:
            if c != "\n":
                return state
            if self.finished:
                return ChunkState.AWAITING_FINAL_CR
            return ChunkState.READING_CHUNK
        if state == ChunkState.READING_CHUNK:
            self._content.append(c)
            self.remaining -= 1
            if self.remaining == 0:
                return ChunkState.AWAITING_CHUNK_TRAILER_CR
            return state
        if state == ChunkState.AWAITING_CHUNK_TRAILER_CR:
            if c == "\r":
                return ChunkState.AWAITING_CHUNK_TRAILER_LF
            return state
        if state == ChunkState.AWAITING_CHUNK_TRAILER_LF:
            if c == "\n":
                return ChunkState.AWAITING_LENGTH
            return state
        if state == ChunkState.AWAITING_FINAL_CR:
            if c == "\r":
                return ChunkState.AWAITING_FINAL_LF
            return state
        if state == ChunkState.AWAITING_FINAL_LF:
            if c == "\n":
                return ChunkState.DONE
            return state
        # DONE: anything after the closing CRLF is ignored.
        return state

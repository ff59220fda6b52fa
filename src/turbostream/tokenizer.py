import enum

from .errors import StrictModeError
from .log import get_logger
from .tokens import EOF, CharacterTokens, EOFToken, ParseError, Tag

logger = get_logger(__name__)

_WHITESPACE = frozenset("\t\n\f ")
_ATTR_NAME_ERROR_CHARS = frozenset("\"'<")
_UNQUOTED_VALUE_ERROR_CHARS = frozenset("\"'<=`")


def _is_ascii_alpha(c):
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


class TokenizerState(enum.IntEnum):
    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    ATTRIBUTE_NAME = 5
    AFTER_ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE_QUOTED = 8
    ATTRIBUTE_VALUE_SINGLE_QUOTED = 9
    ATTRIBUTE_VALUE_UNQUOTED = 10
    AFTER_ATTRIBUTE_VALUE_QUOTED = 11
    SELF_CLOSING_START_TAG = 12


class TokenizerOpts:
    __slots__ = ("collect_errors", "discard_bom", "legacy_quoting", "strict")

    def __init__(self, discard_bom=True, collect_errors=False, strict=False, legacy_quoting=False):
        self.discard_bom = bool(discard_bom)
        self.collect_errors = bool(collect_errors)
        self.strict = bool(strict)
        # Continue single-quoted values (and characters glued to a closing
        # quote) in the double-quoted state, as older documents were parsed.
        self.legacy_quoting = bool(legacy_quoting)


class Tokenizer:
    """Character-at-a-time HTML tokenizer.

    Tokens are pushed to ``sink.process_token`` as soon as they are complete.
    Input can arrive in any number of ``feed`` calls; ``close`` feeds the EOF
    sentinel, which flushes the trailing text run and emits ``EOFToken``.
    """

    __slots__ = (
        "attr_name",
        "attr_pending",
        "attr_value",
        "column",
        "current_tag",
        "errors",
        "line",
        "opts",
        "sink",
        "started",
        "state",
        "text_buffer",
    )

    def __init__(self, sink, opts=None):
        self.sink = sink
        self.opts = opts or TokenizerOpts()
        self.errors = []
        self.reset()

    def reset(self):
        self.state = TokenizerState.DATA
        self.started = False
        self.line = 1
        self.column = 0
        self.text_buffer = []
        self.current_tag = None
        self.attr_name = []
        self.attr_value = []
        self.attr_pending = False
        self.errors.clear()

    def run(self, html):
        self.feed(html or "")
        self.close()

    def feed(self, chunk):
        if not chunk:
            return
        if not self.started:
            self.started = True
            if chunk[0] == "\ufeff" and self.opts.discard_bom:
                chunk = chunk[1:]
        state = self.state
        step = self._step
        for c in chunk:
            if c == "\n":
                self.line += 1
                self.column = 0
            else:
                self.column += 1
            state = step(state, c)
        self.state = state

    def close(self):
        self.state = self._step(self.state, EOF)

    # ---------------------
    # Transition function
    # ---------------------

    def _step(self, state, c):
        """Consume one character (or EOF) in ``state`` and return the next state."""
        if state == TokenizerState.DATA:
            if c is EOF:
                self._flush_text()
                self._emit_token(EOFToken())
                return state
            if c == "<":
                self._flush_text()
                return TokenizerState.TAG_OPEN
            self.text_buffer.append(c)
            return state

        if state == TokenizerState.TAG_OPEN:
            if c is EOF:
                self._emit_error("eof-before-tag-name")
                self.text_buffer.append("<")
                return self._step(TokenizerState.DATA, c)
            if c == "/":
                return TokenizerState.END_TAG_OPEN
            if _is_ascii_alpha(c):
                self.current_tag = Tag(Tag.START, "")
                return self._step(TokenizerState.TAG_NAME, c)
            self._emit_error("invalid-first-character-of-tag-name")
            self.text_buffer.append("<")
            return self._step(TokenizerState.DATA, c)

        if state == TokenizerState.END_TAG_OPEN:
            if c is EOF:
                self._emit_error("eof-before-tag-name")
                self.text_buffer.append("</")
                return self._step(TokenizerState.DATA, c)
            if _is_ascii_alpha(c):
                self.current_tag = Tag(Tag.END, "")
                return self._step(TokenizerState.TAG_NAME, c)
            if c == ">":
                self._emit_error("missing-end-tag-name")
                return TokenizerState.DATA
            self._emit_error("invalid-first-character-of-end-tag-name")
            self.text_buffer.append("</")
            return self._step(TokenizerState.DATA, c)

        if state == TokenizerState.TAG_NAME:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c in _WHITESPACE:
                return TokenizerState.BEFORE_ATTRIBUTE_NAME
            if c == "/":
                return TokenizerState.SELF_CLOSING_START_TAG
            if c == ">":
                return self._emit_current_tag()
            self.current_tag.name += c
            return state

        if state == TokenizerState.BEFORE_ATTRIBUTE_NAME:
            if c is EOF or c == "/" or c == ">":
                return self._step(TokenizerState.AFTER_ATTRIBUTE_NAME, c)
            if c in _WHITESPACE:
                return state
            if c == "=":
                self._emit_error("unexpected-equals-sign-before-attribute-name")
                return state
            self._start_attribute()
            return self._step(TokenizerState.ATTRIBUTE_NAME, c)

        if state == TokenizerState.ATTRIBUTE_NAME:
            if c is EOF or c in _WHITESPACE or c == "/" or c == ">":
                return self._step(TokenizerState.AFTER_ATTRIBUTE_NAME, c)
            if c == "=":
                return TokenizerState.BEFORE_ATTRIBUTE_VALUE
            if c in _ATTR_NAME_ERROR_CHARS:
                self._emit_error("unexpected-character-in-attribute-name")
            self.attr_name.append(c)
            return state

        if state == TokenizerState.AFTER_ATTRIBUTE_NAME:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c in _WHITESPACE:
                return state
            if c == "/":
                self._finish_attribute()
                return TokenizerState.SELF_CLOSING_START_TAG
            if c == "=":
                return TokenizerState.BEFORE_ATTRIBUTE_VALUE
            if c == ">":
                return self._emit_current_tag()
            self._finish_attribute()
            self._start_attribute()
            return self._step(TokenizerState.ATTRIBUTE_NAME, c)

        if state == TokenizerState.BEFORE_ATTRIBUTE_VALUE:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c in _WHITESPACE:
                return state
            if c == '"':
                return TokenizerState.ATTRIBUTE_VALUE_DOUBLE_QUOTED
            if c == "'":
                return TokenizerState.ATTRIBUTE_VALUE_SINGLE_QUOTED
            if c == ">":
                self._emit_error("missing-attribute-value")
                return self._emit_current_tag()
            return self._step(TokenizerState.ATTRIBUTE_VALUE_UNQUOTED, c)

        if state == TokenizerState.ATTRIBUTE_VALUE_DOUBLE_QUOTED:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c == '"':
                self._finish_attribute()
                return TokenizerState.AFTER_ATTRIBUTE_VALUE_QUOTED
            self.attr_value.append(c)
            return state

        if state == TokenizerState.ATTRIBUTE_VALUE_SINGLE_QUOTED:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c == "'":
                self._finish_attribute()
                return TokenizerState.AFTER_ATTRIBUTE_VALUE_QUOTED
            self.attr_value.append(c)
            if self.opts.legacy_quoting:
                return TokenizerState.ATTRIBUTE_VALUE_DOUBLE_QUOTED
            return state

        if state == TokenizerState.AFTER_ATTRIBUTE_VALUE_QUOTED:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c in _WHITESPACE:
                return TokenizerState.BEFORE_ATTRIBUTE_NAME
            if c == "/":
                return TokenizerState.SELF_CLOSING_START_TAG
            if c == ">":
                return self._emit_current_tag()
            self._emit_error("missing-whitespace-between-attributes")
            if self.opts.legacy_quoting:
                self._reopen_attribute()
                self.attr_value.append(c)
                return TokenizerState.ATTRIBUTE_VALUE_DOUBLE_QUOTED
            return self._step(TokenizerState.BEFORE_ATTRIBUTE_NAME, c)

        if state == TokenizerState.ATTRIBUTE_VALUE_UNQUOTED:
            if c is EOF:
                return self._discard_tag_at_eof()
            if c in _WHITESPACE:
                self._finish_attribute()
                return TokenizerState.BEFORE_ATTRIBUTE_NAME
            if c == "/":
                self._finish_attribute()
                return TokenizerState.SELF_CLOSING_START_TAG
            if c == ">":
                return self._emit_current_tag()
            if c in _UNQUOTED_VALUE_ERROR_CHARS:
                self._emit_error("unexpected-character-in-unquoted-attribute-value")
            self.attr_value.append(c)
            return state

        # SELF_CLOSING_START_TAG
        if c is EOF:
            return self._discard_tag_at_eof()
        if c == ">":
            self.current_tag.self_closing = True
            return self._emit_current_tag()
        self._emit_error("unexpected-solidus-in-tag")
        return self._step(TokenizerState.BEFORE_ATTRIBUTE_NAME, c)

    # ---------------------
    # Helper methods
    # ---------------------

    def _start_attribute(self):
        self.attr_name.clear()
        self.attr_value.clear()
        self.attr_pending = True

    def _finish_attribute(self):
        if not self.attr_pending:
            return
        self.current_tag.attrs.append(("".join(self.attr_name), "".join(self.attr_value)))
        self.attr_name.clear()
        self.attr_value.clear()
        self.attr_pending = False

    def _reopen_attribute(self):
        # Pull the last committed pair back so a legacy continuation extends it.
        attrs = self.current_tag.attrs
        if self.attr_pending or not attrs:
            return
        name, value = attrs.pop()
        self.attr_name[:] = name
        self.attr_value[:] = value
        self.attr_pending = True

    def _emit_current_tag(self):
        self._finish_attribute()
        tag = self.current_tag
        self.current_tag = None
        if tag.kind == Tag.END and tag.attrs:
            self._emit_error("end-tag-with-attributes")
        self._emit_token(tag)
        return TokenizerState.DATA

    def _discard_tag_at_eof(self):
        # An unterminated tag is dropped; only the EOF token follows.
        self._emit_error("eof-in-tag")
        self.current_tag = None
        self.attr_pending = False
        self.attr_name.clear()
        self.attr_value.clear()
        return self._step(TokenizerState.DATA, EOF)

    def _flush_text(self):
        if not self.text_buffer:
            return
        data = "".join(self.text_buffer)
        self.text_buffer.clear()
        self._emit_token(CharacterTokens(data))

    def _emit_token(self, token):
        self.sink.process_token(token)

    def _emit_error(self, code):
        opts = self.opts
        if not (opts.collect_errors or opts.strict):
            return
        error = ParseError(code, line=self.line, column=self.column)
        if opts.strict:
            raise StrictModeError(error)
        logger.debug("Tokenizer error %s", error)
        self.errors.append(error)

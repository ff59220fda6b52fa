"""Exceptions raised by the parsers and the client."""


class TurboStreamError(Exception):
    pass


class TagMismatchError(TurboStreamError):
    """An end tag does not close the element on top of the open element stack."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        if expected is None:
            msg = f"End tag </{actual}> has no open element to close"
        else:
            msg = f"End tag </{actual}> does not match open element <{expected}>"
        super().__init__(msg)


class MalformedStatusLineError(TurboStreamError):
    def __init__(self, status_line):
        self.status_line = status_line
        super().__init__(f"Malformed status line: {status_line!r}")


class IncompleteResponseError(TurboStreamError):
    pass


class ChunkSizeError(TurboStreamError):
    def __init__(self, char):
        self.char = char
        super().__init__(f"Invalid character in chunk size: {char!r}")


class StrictModeError(TurboStreamError):
    """Raised on the first tokenizer error when strict mode is on."""

    def __init__(self, error):
        self.error = error
        super().__init__(str(error))

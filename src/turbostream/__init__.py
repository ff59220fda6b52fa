from .chunked import ChunkedBodyDecoder
from .client import ClientOpts, fetch_html, send
from .errors import (
    ChunkSizeError,
    IncompleteResponseError,
    MalformedStatusLineError,
    StrictModeError,
    TagMismatchError,
    TurboStreamError,
)
from .node import Document, Element, Node, Text
from .parser import HTMLStream, parse_html
from .request import Request
from .response import ResponseParser, ResponseRecord
from .serialize import to_html, to_test_format
from .stylesheet import StyleRule, parse_stylesheet
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import ParseError
from .treebuilder import TreeBuilder

__all__ = [
    "ChunkSizeError",
    "ChunkedBodyDecoder",
    "ClientOpts",
    "Document",
    "Element",
    "HTMLStream",
    "IncompleteResponseError",
    "MalformedStatusLineError",
    "Node",
    "ParseError",
    "Request",
    "ResponseParser",
    "ResponseRecord",
    "StrictModeError",
    "StyleRule",
    "TagMismatchError",
    "Text",
    "Tokenizer",
    "TokenizerOpts",
    "TreeBuilder",
    "TurboStreamError",
    "fetch_html",
    "parse_html",
    "parse_stylesheet",
    "send",
    "to_html",
    "to_test_format",
]

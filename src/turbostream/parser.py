"""HTML parsing entry point."""

from .tokenizer import Tokenizer, TokenizerOpts
from .treebuilder import TreeBuilder


class HTMLStream:
    """Tokenizer and tree builder wired together for one parse session.

    Pass ``html`` to parse a complete string at once, or leave it out and
    call ``feed`` for every fragment followed by ``close``.
    """

    __slots__ = ("tokenizer", "tree_builder")

    def __init__(
        self,
        html=None,
        *,
        tokenizer_opts=None,
        tree_builder=None,
        stylesheet_parser=None,
        style_rules=None,
    ):
        self.tree_builder = tree_builder or TreeBuilder(stylesheet_parser=stylesheet_parser, style_rules=style_rules)
        self.tokenizer = Tokenizer(self.tree_builder, tokenizer_opts or TokenizerOpts())
        if html is not None:
            self.tokenizer.run(html)

    def feed(self, chunk):
        self.tokenizer.feed(chunk)
        return self

    def close(self):
        self.tokenizer.close()
        return self.root

    @property
    def root(self):
        return self.tree_builder.finish()

    @property
    def style_rules(self):
        return self.tree_builder.style_rules

    @property
    def errors(self):
        return self.tokenizer.errors

    @property
    def finished(self):
        return self.tree_builder.finished

    def to_test_format(self):
        return self.root.to_test_format()


def parse_html(html, **kwargs):
    return HTMLStream(html, **kwargs)
